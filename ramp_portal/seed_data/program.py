"""Shift schedule, cohorts and help text."""

INITIAL_SHIFTS = [
    {"id": 1, "name": "Shift 1 — Foundations", "planned_start": "2025-01-06", "planned_end": "2025-03-28",
     "planned_budget": 30000.00,
     "modules": [
         {"name": "Orientation & Safety", "planned_start": "2025-01-06", "planned_end": "2025-01-17"},
         {"name": "Warehouse Fundamentals", "planned_start": "2025-01-20", "planned_end": "2025-02-28"},
         {"name": "Forklift Certification", "planned_start": "2025-03-03", "planned_end": "2025-03-28"},
     ]},
    {"id": 2, "name": "Shift 2 — Applied Operations", "planned_start": "2025-04-07", "planned_end": "2025-06-27",
     "planned_budget": 35000.00,
     "modules": [
         {"name": "Inventory Systems", "planned_start": "2025-04-07", "planned_end": "2025-05-09"},
         {"name": "Supply Chain Basics", "planned_start": "2025-05-12", "planned_end": "2025-06-27"},
     ]},
    {"id": 3, "name": "Shift 3 — Industry Placement", "planned_start": "2025-07-07", "planned_end": "2025-09-26",
     "planned_budget": 40000.00,
     "modules": [
         {"name": "Partner Site Rotation", "planned_start": "2025-07-07", "planned_end": "2025-08-29"},
         {"name": "Capstone Project", "planned_start": "2025-09-01", "planned_end": "2025-09-26"},
     ]},
    {"id": 4, "name": "Shift 4 — Placement & Follow-up", "planned_start": "2025-10-06", "planned_end": "2025-12-19",
     "planned_budget": 38069.00,
     "modules": [
         {"name": "Job Placement", "planned_start": "2025-10-06", "planned_end": "2025-11-14"},
         {"name": "Retention Check-ins", "planned_start": "2025-11-17", "planned_end": "2025-12-19"},
     ]},
]

INITIAL_COHORTS = [
    {"id": "c1", "name": "Cohort A", "description": "Morning cohort, Shifts 1–2"},
    {"id": "c2", "name": "Cohort B", "description": "Evening cohort, Shifts 1–2"},
    {"id": "c3", "name": "Cohort C", "description": "Placement cohort, Shifts 3–4"},
]

INITIAL_TOOLTIPS = {
    "week_ending": "The Saturday that closes the pay week you are reporting.",
    "actual_hours": "Hours actually worked on the program this week.",
    "budget_category": "Grant budget line the hours are charged to. Marketing needs pre-approval.",
    "journal_entry": "What you worked on. Auditors read this.",
    "equipment_cost": "Equipment purchased this week. Attach the receipt.",
    "supplies_cost": "Consumable supplies purchased this week. Attach the receipt.",
    "distance_miles": "Round-trip business miles, reimbursed at the program mileage rate.",
}
