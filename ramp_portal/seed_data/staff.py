"""Program staff. ``e6`` is the manager lead whose team goes through manager review."""

INITIAL_EMPLOYEES = [
    {"id": "e1", "email": "director@ramp.example.org", "first_name": "Dana", "last_name": "Whitfield",
     "role": "MASTER_ADMIN", "wage": 0, "planned_program_budget": 30000.00, "fte_operational_hours": 1040},
    {"id": "e2", "email": "finance@ramp.example.org", "first_name": "Marcus", "last_name": "Bell",
     "role": "ADMIN", "wage": 0, "planned_program_budget": 20000.00, "fte_operational_hours": 800},
    {"id": "e3", "email": "instructor.lee@ramp.example.org", "first_name": "Priya", "last_name": "Lee",
     "role": "EMPLOYEE", "wage": 32.50, "planned_program_budget": 12000.00, "fte_operational_hours": 369},
    {"id": "e4", "email": "instructor.ortiz@ramp.example.org", "first_name": "Luis", "last_name": "Ortiz",
     "role": "EMPLOYEE", "wage": 0, "planned_program_budget": 9000.00, "fte_operational_hours": 450},
    {"id": "e5", "email": "coordinator@ramp.example.org", "first_name": "Hannah", "last_name": "Kim",
     "role": "EMPLOYEE", "wage": 24.00, "planned_program_budget": 6719.16, "fte_operational_hours": 280},
    {"id": "e6", "email": "lead@ramp.example.org", "first_name": "Corey", "last_name": "James",
     "role": "MANAGER", "wage": 0, "planned_program_budget": 10000.00, "fte_operational_hours": 500},
    {"id": "e7", "email": "mentor.ade@ramp.example.org", "first_name": "Tobi", "last_name": "Ade",
     "role": "EMPLOYEE", "wage": 20.00, "planned_program_budget": 5000.00, "fte_operational_hours": 250,
     "manager_id": "e6"},
    {"id": "e8", "email": "mentor.ross@ramp.example.org", "first_name": "Avery", "last_name": "Ross",
     "role": "EMPLOYEE", "wage": 20.00, "planned_program_budget": 5000.00, "fte_operational_hours": 250,
     "manager_id": "e6"},
    {"id": "e9", "email": "training@partner.example.com", "first_name": "Sam", "last_name": "Okafor",
     "role": "INDUSTRY_PARTNER", "wage": 55.00, "planned_program_budget": 25000.00,
     "fte_operational_hours": 450, "company_name": "Midwest Logistics Training"},
]
