"""
Initial program data loaded by ``flask seed-db`` / POST /api/v1/admin/seed.

 9 Employees  (admins, a manager lead with two reports, staff, one partner)
 4 Shifts     (each with ordered modules)
 3 Cohorts
 7 Tooltips
"""

from ramp_portal.seed_data.program import INITIAL_COHORTS, INITIAL_SHIFTS, INITIAL_TOOLTIPS
from ramp_portal.seed_data.staff import INITIAL_EMPLOYEES

__all__ = ["INITIAL_EMPLOYEES", "INITIAL_SHIFTS", "INITIAL_COHORTS", "INITIAL_TOOLTIPS"]
