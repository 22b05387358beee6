"""
Eligibility Filter

Decides whether an (employee, role, date) triple may receive a shift and
ranks the admissible candidates of one demand slot.

Admissible when ALL hold:
- no availability exception on the date
- no other assignment on the date (this run or earlier in the month)
- full-time: assigned days < days in month - free days quota
- full-time: date is not one of the planned rest days
- hours in the date's 7-day window + shift hours <= weekly max hours

Ranking (first wins): remaining days owed desc, primary role first,
role priority asc, month hours asc, month days asc, employee id asc.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Set, Tuple

from grimorio.services.generation_state import GenerationState
from grimorio.services.roster import RoleHolding, RosterEntry

REASON_NO_EMPLOYEES = "No employees with this role"
REASON_UNAVAILABLE = "Employees unavailable or already assigned"
REASON_LIMITS = "Hour or free-day limits reached"

Candidate = Tuple[RosterEntry, RoleHolding]


class EligibilityFilter:

    def __init__(
        self,
        days_in_month: int,
        state: GenerationState,
        unavailable_by_employee: Dict[int, Set[date]],
        planned_off_by_employee: Dict[int, Set[date]]
    ):
        self.days_in_month = days_in_month
        self.state = state
        self.unavailable_by_employee = unavailable_by_employee
        self.planned_off_by_employee = planned_off_by_employee

    def is_unavailable(self, entry: RosterEntry, target_date: date) -> bool:
        return target_date in self.unavailable_by_employee.get(entry.employee_id, ())

    def can_work_more_days(self, entry: RosterEntry) -> bool:
        if not entry.is_full_time:
            return True
        return self.state.assigned_days(entry.employee_id) < entry.working_days_target(self.days_in_month)

    def is_planned_off(self, entry: RosterEntry, target_date: date) -> bool:
        if not entry.is_full_time:
            return False
        return target_date in self.planned_off_by_employee.get(entry.employee_id, ())

    def fits_weekly_cap(self, entry: RosterEntry, target_date: date, shift_hours: Decimal) -> bool:
        week_hours = self.state.hours_in_week_of(entry.employee_id, target_date)
        return week_hours + shift_hours <= entry.weekly_max_hours

    def is_admissible(self, entry: RosterEntry, target_date: date, shift_hours: Decimal) -> bool:
        if self.is_unavailable(entry, target_date):
            return False
        if self.state.is_assigned(entry.employee_id, target_date):
            return False
        if not self.can_work_more_days(entry):
            return False
        if self.is_planned_off(entry, target_date):
            return False
        return self.fits_weekly_cap(entry, target_date, shift_hours)

    def remaining_days_owed(self, entry: RosterEntry) -> int:
        assigned = self.state.assigned_days(entry.employee_id)
        if entry.is_full_time:
            return max(0, entry.working_days_target(self.days_in_month) - assigned)
        return max(0, self.days_in_month - assigned)

    def _rank_key(self, candidate: Candidate):
        entry, holding = candidate
        return (
            -self.remaining_days_owed(entry),
            0 if holding.is_primary else 1,
            holding.priority,
            self.state.hours_of(entry.employee_id),
            self.state.assigned_days(entry.employee_id),
            entry.employee_id,
        )

    def ranked_candidates(
        self,
        pool: List[Candidate],
        target_date: date,
        shift_hours: Decimal
    ) -> List[Candidate]:
        eligible = [c for c in pool if self.is_admissible(c[0], target_date, shift_hours)]
        return sorted(eligible, key=self._rank_key)

    def shortfall_reason(self, pool: List[Candidate], target_date: date) -> str:
        """First applicable reason, checked against the unfiltered pool."""
        if not pool:
            return REASON_NO_EMPLOYEES
        if any(
            self.is_unavailable(entry, target_date) or self.state.is_assigned(entry.employee_id, target_date)
            for entry, _ in pool
        ):
            return REASON_UNAVAILABLE
        return REASON_LIMITS
