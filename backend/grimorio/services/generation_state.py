from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Set

from grimorio.models.shift_assignment import ShiftAssignment
from grimorio.services.month_calendar import week_index


class GenerationState:
    """
    Running totals of one generation run.

    Seeded with the assignments that precede the generation start so the
    monthly quotas and weekly caps count days already worked this month.
    """

    def __init__(self):
        self.assigned_dates: Dict[int, Set[date]] = defaultdict(set)
        self.total_hours: Dict[int, Decimal] = defaultdict(Decimal)
        self.week_hours: Dict[int, Dict[int, Decimal]] = defaultdict(lambda: defaultdict(Decimal))

    @classmethod
    def seeded_from(cls, assignments: Iterable[ShiftAssignment]) -> "GenerationState":
        state = cls()
        for assignment in assignments:
            state.track(assignment.employee_id, assignment.date, Decimal(assignment.worked_hours or 0))
        return state

    def track(self, employee_id: int, target_date: date, hours: Decimal) -> None:
        self.assigned_dates[employee_id].add(target_date)
        self.total_hours[employee_id] += hours
        self.week_hours[employee_id][week_index(target_date)] += hours

    def is_assigned(self, employee_id: int, target_date: date) -> bool:
        return target_date in self.assigned_dates.get(employee_id, ())

    def assigned_days(self, employee_id: int) -> int:
        return len(self.assigned_dates.get(employee_id, ()))

    def hours_of(self, employee_id: int) -> Decimal:
        return self.total_hours.get(employee_id, Decimal("0"))

    def hours_in_week_of(self, employee_id: int, target_date: date) -> Decimal:
        weeks = self.week_hours.get(employee_id)
        if not weeks:
            return Decimal("0")
        return weeks.get(week_index(target_date), Decimal("0"))

    def dates_of(self, employee_id: int) -> Set[date]:
        return set(self.assigned_dates.get(employee_id, ()))
