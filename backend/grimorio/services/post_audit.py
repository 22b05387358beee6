from datetime import date
from typing import Dict, List, Set

from grimorio.schemas.scheduling import ShiftGenerationWarning, WarningKind
from grimorio.services.generation_state import GenerationState
from grimorio.services.month_calendar import weekday_name
from grimorio.services.roster import Roster


class PostAudit:
    """
    Compares the realized month with the free-day quotas and the planned
    rest days of full-time employees. Only reports; nothing is reverted.
    """

    def __init__(
        self,
        roster: Roster,
        state: GenerationState,
        planned_off_by_employee: Dict[int, Set[date]],
        days_in_month: int,
        month_end: date
    ):
        self.roster = roster
        self.state = state
        self.planned_off_by_employee = planned_off_by_employee
        self.days_in_month = days_in_month
        self.month_end = month_end

    def run(self) -> List[ShiftGenerationWarning]:
        warnings: List[ShiftGenerationWarning] = []

        for entry in self.roster.full_time():
            target = entry.working_days_target(self.days_in_month)
            realized = self.state.assigned_days(entry.employee_id)

            if realized != target:
                gap = target - realized
                detail = f"short by {gap} days" if gap > 0 else f"over by {-gap} days"
                warnings.append(ShiftGenerationWarning(
                    kind=WarningKind.QUOTA,
                    date=self.month_end,
                    weekday=weekday_name(self.month_end),
                    required_count=target,
                    assigned_count=realized,
                    reason=(
                        f"{entry.name}: {realized} working days assigned vs {target} expected "
                        f"({entry.free_days_per_month} free days), {detail}"
                    ),
                    employee_id=entry.employee_id,
                    employee_name=entry.name
                ))

            worked = self.state.dates_of(entry.employee_id)
            for planned in sorted(self.planned_off_by_employee.get(entry.employee_id, ())):
                if planned in worked:
                    warnings.append(ShiftGenerationWarning(
                        kind=WarningKind.PLANNED_OFF_DAY,
                        date=planned,
                        weekday=weekday_name(planned),
                        required_count=0,
                        assigned_count=1,
                        reason=f"{entry.name} is assigned on a planned rest day",
                        employee_id=entry.employee_id,
                        employee_name=entry.name
                    ))

        return warnings
