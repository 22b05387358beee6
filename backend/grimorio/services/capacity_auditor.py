"""
Capacity Auditor

Advisory pre-check run before any write: compares, per role, the demand
of the remaining generation window (special dates folded in) with what the
employees holding that role can supply.

Per employee:
    available_days = window days - availability exceptions in the window
    quota_days     = full-time: max(0, days in month - free days - days already worked)
                     others:    available_days
    capacity_days  = min(quota_days, available_days)
    capacity_hours = capacity_days * weekly_max_hours / 5

Nothing here blocks generation.
"""

from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Set

from grimorio.schemas.scheduling import ShiftGenerationWarning, WarningKind
from grimorio.services.demand_resolver import DemandLine
from grimorio.services.generation_state import GenerationState
from grimorio.services.month_calendar import weekday_name
from grimorio.services.roster import Roster, RosterEntry
from grimorio.services.work_hours import TWO_PLACES

WORKING_DAYS_PER_WEEK = Decimal(5)


class RoleDemand:
    def __init__(self, work_role_id: int, work_role_name: str, work_area_name: str):
        self.work_role_id = work_role_id
        self.work_role_name = work_role_name
        self.work_area_name = work_area_name
        self.required_days = 0
        self.required_hours = Decimal("0")


class CapacityAuditor:

    def __init__(
        self,
        roster: Roster,
        state: GenerationState,
        unavailable_by_employee: Dict[int, Set[date]],
        days_in_month: int,
        window_start: date,
        window_end: date
    ):
        self.roster = roster
        self.state = state
        self.unavailable_by_employee = unavailable_by_employee
        self.days_in_month = days_in_month
        self.window_start = window_start
        self.window_end = window_end

    def aggregate_demand(self, demand_by_date: Dict[date, List[DemandLine]]) -> "OrderedDict[int, RoleDemand]":
        per_role: "OrderedDict[int, RoleDemand]" = OrderedDict()
        for target_date in sorted(demand_by_date):
            if target_date < self.window_start or target_date > self.window_end:
                continue
            for line in demand_by_date[target_date]:
                role = per_role.get(line.work_role_id)
                if role is None:
                    role = RoleDemand(line.work_role_id, line.work_role_name, line.work_area_name)
                    per_role[line.work_role_id] = role
                role.required_days += line.required_count
                role.required_hours += line.required_hours
        return per_role

    def available_days(self, entry: RosterEntry) -> int:
        window_days = (self.window_end - self.window_start).days + 1
        exceptions = [
            d for d in self.unavailable_by_employee.get(entry.employee_id, ())
            if self.window_start <= d <= self.window_end
        ]
        return max(0, window_days - len(exceptions))

    def capacity_days(self, entry: RosterEntry) -> int:
        available = self.available_days(entry)
        if entry.is_full_time:
            quota_days = max(
                0,
                entry.working_days_target(self.days_in_month) - self.state.assigned_days(entry.employee_id)
            )
        else:
            quota_days = available
        return min(quota_days, available)

    def _warning(self, role: RoleDemand, capacity_days: int, reason: str) -> ShiftGenerationWarning:
        return ShiftGenerationWarning(
            kind=WarningKind.CAPACITY,
            date=self.window_start,
            weekday=weekday_name(self.window_start),
            work_area_name=role.work_area_name,
            work_role_name=role.work_role_name,
            required_count=role.required_days,
            assigned_count=capacity_days,
            reason=reason
        )

    def audit(self, demand_by_date: Dict[date, List[DemandLine]]) -> List[ShiftGenerationWarning]:
        warnings: List[ShiftGenerationWarning] = []

        for role in self.aggregate_demand(demand_by_date).values():
            holders = self.roster.holders_of(role.work_role_id)
            if not holders:
                warnings.append(self._warning(
                    role, 0,
                    f"No eligible employees for role '{role.work_role_name}'"
                ))
                continue

            capacity_days = 0
            capacity_hours = Decimal("0")
            for entry, _ in holders:
                days = self.capacity_days(entry)
                capacity_days += days
                capacity_hours += Decimal(days) * entry.weekly_max_hours / WORKING_DAYS_PER_WEEK

            capacity_hours = capacity_hours.quantize(TWO_PLACES)
            required_hours = role.required_hours.quantize(TWO_PLACES)

            if capacity_days < role.required_days:
                warnings.append(self._warning(
                    role, capacity_days,
                    f"Day capacity shortfall: {capacity_days} available vs {role.required_days} required "
                    f"(missing {role.required_days - capacity_days} days)"
                ))

            if capacity_hours < required_hours:
                warnings.append(self._warning(
                    role, capacity_days,
                    f"Hour capacity shortfall: {capacity_hours}h available vs {required_hours}h required "
                    f"(missing {required_hours - capacity_hours}h)"
                ))
            elif capacity_hours > required_hours:
                warnings.append(self._warning(
                    role, capacity_days,
                    f"Hour capacity surplus: {capacity_hours}h available vs {required_hours}h required "
                    f"(surplus {capacity_hours - required_hours}h)"
                ))

        return warnings
