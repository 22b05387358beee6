"""
In-memory roster indices for one generation run.

Built once from the branch's active EmployeeWorkRole rows so the engine
never goes back to the database while allocating.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from grimorio.models.employee import ContractType
from grimorio.models.work_area import EmployeeWorkRole


class RoleHolding:
    """One role an employee may perform, with its ranking attributes."""

    def __init__(self, work_role_id: int, is_primary: bool, priority: int):
        self.work_role_id = work_role_id
        self.is_primary = bool(is_primary)
        self.priority = priority if priority is not None else 1


class RosterEntry:
    """Read-only snapshot of a schedulable employee."""

    def __init__(
        self,
        employee_id: int,
        name: str,
        contract_type: ContractType,
        weekly_max_hours: Decimal,
        free_days_per_month: int
    ):
        self.employee_id = employee_id
        self.name = name
        self.contract_type = contract_type
        self.weekly_max_hours = Decimal(weekly_max_hours or 0)
        self.free_days_per_month = free_days_per_month or 0
        self.roles: Dict[int, RoleHolding] = {}

    @property
    def is_full_time(self) -> bool:
        return self.contract_type == ContractType.FULL_TIME

    @property
    def role_ids(self) -> List[int]:
        return sorted(self.roles)

    def holding(self, work_role_id: int) -> Optional[RoleHolding]:
        return self.roles.get(work_role_id)

    def working_days_target(self, days_in_month: int) -> int:
        """Days a full-time employee must work this month."""
        return max(0, days_in_month - self.free_days_per_month)


class Roster:
    def __init__(self, entries: Dict[int, RosterEntry]):
        self.entries = entries
        holders: Dict[int, List[RosterEntry]] = defaultdict(list)
        for entry in sorted(entries.values(), key=lambda e: e.employee_id):
            for role_id in entry.role_ids:
                holders[role_id].append(entry)
        self._holders_by_role = dict(holders)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(sorted(self.entries.values(), key=lambda e: e.employee_id))

    def get(self, employee_id: int) -> Optional[RosterEntry]:
        return self.entries.get(employee_id)

    def holders_of(self, work_role_id: int) -> List[Tuple[RosterEntry, RoleHolding]]:
        return [
            (entry, entry.roles[work_role_id])
            for entry in self._holders_by_role.get(work_role_id, [])
        ]

    def full_time(self) -> List[RosterEntry]:
        return [entry for entry in self if entry.is_full_time]

    @classmethod
    def from_work_roles(cls, employee_work_roles: Iterable[EmployeeWorkRole]) -> "Roster":
        entries: Dict[int, RosterEntry] = {}
        for ewr in employee_work_roles:
            employee = ewr.employee
            if employee is None:
                continue
            entry = entries.get(employee.id)
            if entry is None:
                entry = RosterEntry(
                    employee_id=employee.id,
                    name=employee.name,
                    contract_type=employee.contract_type,
                    weekly_max_hours=employee.weekly_max_hours,
                    free_days_per_month=employee.free_days_per_month
                )
                entries[employee.id] = entry
            entry.roles[ewr.work_role_id] = RoleHolding(
                work_role_id=ewr.work_role_id,
                is_primary=ewr.is_primary,
                priority=ewr.priority
            )
        return cls(entries)
