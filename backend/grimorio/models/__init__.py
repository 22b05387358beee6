from .branch import Branch
from .employee import Employee, ContractType
from .work_area import WorkArea, WorkRole, EmployeeWorkRole
from .availability import EmployeeAvailability
from .shift_template import ShiftTemplate
from .special_date import SpecialDate, SpecialDateTemplate
from .shift_assignment import ShiftAssignment
from .schedule_configuration import ScheduleConfiguration
from .audit_log import AuditLog, AuditAction

__all__ = [
    "Branch",
    "Employee",
    "ContractType",
    "WorkArea",
    "WorkRole",
    "EmployeeWorkRole",
    "EmployeeAvailability",
    "ShiftTemplate",
    "SpecialDate",
    "SpecialDateTemplate",
    "ShiftAssignment",
    "ScheduleConfiguration",
    "AuditLog",
    "AuditAction",
]
