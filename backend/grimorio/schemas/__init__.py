from .scheduling import (
    WarningKind,
    GenerateMonthlyShiftsRequest,
    ShiftAssignmentResponse,
    ShiftGenerationWarning,
    ShiftGenerationResult,
    CapacityCheckResponse,
    PlannedOffDays,
    PlannedOffDaysResponse,
    ShiftAssignmentCreate,
    ApproveShiftRequest,
    EmployeeWorkRoleResponse,
    SchedulableEmployeeResponse,
    ScheduleConfigurationResponse,
    ScheduleConfigurationUpdate,
)

__all__ = [
    "WarningKind",
    "GenerateMonthlyShiftsRequest",
    "ShiftAssignmentResponse",
    "ShiftGenerationWarning",
    "ShiftGenerationResult",
    "CapacityCheckResponse",
    "PlannedOffDays",
    "PlannedOffDaysResponse",
    "ShiftAssignmentCreate",
    "ApproveShiftRequest",
    "EmployeeWorkRoleResponse",
    "SchedulableEmployeeResponse",
    "ScheduleConfigurationResponse",
    "ScheduleConfigurationUpdate",
]
