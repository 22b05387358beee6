from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime, time
from enum import Enum
from grimorio.models.employee import ContractType


class WarningKind(str, Enum):
    """Origin of a generation warning"""
    COVERAGE = "coverage"
    CAPACITY = "capacity"
    QUOTA = "quota"
    PLANNED_OFF_DAY = "planned_off_day"


class GenerateMonthlyShiftsRequest(BaseModel):
    branch_id: int
    year: int
    month: int


class ShiftAssignmentResponse(BaseModel):
    id: Optional[int] = None
    employee_id: int
    employee_name: str
    date: date
    start_time: time
    end_time: time
    break_minutes: Optional[int] = None
    lunch_minutes: Optional[int] = None
    work_area_id: int
    work_area_name: str
    work_area_color: str
    work_role_id: int
    work_role_name: str
    worked_hours: float
    notes: Optional[str] = None
    is_approved: bool = False
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None


class ShiftGenerationWarning(BaseModel):
    kind: WarningKind = WarningKind.COVERAGE
    date: date
    weekday: str
    work_area_name: str = ""
    work_role_name: str = ""
    required_count: int = 0
    assigned_count: int = 0
    reason: str
    employee_id: Optional[int] = None
    employee_name: Optional[str] = None


class ShiftGenerationResult(BaseModel):
    assignments: List[ShiftAssignmentResponse] = []
    warnings: List[ShiftGenerationWarning] = []
    total_shifts_generated: int = 0
    total_shifts_not_covered: int = 0


class CapacityCheckResponse(BaseModel):
    branch_id: int
    year: int
    month: int
    generation_start: date
    warnings: List[ShiftGenerationWarning] = []


class PlannedOffDays(BaseModel):
    employee_id: int
    employee_name: str
    free_days_per_month: int
    planned_dates: List[date] = []


class PlannedOffDaysResponse(BaseModel):
    branch_id: int
    year: int
    month: int
    plans: List[PlannedOffDays] = []


class ShiftAssignmentCreate(BaseModel):
    branch_id: int
    employee_id: int
    date: date
    start_time: time
    end_time: time
    break_minutes: Optional[int] = Field(default=None, ge=0)
    lunch_minutes: Optional[int] = Field(default=None, ge=0)
    work_area_id: int
    work_role_id: int
    notes: Optional[str] = None

    @field_validator("end_time")
    @classmethod
    def validate_window(cls, v, info):
        start = info.data.get("start_time")
        if start is not None and v <= start:
            raise ValueError("end_time must be after start_time")
        return v


class ApproveShiftRequest(BaseModel):
    approved_by: int


class EmployeeWorkRoleResponse(BaseModel):
    work_role_id: int
    work_role_name: str
    work_area_name: str
    is_primary: bool
    priority: int


class SchedulableEmployeeResponse(BaseModel):
    id: int
    name: str
    contract_type: ContractType
    weekly_min_hours: float
    weekly_max_hours: float
    free_days_per_month: int
    work_roles: List[EmployeeWorkRoleResponse] = []

    class Config:
        from_attributes = True


class ScheduleConfigurationResponse(BaseModel):
    branch_id: int
    hours_per_day: float
    free_day_color: str


class ScheduleConfigurationUpdate(BaseModel):
    branch_id: int
    hours_per_day: float = Field(default=8.0, gt=0, le=24)
    free_day_color: str = Field(default="#E8E8E8", pattern=r"^#[0-9A-Fa-f]{6}$")
