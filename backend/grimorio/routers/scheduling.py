import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from grimorio.database import get_db
from grimorio.schemas.scheduling import (
    ApproveShiftRequest,
    CapacityCheckResponse,
    GenerateMonthlyShiftsRequest,
    PlannedOffDaysResponse,
    SchedulableEmployeeResponse,
    ScheduleConfigurationResponse,
    ScheduleConfigurationUpdate,
    ShiftAssignmentCreate,
    ShiftAssignmentResponse,
    ShiftGenerationResult,
)
from grimorio.services.shift_generation_service import (
    MAX_YEAR,
    MIN_YEAR,
    ShiftGenerationError,
    ShiftGenerationService,
)
from grimorio.services.shift_query_service import ShiftQueryService, assignment_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduling", tags=["Scheduling"])


def get_today() -> date:
    return date.today()


def _generation_error(e: ShiftGenerationError) -> HTTPException:
    return HTTPException(status_code=400, detail={"message": e.message, "error_code": e.error_code})


@router.post("/shifts/generate", response_model=ShiftGenerationResult)
def generate_monthly_shifts(
    request: GenerateMonthlyShiftsRequest,
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    try:
        return ShiftGenerationService(db, today=today).generate(request.branch_id, request.year, request.month)
    except ShiftGenerationError as e:
        raise _generation_error(e)


@router.get("/shifts/capacity-check", response_model=CapacityCheckResponse)
def capacity_check(
    branch_id: int,
    year: int,
    month: int,
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    try:
        return ShiftGenerationService(db, today=today).check_capacity(branch_id, year, month)
    except ShiftGenerationError as e:
        raise _generation_error(e)


@router.get("/shifts/planned-off-days", response_model=PlannedOffDaysResponse)
def planned_off_days(
    branch_id: int,
    year: int,
    month: int,
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    try:
        return ShiftGenerationService(db, today=today).plan_off_days(branch_id, year, month)
    except ShiftGenerationError as e:
        raise _generation_error(e)


@router.get("/shifts", response_model=List[ShiftAssignmentResponse])
def list_monthly_shifts(
    branch_id: int,
    year: int = Query(..., ge=MIN_YEAR, le=MAX_YEAR),
    month: int = Query(..., ge=1, le=12),
    employee_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    shifts = ShiftQueryService(db).list_monthly_shifts(branch_id, year, month, employee_id)
    return [assignment_to_response(s) for s in shifts]


@router.get("/shifts/by-date", response_model=List[ShiftAssignmentResponse])
def list_shifts_by_date(branch_id: int, target_date: date, db: Session = Depends(get_db)):
    shifts = ShiftQueryService(db).shifts_by_date(branch_id, target_date)
    return [assignment_to_response(s) for s in shifts]


@router.get("/shifts/free-employees")
def list_free_employees(branch_id: int, target_date: date, db: Session = Depends(get_db)):
    employees = ShiftQueryService(db).free_employees(branch_id, target_date)
    return [
        {
            "id": e.id,
            "name": e.name,
            "contract_type": e.contract_type.value if e.contract_type else None
        }
        for e in employees
    ]


@router.get("/employees/eligible", response_model=List[SchedulableEmployeeResponse])
def list_schedulable_employees(branch_id: int, db: Session = Depends(get_db)):
    return ShiftQueryService(db).schedulable_employees(branch_id)


@router.post("/shifts", response_model=ShiftAssignmentResponse)
def create_shift(data: ShiftAssignmentCreate, db: Session = Depends(get_db)):
    service = ShiftQueryService(db)
    try:
        assignment = service.create_assignment(data)
    except ValueError as e:
        logger.info("Manual shift rejected for employee %s: %s", data.employee_id, e)
        raise HTTPException(status_code=400, detail=str(e))
    return assignment_to_response(service.get_assignment(assignment.id))


@router.post("/shifts/{assignment_id}/approve", response_model=ShiftAssignmentResponse)
def approve_shift(assignment_id: int, data: ApproveShiftRequest, db: Session = Depends(get_db)):
    service = ShiftQueryService(db)
    assignment = service.get_assignment(assignment_id)
    if not assignment:
        raise HTTPException(status_code=404, detail="Shift not found")
    return assignment_to_response(service.approve(assignment, data.approved_by))


@router.delete("/shifts/{assignment_id}")
def delete_shift(assignment_id: int, db: Session = Depends(get_db)):
    service = ShiftQueryService(db)
    assignment = service.get_assignment(assignment_id)
    if not assignment:
        raise HTTPException(status_code=404, detail="Shift not found")
    service.soft_delete(assignment)
    return {"success": True, "message": "Shift deleted"}


@router.get("/configuration", response_model=ScheduleConfigurationResponse)
def get_configuration(branch_id: int, db: Session = Depends(get_db)):
    return ShiftQueryService(db).configuration(branch_id)


@router.put("/configuration", response_model=ScheduleConfigurationResponse)
def save_configuration(data: ScheduleConfigurationUpdate, db: Session = Depends(get_db)):
    service = ShiftQueryService(db)
    try:
        return service.save_configuration(data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
