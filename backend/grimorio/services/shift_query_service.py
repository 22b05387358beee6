"""
Shift Query Service

Read side of the monthly schedule plus the manual actions a manager takes
on single assignments (create, approve, delete).
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from grimorio.models import (
    AuditAction,
    AuditLog,
    Branch,
    Employee,
    EmployeeWorkRole,
    ScheduleConfiguration,
    ShiftAssignment,
    WorkArea,
    WorkRole,
)
from grimorio.schemas.scheduling import (
    EmployeeWorkRoleResponse,
    SchedulableEmployeeResponse,
    ScheduleConfigurationResponse,
    ScheduleConfigurationUpdate,
    ShiftAssignmentCreate,
    ShiftAssignmentResponse,
)
from grimorio.services.month_calendar import month_bounds
from grimorio.services.work_hours import calculate_worked_hours, to_hours_float

logger = logging.getLogger(__name__)


def assignment_to_response(assignment: ShiftAssignment) -> ShiftAssignmentResponse:
    work_area = assignment.work_area
    work_role = assignment.work_role
    return ShiftAssignmentResponse(
        id=assignment.id,
        employee_id=assignment.employee_id,
        employee_name=assignment.employee.name if assignment.employee else "",
        date=assignment.date,
        start_time=assignment.start_time,
        end_time=assignment.end_time,
        break_minutes=assignment.break_minutes,
        lunch_minutes=assignment.lunch_minutes,
        work_area_id=assignment.work_area_id,
        work_area_name=work_area.name if work_area else "",
        work_area_color=work_area.color if work_area else "#808080",
        work_role_id=assignment.work_role_id,
        work_role_name=work_role.name if work_role else "",
        worked_hours=to_hours_float(assignment.worked_hours),
        notes=assignment.notes,
        is_approved=bool(assignment.is_approved),
        approved_by=assignment.approved_by,
        approved_at=assignment.approved_at
    )


class ShiftQueryService:

    def __init__(self, db: Session):
        self.db = db

    def _active_assignments(self):
        return self.db.query(ShiftAssignment).options(
            joinedload(ShiftAssignment.employee),
            joinedload(ShiftAssignment.work_area),
            joinedload(ShiftAssignment.work_role)
        ).filter(ShiftAssignment.is_deleted == False)

    def get_assignment(self, assignment_id: int) -> Optional[ShiftAssignment]:
        return self._active_assignments().filter(ShiftAssignment.id == assignment_id).first()

    def list_monthly_shifts(
        self,
        branch_id: int,
        year: int,
        month: int,
        employee_id: Optional[int] = None
    ) -> List[ShiftAssignment]:
        month_start, month_end, _ = month_bounds(year, month)
        query = self._active_assignments().filter(
            ShiftAssignment.branch_id == branch_id,
            ShiftAssignment.date >= month_start,
            ShiftAssignment.date <= month_end
        )
        if employee_id:
            query = query.filter(ShiftAssignment.employee_id == employee_id)
        return query.order_by(ShiftAssignment.date, ShiftAssignment.start_time, ShiftAssignment.id).all()

    def shifts_by_date(self, branch_id: int, target_date: date) -> List[ShiftAssignment]:
        return self._active_assignments().filter(
            ShiftAssignment.branch_id == branch_id,
            ShiftAssignment.date == target_date
        ).order_by(ShiftAssignment.start_time, ShiftAssignment.id).all()

    def _employees_with_roles(self, branch_id: int):
        return self.db.query(Employee).join(
            EmployeeWorkRole, EmployeeWorkRole.employee_id == Employee.id
        ).join(
            WorkRole, EmployeeWorkRole.work_role_id == WorkRole.id
        ).filter(
            Employee.branch_id == branch_id,
            Employee.is_active == True,
            EmployeeWorkRole.is_deleted == False,
            WorkRole.is_deleted == False
        ).distinct()

    def free_employees(self, branch_id: int, target_date: date) -> List[Employee]:
        """Active employees holding a role with no assignment on the date."""
        busy = [
            row.employee_id for row in self.db.query(ShiftAssignment.employee_id).filter(
                ShiftAssignment.branch_id == branch_id,
                ShiftAssignment.date == target_date,
                ShiftAssignment.is_deleted == False
            ).all()
        ]
        return self._employees_with_roles(branch_id).filter(
            Employee.id.notin_(busy)
        ).order_by(Employee.name, Employee.id).all()

    def schedulable_employees(self, branch_id: int) -> List[SchedulableEmployeeResponse]:
        employees = self._employees_with_roles(branch_id).order_by(Employee.name, Employee.id).all()
        if not employees:
            return []

        work_roles = self.db.query(EmployeeWorkRole).options(
            joinedload(EmployeeWorkRole.work_role).joinedload(WorkRole.work_area)
        ).join(
            WorkRole, EmployeeWorkRole.work_role_id == WorkRole.id
        ).filter(
            EmployeeWorkRole.employee_id.in_([e.id for e in employees]),
            EmployeeWorkRole.is_deleted == False,
            WorkRole.is_deleted == False
        ).all()

        roles_by_employee = {}
        for ewr in sorted(work_roles, key=lambda r: (not r.is_primary, r.priority, r.work_role_id)):
            roles_by_employee.setdefault(ewr.employee_id, []).append(EmployeeWorkRoleResponse(
                work_role_id=ewr.work_role_id,
                work_role_name=ewr.work_role.name,
                work_area_name=ewr.work_role.work_area.name if ewr.work_role.work_area else "",
                is_primary=bool(ewr.is_primary),
                priority=ewr.priority
            ))

        return [
            SchedulableEmployeeResponse(
                id=employee.id,
                name=employee.name,
                contract_type=employee.contract_type,
                weekly_min_hours=float(employee.weekly_min_hours or 0),
                weekly_max_hours=float(employee.weekly_max_hours or 0),
                free_days_per_month=employee.free_days_per_month or 0,
                work_roles=roles_by_employee.get(employee.id, [])
            )
            for employee in employees
        ]

    def create_assignment(self, data: ShiftAssignmentCreate) -> ShiftAssignment:
        """
        Manual assignment. Raises ValueError when the employee cannot take it.
        """
        employee = self.db.query(Employee).filter(
            Employee.id == data.employee_id,
            Employee.branch_id == data.branch_id,
            Employee.is_active == True
        ).first()
        if not employee:
            raise ValueError("Employee not found in this branch")

        work_role = self.db.query(WorkRole).filter(
            WorkRole.id == data.work_role_id,
            WorkRole.work_area_id == data.work_area_id,
            WorkRole.is_deleted == False
        ).first()
        if not work_role:
            raise ValueError("Work role does not belong to the work area")

        area = self.db.query(WorkArea).filter(
            WorkArea.id == data.work_area_id,
            WorkArea.branch_id == data.branch_id,
            WorkArea.is_deleted == False
        ).first()
        if not area:
            raise ValueError("Work area not found in this branch")

        already_assigned = self.db.query(ShiftAssignment).filter(
            ShiftAssignment.employee_id == data.employee_id,
            ShiftAssignment.date == data.date,
            ShiftAssignment.is_deleted == False
        ).first()
        if already_assigned:
            raise ValueError(f"Employee already has a shift on {data.date.isoformat()}")

        assignment = ShiftAssignment(
            branch_id=data.branch_id,
            employee_id=data.employee_id,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
            break_minutes=data.break_minutes,
            lunch_minutes=data.lunch_minutes,
            work_area_id=data.work_area_id,
            work_role_id=data.work_role_id,
            worked_hours=calculate_worked_hours(
                data.start_time, data.end_time, data.break_minutes, data.lunch_minutes
            ),
            notes=data.notes,
            is_approved=False,
            is_deleted=False
        )
        self.db.add(assignment)
        self.db.commit()
        self.db.refresh(assignment)
        logger.info("Manual shift %s created for employee %s on %s", assignment.id, assignment.employee_id, assignment.date)
        return assignment

    def approve(self, assignment: ShiftAssignment, approved_by: int) -> ShiftAssignment:
        was_approved = bool(assignment.is_approved)
        assignment.is_approved = True
        assignment.approved_by = approved_by
        assignment.approved_at = datetime.now(timezone.utc)
        self.db.add(AuditLog(
            action=AuditAction.SHIFT_APPROVED,
            entity_type="ShiftAssignment",
            entity_id=assignment.id,
            user_id=str(approved_by),
            description=f"Shift of employee {assignment.employee_id} on {assignment.date.isoformat()} approved",
            old_values={"is_approved": was_approved},
            new_values={"is_approved": True, "approved_by": approved_by}
        ))
        self.db.commit()
        self.db.refresh(assignment)
        return assignment

    def soft_delete(self, assignment: ShiftAssignment) -> None:
        assignment.is_deleted = True
        assignment.deleted_at = datetime.now(timezone.utc)
        self.db.add(AuditLog(
            action=AuditAction.SHIFT_DELETED,
            entity_type="ShiftAssignment",
            entity_id=assignment.id,
            description=f"Shift of employee {assignment.employee_id} on {assignment.date.isoformat()} deleted",
            old_values={"is_deleted": False},
            new_values={"is_deleted": True}
        ))
        self.db.commit()
        logger.info("Shift %s deleted", assignment.id)

    def configuration(self, branch_id: int) -> ScheduleConfigurationResponse:
        """Branch settings, with the column defaults when none were saved."""
        config = self.db.query(ScheduleConfiguration).filter(
            ScheduleConfiguration.branch_id == branch_id
        ).first()
        if not config:
            return ScheduleConfigurationResponse(branch_id=branch_id, hours_per_day=8.0, free_day_color="#E8E8E8")
        return ScheduleConfigurationResponse(
            branch_id=branch_id,
            hours_per_day=float(config.hours_per_day),
            free_day_color=config.free_day_color
        )

    def save_configuration(self, data: ScheduleConfigurationUpdate) -> ScheduleConfigurationResponse:
        """Creates or updates the settings row of a branch."""
        branch = self.db.query(Branch).filter(Branch.id == data.branch_id).first()
        if not branch:
            raise ValueError("Branch not found")

        config = self.db.query(ScheduleConfiguration).filter(
            ScheduleConfiguration.branch_id == data.branch_id
        ).first()
        if not config:
            config = ScheduleConfiguration(branch_id=data.branch_id)
            self.db.add(config)
        config.hours_per_day = Decimal(str(data.hours_per_day))
        config.free_day_color = data.free_day_color.upper()
        self.db.commit()
        logger.info("Schedule configuration saved for branch %s", data.branch_id)
        return self.configuration(data.branch_id)
