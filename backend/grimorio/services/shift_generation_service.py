"""
Shift Generation Service - Monthly assignment engine

VERSION: 1.0.0

Responsible for:
- Loading a branch's reference data once (templates, special dates,
  roster, availability, assignments already in the month)
- Rejecting requests that cannot be generated, before any write
- Allocating one employee per demand slot with a single greedy pass
- Reporting unmet demand, capacity gaps and quota deviations as warnings

Algorithm:
- Step A: resolve demand per date and plan rest days of full-time staff
- Step B: capacity pre-check (advisory)
- Step C: for each date, line and slot, take the best ranked admissible
  holder of the line's role
- Step D: persist the batch in one transaction, then post-audit

Runs for the same (branch, year, month) are serialized in-process and the
whole read-resolve-write sequence is a single transaction.
"""

import logging
import threading
from datetime import date, datetime, timezone
from typing import Dict, List, Set, Tuple

from sqlalchemy.orm import Session, joinedload, selectinload

from grimorio.models import (
    AuditAction,
    AuditLog,
    Branch,
    Employee,
    EmployeeAvailability,
    EmployeeWorkRole,
    ShiftAssignment,
    ShiftTemplate,
    SpecialDate,
    WorkRole,
)
from grimorio.schemas.scheduling import (
    CapacityCheckResponse,
    PlannedOffDays,
    PlannedOffDaysResponse,
    ShiftAssignmentResponse,
    ShiftGenerationResult,
    ShiftGenerationWarning,
    WarningKind,
)
from grimorio.services.capacity_auditor import CapacityAuditor
from grimorio.services.demand_resolver import DemandLine, DemandResolver, role_demand_by_date
from grimorio.services.eligibility import EligibilityFilter
from grimorio.services.generation_state import GenerationState
from grimorio.services.month_calendar import (
    generation_start_for,
    iter_dates,
    month_bounds,
    weekday_name,
)
from grimorio.services.off_day_planner import OffDayPlanner
from grimorio.services.post_audit import PostAudit
from grimorio.services.roster import Roster, RosterEntry
from grimorio.services.work_hours import to_hours_float

logger = logging.getLogger(__name__)

METHOD_VERSION = "1.0.0"
MIN_YEAR = 2000
MAX_YEAR = 9998


class ShiftGenerationError(ValueError):
    """Fatal validation failure; raised before anything is written."""

    def __init__(self, message: str, error_code: str):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


_locks_guard = threading.Lock()
_generation_locks: Dict[Tuple[int, int, int], threading.Lock] = {}


def generation_lock(branch_id: int, year: int, month: int) -> threading.Lock:
    with _locks_guard:
        return _generation_locks.setdefault((branch_id, year, month), threading.Lock())


class GenerationContext:
    """Everything one run reads, indexed for in-memory lookups."""

    def __init__(self, branch: Branch, year: int, month: int, generation_start: date):
        self.branch = branch
        self.year = year
        self.month = month
        self.month_start, self.month_end, self.days_in_month = month_bounds(year, month)
        self.generation_start = generation_start
        self.resolver: DemandResolver = None
        self.month_demand: Dict[date, List[DemandLine]] = {}
        self.roster: Roster = None
        self.unavailable_by_employee: Dict[int, Set[date]] = {}
        self.past_assignments: List[ShiftAssignment] = []
        self.future_assignments: List[ShiftAssignment] = []
        self.planned_off_by_employee: Dict[int, Set[date]] = {}

    @property
    def window_demand(self) -> Dict[date, List[DemandLine]]:
        return {
            d: lines for d, lines in self.month_demand.items()
            if d >= self.generation_start
        }


class ShiftGenerationService:

    def __init__(self, db: Session, today: date = None):
        self.db = db
        self.today = today

    @staticmethod
    def _validate_period(year: int, month: int) -> None:
        if month < 1 or month > 12:
            raise ShiftGenerationError("Invalid month.", "INVALID_MONTH")
        if year < MIN_YEAR or year > MAX_YEAR:
            raise ShiftGenerationError("Invalid year.", "INVALID_YEAR")

    def load_context(self, branch_id: int, year: int, month: int) -> GenerationContext:
        """
        Loads and indexes the reference data of a run.

        Raises:
            ShiftGenerationError: invalid period, unknown branch, no
                templates, no eligible staff or no future days left.
        """
        self._validate_period(year, month)

        branch = self.db.query(Branch).filter(Branch.id == branch_id).first()
        if not branch:
            raise ShiftGenerationError("Branch not found.", "BRANCH_NOT_FOUND")

        ctx = GenerationContext(branch, year, month, generation_start_for(year, month, self.today))

        templates = self.db.query(ShiftTemplate).options(
            joinedload(ShiftTemplate.work_area),
            joinedload(ShiftTemplate.work_role)
        ).filter(
            ShiftTemplate.branch_id == branch_id,
            ShiftTemplate.is_deleted == False
        ).order_by(ShiftTemplate.id).all()

        if not templates:
            raise ShiftGenerationError("There are no shift templates for this branch.", "NO_TEMPLATES")

        employee_work_roles = self.db.query(EmployeeWorkRole).join(
            Employee, EmployeeWorkRole.employee_id == Employee.id
        ).join(
            WorkRole, EmployeeWorkRole.work_role_id == WorkRole.id
        ).options(
            joinedload(EmployeeWorkRole.employee)
        ).filter(
            EmployeeWorkRole.is_deleted == False,
            WorkRole.is_deleted == False,
            Employee.is_active == True,
            Employee.branch_id == branch_id
        ).order_by(EmployeeWorkRole.employee_id, EmployeeWorkRole.priority).all()

        if not employee_work_roles:
            raise ShiftGenerationError("There are no eligible employees with assigned roles.", "NO_ELIGIBLE_EMPLOYEES")

        if ctx.generation_start > ctx.month_end:
            raise ShiftGenerationError("There are no future days left to generate in this month.", "NO_FUTURE_DAYS")

        special_dates = self.db.query(SpecialDate).options(
            selectinload(SpecialDate.templates)
        ).filter(
            SpecialDate.branch_id == branch_id,
            SpecialDate.is_deleted == False,
            SpecialDate.date >= ctx.month_start,
            SpecialDate.date <= ctx.month_end
        ).order_by(SpecialDate.id).all()

        ctx.resolver = DemandResolver(templates, special_dates)
        ctx.month_demand = ctx.resolver.resolve(ctx.month_start, ctx.month_end)
        ctx.roster = Roster.from_work_roles(employee_work_roles)

        availability = self.db.query(EmployeeAvailability).filter(
            EmployeeAvailability.employee_id.in_(list(ctx.roster.entries)),
            EmployeeAvailability.is_deleted == False,
            EmployeeAvailability.unavailable_date >= ctx.month_start,
            EmployeeAvailability.unavailable_date <= ctx.month_end
        ).all()
        for record in availability:
            ctx.unavailable_by_employee.setdefault(record.employee_id, set()).add(record.unavailable_date)

        existing = self.db.query(ShiftAssignment).filter(
            ShiftAssignment.branch_id == branch_id,
            ShiftAssignment.is_deleted == False,
            ShiftAssignment.date >= ctx.month_start,
            ShiftAssignment.date <= ctx.month_end
        ).order_by(ShiftAssignment.date, ShiftAssignment.id).all()
        for assignment in existing:
            if assignment.date < ctx.generation_start:
                ctx.past_assignments.append(assignment)
            else:
                ctx.future_assignments.append(assignment)

        planner = OffDayPlanner(role_demand_by_date(ctx.month_demand), ctx.month_start, ctx.month_end)
        ctx.planned_off_by_employee = planner.plan(ctx.roster)

        return ctx

    def check_capacity(self, branch_id: int, year: int, month: int) -> CapacityCheckResponse:
        """Runs only the capacity pre-check; writes nothing."""
        ctx = self.load_context(branch_id, year, month)
        auditor = self._capacity_auditor(ctx, GenerationState.seeded_from(ctx.past_assignments))
        return CapacityCheckResponse(
            branch_id=branch_id,
            year=year,
            month=month,
            generation_start=ctx.generation_start,
            warnings=auditor.audit(ctx.window_demand)
        )

    def plan_off_days(self, branch_id: int, year: int, month: int) -> PlannedOffDaysResponse:
        """Rest days the planner would steer full-time staff to; writes nothing."""
        ctx = self.load_context(branch_id, year, month)
        plans = [
            PlannedOffDays(
                employee_id=entry.employee_id,
                employee_name=entry.name,
                free_days_per_month=entry.free_days_per_month,
                planned_dates=sorted(ctx.planned_off_by_employee.get(entry.employee_id, ()))
            )
            for entry in ctx.roster.full_time()
        ]
        return PlannedOffDaysResponse(branch_id=branch_id, year=year, month=month, plans=plans)

    def generate(self, branch_id: int, year: int, month: int) -> ShiftGenerationResult:
        """
        Generates (or regenerates) the month of a branch.

        Assignments dated before the generation start are kept and count
        towards quotas; the ones from the generation start on are
        soft-deleted and replaced.
        """
        with generation_lock(branch_id, year, month):
            try:
                ctx = self.load_context(branch_id, year, month)
            except ShiftGenerationError as e:
                logger.warning(
                    "Shift generation rejected for branch %s %04d-%02d: %s",
                    branch_id, year, month, e.error_code
                )
                raise

            logger.info(
                "Generating shifts for branch %s %04d-%02d from %s (%s employees, %s kept, %s superseded)",
                branch_id, year, month, ctx.generation_start.isoformat(), len(ctx.roster),
                len(ctx.past_assignments), len(ctx.future_assignments)
            )

            state = GenerationState.seeded_from(ctx.past_assignments)
            warnings = self._capacity_auditor(ctx, state).audit(ctx.window_demand)

            try:
                now = datetime.now(timezone.utc)
                for assignment in ctx.future_assignments:
                    assignment.is_deleted = True
                    assignment.deleted_at = now

                eligibility = EligibilityFilter(
                    days_in_month=ctx.days_in_month,
                    state=state,
                    unavailable_by_employee=ctx.unavailable_by_employee,
                    planned_off_by_employee=ctx.planned_off_by_employee
                )
                created, coverage_warnings = self._allocate(ctx, state, eligibility)

                self.db.add_all([assignment for assignment, _, _ in created])
                self.db.add(self._audit_entry(ctx, len(created), coverage_warnings))
                self.db.commit()
            except Exception:
                self.db.rollback()
                logger.exception("Shift generation failed for branch %s %04d-%02d", branch_id, year, month)
                raise

            warnings.extend(coverage_warnings)
            warnings.extend(PostAudit(
                roster=ctx.roster,
                state=state,
                planned_off_by_employee=ctx.planned_off_by_employee,
                days_in_month=ctx.days_in_month,
                month_end=ctx.month_end
            ).run())

        not_covered = sum(
            w.required_count - w.assigned_count
            for w in warnings
            if w.kind == WarningKind.COVERAGE
        )
        assignments = [
            self._to_response(assignment, line, entry)
            for assignment, line, entry in sorted(created, key=lambda c: (c[0].date, c[0].start_time))
        ]

        logger.info(
            "Generated %s shifts for branch %s %04d-%02d, %s slots not covered, %s warnings",
            len(assignments), branch_id, year, month, not_covered, len(warnings)
        )

        return ShiftGenerationResult(
            assignments=assignments,
            warnings=warnings,
            total_shifts_generated=len(assignments),
            total_shifts_not_covered=not_covered
        )

    def _capacity_auditor(self, ctx: GenerationContext, state: GenerationState) -> CapacityAuditor:
        return CapacityAuditor(
            roster=ctx.roster,
            state=state,
            unavailable_by_employee=ctx.unavailable_by_employee,
            days_in_month=ctx.days_in_month,
            window_start=ctx.generation_start,
            window_end=ctx.month_end
        )

    def _allocate(
        self,
        ctx: GenerationContext,
        state: GenerationState,
        eligibility: EligibilityFilter
    ) -> Tuple[List[Tuple[ShiftAssignment, DemandLine, RosterEntry]], List[ShiftGenerationWarning]]:
        created: List[Tuple[ShiftAssignment, DemandLine, RosterEntry]] = []
        warnings: List[ShiftGenerationWarning] = []

        for target_date in iter_dates(ctx.generation_start, ctx.month_end):
            for line in ctx.month_demand.get(target_date, []):
                pool = ctx.roster.holders_of(line.work_role_id)
                filled = 0

                for _ in range(line.required_count):
                    ranked = eligibility.ranked_candidates(pool, target_date, line.worked_hours)
                    if not ranked:
                        continue

                    entry, _ = ranked[0]
                    assignment = ShiftAssignment(
                        branch_id=ctx.branch.id,
                        employee_id=entry.employee_id,
                        date=target_date,
                        start_time=line.start_time,
                        end_time=line.end_time,
                        break_minutes=line.break_minutes,
                        lunch_minutes=line.lunch_minutes,
                        work_area_id=line.work_area_id,
                        work_role_id=line.work_role_id,
                        worked_hours=line.worked_hours,
                        notes=line.notes,
                        is_approved=False,
                        is_deleted=False
                    )
                    created.append((assignment, line, entry))
                    state.track(entry.employee_id, target_date, line.worked_hours)
                    filled += 1

                if filled < line.required_count:
                    warnings.append(ShiftGenerationWarning(
                        kind=WarningKind.COVERAGE,
                        date=target_date,
                        weekday=weekday_name(target_date),
                        work_area_name=line.work_area_name,
                        work_role_name=line.work_role_name,
                        required_count=line.required_count,
                        assigned_count=filled,
                        reason=eligibility.shortfall_reason(pool, target_date)
                    ))

        return created, warnings

    def _audit_entry(
        self,
        ctx: GenerationContext,
        created_count: int,
        coverage_warnings: List[ShiftGenerationWarning]
    ) -> AuditLog:
        return AuditLog(
            action=AuditAction.SHIFTS_GENERATED,
            entity_type="Branch",
            entity_id=ctx.branch.id,
            description=f"Shifts generated for {ctx.year:04d}-{ctx.month:02d} from {ctx.generation_start.isoformat()}",
            new_values={
                "year": ctx.year,
                "month": ctx.month,
                "generation_start": ctx.generation_start.isoformat(),
                "created": created_count,
                "superseded": len(ctx.future_assignments),
                "kept": len(ctx.past_assignments),
                "coverage_warnings": len(coverage_warnings),
                "method_version": METHOD_VERSION
            }
        )

    @staticmethod
    def _to_response(
        assignment: ShiftAssignment,
        line: DemandLine,
        entry: RosterEntry
    ) -> ShiftAssignmentResponse:
        return ShiftAssignmentResponse(
            id=assignment.id,
            employee_id=entry.employee_id,
            employee_name=entry.name,
            date=assignment.date,
            start_time=assignment.start_time,
            end_time=assignment.end_time,
            break_minutes=assignment.break_minutes,
            lunch_minutes=assignment.lunch_minutes,
            work_area_id=line.work_area_id,
            work_area_name=line.work_area_name,
            work_area_color=line.work_area_color,
            work_role_id=line.work_role_id,
            work_role_name=line.work_role_name,
            worked_hours=to_hours_float(line.worked_hours),
            notes=assignment.notes,
            is_approved=bool(assignment.is_approved)
        )
