from datetime import date, time
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from grimorio.database import Base
from grimorio.models import (
    Branch,
    ContractType,
    Employee,
    EmployeeAvailability,
    EmployeeWorkRole,
    ShiftAssignment,
    ShiftTemplate,
    SpecialDate,
    SpecialDateTemplate,
    WorkArea,
    WorkRole,
)
from grimorio.services.work_hours import calculate_worked_hours

ALL_WEEKDAYS = range(7)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


class BranchBuilder:
    """Seeds one branch with areas, roles, staff and demand."""

    def __init__(self, session, name="Centro", code="CTR"):
        self.session = session
        self.branch = Branch(name=name, code=code, is_active=True)
        session.add(self.branch)
        session.flush()

    @property
    def id(self):
        return self.branch.id

    def area(self, name, display_order=0, color="#FF9900"):
        area = WorkArea(
            branch_id=self.branch.id,
            name=name,
            color=color,
            display_order=display_order,
            is_deleted=False,
        )
        self.session.add(area)
        self.session.flush()
        return area

    def role(self, area, name):
        role = WorkRole(work_area_id=area.id, name=name, is_deleted=False)
        self.session.add(role)
        self.session.flush()
        return role

    def employee(
        self,
        name,
        roles,
        contract_type=ContractType.FULL_TIME,
        weekly_max_hours=40,
        free_days_per_month=6,
        is_active=True,
    ):
        """roles: list of WorkRole or (WorkRole, is_primary, priority)."""
        employee = Employee(
            branch_id=self.branch.id,
            name=name,
            contract_type=contract_type,
            weekly_min_hours=0,
            weekly_max_hours=Decimal(weekly_max_hours),
            free_days_per_month=free_days_per_month,
            is_active=is_active,
        )
        self.session.add(employee)
        self.session.flush()
        for index, item in enumerate(roles):
            if isinstance(item, tuple):
                role, is_primary, priority = item
            else:
                role, is_primary, priority = item, index == 0, index + 1
            self.session.add(EmployeeWorkRole(
                employee_id=employee.id,
                work_role_id=role.id,
                is_primary=is_primary,
                priority=priority,
                is_deleted=False,
            ))
        self.session.flush()
        return employee

    def templates(
        self,
        area,
        role,
        start,
        end,
        required_count=1,
        weekdays=ALL_WEEKDAYS,
        break_minutes=None,
        lunch_minutes=None,
    ):
        created = []
        for weekday in weekdays:
            template = ShiftTemplate(
                branch_id=self.branch.id,
                work_area_id=area.id,
                work_role_id=role.id,
                day_of_week=weekday,
                start_time=start,
                end_time=end,
                break_minutes=break_minutes,
                lunch_minutes=lunch_minutes,
                required_count=required_count,
                is_deleted=False,
            )
            self.session.add(template)
            created.append(template)
        self.session.flush()
        return created

    def special_date(self, on, name, lines):
        """lines: list of (area, role, start, end, required_count)."""
        special = SpecialDate(branch_id=self.branch.id, date=on, name=name, is_deleted=False)
        self.session.add(special)
        self.session.flush()
        for area, role, start, end, required_count in lines:
            self.session.add(SpecialDateTemplate(
                special_date_id=special.id,
                work_area_id=area.id,
                work_role_id=role.id,
                start_time=start,
                end_time=end,
                required_count=required_count,
                is_deleted=False,
            ))
        self.session.flush()
        return special

    def unavailable(self, employee, on, reason="Medical appointment"):
        record = EmployeeAvailability(
            employee_id=employee.id,
            unavailable_date=on,
            reason=reason,
            is_deleted=False,
        )
        self.session.add(record)
        self.session.flush()
        return record

    def assignment(self, employee, area, role, on, start=time(9, 0), end=time(15, 0)):
        record = ShiftAssignment(
            branch_id=self.branch.id,
            employee_id=employee.id,
            work_area_id=area.id,
            work_role_id=role.id,
            date=on,
            start_time=start,
            end_time=end,
            worked_hours=calculate_worked_hours(start, end),
            is_approved=False,
            is_deleted=False,
        )
        self.session.add(record)
        self.session.flush()
        return record

    def commit(self):
        self.session.commit()
        return self


@pytest.fixture
def builder(db):
    return BranchBuilder(db)


@pytest.fixture
def cashier_branch(builder):
    """
    One full-time cashier, 6 free days, 40h weekly max, one 09:00-15:00
    cashier line every day of the week.
    """
    front = builder.area("Front", display_order=1)
    cashier = builder.role(front, "Cashier")
    employee = builder.employee("Ana", [cashier], weekly_max_hours=40, free_days_per_month=6)
    builder.templates(front, cashier, time(9, 0), time(15, 0))
    builder.commit()
    return builder, front, cashier, employee


def active_assignments(session, branch_id):
    return session.query(ShiftAssignment).filter(
        ShiftAssignment.branch_id == branch_id,
        ShiftAssignment.is_deleted == False
    ).order_by(ShiftAssignment.date, ShiftAssignment.start_time, ShiftAssignment.id).all()


BEFORE_JUNE_2026 = date(2026, 5, 10)
