from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from grimorio.database import Base


class WorkArea(Base):
    """Restaurant area (cash desk, kitchen, bar, floor)."""
    __tablename__ = "work_areas"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    color = Column(String(7), nullable=False, default="#808080")
    display_order = Column(Integer, default=0)
    is_deleted = Column(Boolean, default=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    branch = relationship("Branch", back_populates="work_areas")
    work_roles = relationship("WorkRole", back_populates="work_area")


class WorkRole(Base):
    """Role inside an area (grill cook, cashier, waiter...)."""
    __tablename__ = "work_roles"

    id = Column(Integer, primary_key=True, index=True)
    work_area_id = Column(Integer, ForeignKey("work_areas.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    is_deleted = Column(Boolean, default=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    work_area = relationship("WorkArea", back_populates="work_roles")
    employee_work_roles = relationship("EmployeeWorkRole", back_populates="work_role")


class EmployeeWorkRole(Base):
    """
    Roles an employee can perform.

    priority 1 is the highest; the three-roles-per-employee limit is
    enforced by the employee management screens, not here.
    """
    __tablename__ = "employee_work_roles"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    work_role_id = Column(Integer, ForeignKey("work_roles.id"), nullable=False, index=True)
    is_primary = Column(Boolean, default=False)
    priority = Column(Integer, nullable=False, default=1)
    is_deleted = Column(Boolean, default=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    employee = relationship("Employee", back_populates="work_roles")
    work_role = relationship("WorkRole", back_populates="employee_work_roles")

    __table_args__ = (
        UniqueConstraint("employee_id", "work_role_id", name="uq_employee_work_role"),
    )
