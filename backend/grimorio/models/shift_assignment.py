from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Time, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from grimorio.database import Base


class ShiftAssignment(Base):
    __tablename__ = "shift_assignments"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    work_area_id = Column(Integer, ForeignKey("work_areas.id"), nullable=False)
    work_role_id = Column(Integer, ForeignKey("work_roles.id"), nullable=False)

    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    break_minutes = Column(Integer, nullable=True)
    lunch_minutes = Column(Integer, nullable=True)

    worked_hours = Column(Numeric(5, 2), nullable=False, default=0)
    notes = Column(String(500), nullable=True)

    is_approved = Column(Boolean, default=False)
    approved_by = Column(Integer, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    is_deleted = Column(Boolean, default=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("Employee", back_populates="shift_assignments")
    work_area = relationship("WorkArea")
    work_role = relationship("WorkRole")

    __table_args__ = (
        Index("ix_shift_assignments_branch_date", "branch_id", "date"),
    )
