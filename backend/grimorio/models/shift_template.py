from sqlalchemy import Column, Integer, String, Time, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from grimorio.database import Base


class ShiftTemplate(Base):
    """
    Recurring weekly demand line for a branch.

    Each row says how many people holding `work_role_id` are needed on a
    given weekday (0 = Monday ... 6 = Sunday) between start_time and
    end_time. Templates do NOT allocate people; the monthly generation does.
    """
    __tablename__ = "shift_templates"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    work_area_id = Column(Integer, ForeignKey("work_areas.id"), nullable=False)
    work_role_id = Column(Integer, ForeignKey("work_roles.id"), nullable=False)

    day_of_week = Column(Integer, nullable=False, index=True)

    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    break_minutes = Column(Integer, nullable=True)
    lunch_minutes = Column(Integer, nullable=True)

    required_count = Column(Integer, nullable=False, default=1)
    notes = Column(String(500), nullable=True)

    is_deleted = Column(Boolean, default=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    branch = relationship("Branch", back_populates="shift_templates")
    work_area = relationship("WorkArea")
    work_role = relationship("WorkRole")
