from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from grimorio.database import Base


class ScheduleConfiguration(Base):
    """
    Branch-level schedule settings.

    hours_per_day is stored for reference only; monthly generation does not
    read it.
    """
    __tablename__ = "schedule_configurations"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, unique=True)
    hours_per_day = Column(Numeric(4, 2), nullable=False, default=8)
    free_day_color = Column(String(7), nullable=False, default="#E8E8E8")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    branch = relationship("Branch", back_populates="configuration")
