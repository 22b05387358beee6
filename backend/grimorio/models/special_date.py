from sqlalchemy import Column, Integer, String, Time, Date, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from grimorio.database import Base


class SpecialDate(Base):
    """
    A specific date (Valentine's, Carnival...) with its own demand.

    When at least one active SpecialDateTemplate exists, the weekday
    templates are not applied on that date.
    """
    __tablename__ = "special_dates"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    is_deleted = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    branch = relationship("Branch", back_populates="special_dates")
    templates = relationship("SpecialDateTemplate", back_populates="special_date")


# one active special date per branch and day
Index(
    "uq_special_dates_branch_date_active",
    SpecialDate.branch_id,
    SpecialDate.date,
    unique=True,
    sqlite_where=SpecialDate.is_deleted == False,
    postgresql_where=SpecialDate.is_deleted == False
)


class SpecialDateTemplate(Base):
    __tablename__ = "special_date_templates"

    id = Column(Integer, primary_key=True, index=True)
    special_date_id = Column(Integer, ForeignKey("special_dates.id"), nullable=False, index=True)
    work_area_id = Column(Integer, ForeignKey("work_areas.id"), nullable=False)
    work_role_id = Column(Integer, ForeignKey("work_roles.id"), nullable=False)

    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    break_minutes = Column(Integer, nullable=True)
    lunch_minutes = Column(Integer, nullable=True)

    required_count = Column(Integer, nullable=False, default=1)
    notes = Column(String(500), nullable=True)
    is_deleted = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    special_date = relationship("SpecialDate", back_populates="templates")
    work_area = relationship("WorkArea")
    work_role = relationship("WorkRole")
