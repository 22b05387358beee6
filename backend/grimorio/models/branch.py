from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from grimorio.database import Base


class Branch(Base):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    code = Column(String(20), unique=True, nullable=False)
    address = Column(String(300), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employees = relationship("Employee", back_populates="branch")
    work_areas = relationship("WorkArea", back_populates="branch")
    shift_templates = relationship("ShiftTemplate", back_populates="branch")
    special_dates = relationship("SpecialDate", back_populates="branch")
    configuration = relationship("ScheduleConfiguration", back_populates="branch", uselist=False)
