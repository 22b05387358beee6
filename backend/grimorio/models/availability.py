from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from grimorio.database import Base


class EmployeeAvailability(Base):
    """Dates an employee can NOT work."""
    __tablename__ = "employee_availability"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    unavailable_date = Column(Date, nullable=False, index=True)
    reason = Column(String(300), nullable=True)
    is_deleted = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    employee = relationship("Employee", back_populates="availability")
