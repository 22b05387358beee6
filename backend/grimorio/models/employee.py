from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Numeric, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from grimorio.database import Base
import enum


class ContractType(str, enum.Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    TEMPORARY = "temporary"
    SEASONAL = "seasonal"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False, index=True)
    email = Column(String(200), nullable=True)
    phone = Column(String(20), nullable=True)

    contract_type = Column(
        SQLEnum(ContractType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ContractType.FULL_TIME
    )
    weekly_min_hours = Column(Numeric(5, 2), nullable=False, default=0)
    weekly_max_hours = Column(Numeric(5, 2), nullable=False, default=48)
    free_days_per_month = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    branch = relationship("Branch", back_populates="employees")
    work_roles = relationship("EmployeeWorkRole", back_populates="employee")
    availability = relationship("EmployeeAvailability", back_populates="employee")
    shift_assignments = relationship("ShiftAssignment", back_populates="employee")

    @property
    def is_full_time(self) -> bool:
        return self.contract_type == ContractType.FULL_TIME
