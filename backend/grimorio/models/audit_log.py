from sqlalchemy import Column, Integer, String, DateTime, JSON, Text, Enum as SQLEnum
from sqlalchemy.sql import func
from grimorio.database import Base
import enum


class AuditAction(str, enum.Enum):
    SHIFTS_GENERATED = "shifts_generated"
    SHIFT_APPROVED = "shift_approved"
    SHIFT_DELETED = "shift_deleted"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)

    action = Column(SQLEnum(AuditAction, values_callable=lambda e: [member.value for member in e]), nullable=False, index=True)
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(Integer, nullable=True)

    user_id = Column(String(100), nullable=True)

    description = Column(Text, nullable=True)

    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
