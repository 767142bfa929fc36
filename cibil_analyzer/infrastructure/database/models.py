"""SQLAlchemy ORM models for accounts and assessments"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, Float, DateTime, Integer, ForeignKey, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccountRow(Base):
    """Registered user with MFA state"""

    __tablename__ = "account"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    full_name = Column(Text, nullable=False)
    mfa_enabled = Column(Boolean, nullable=False, default=False)
    mfa_type = Column(String(16), nullable=False, default="none")
    mfa_secret = Column(Text, nullable=True)
    temp_mfa_code = Column(String(16), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())

    assessments = relationship("AssessmentRow", back_populates="owner", cascade="all, delete-orphan")


class AssessmentRow(Base):
    """Scored financial profile owned by an account"""

    __tablename__ = "assessment"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True)
    full_name = Column(Text, nullable=False)
    payment_history = Column(Float, nullable=False)
    credit_utilization = Column(Float, nullable=False)
    credit_age = Column(Float, nullable=False)
    credit_mix = Column(String(16), nullable=False)
    hard_inquiries = Column(Integer, nullable=False)
    estimated_score = Column(Integer, nullable=False)
    risk_level = Column(String(16), nullable=False)
    suggestions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())

    owner = relationship("AccountRow", back_populates="assessments")
