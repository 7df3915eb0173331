import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String
from sqlalchemy.orm import declarative_base

Base: Any = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"
    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String, nullable=True)
    email = Column(String, nullable=False, unique=True)
    hashed_password = Column(String, nullable=True)
    email_verified = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class VerificationTokenModel(Base):
    __tablename__ = "verification_tokens"
    id = Column(String(32), primary_key=True, default=_new_id)
    email = Column(String, nullable=False)
    token = Column(String, nullable=False, unique=True)
    expires = Column(DateTime(timezone=True), nullable=False)
    # set for email-change tokens; the account still holds its old address
    account_id = Column(String(32), nullable=True)

    __table_args__ = (Index("idx_verification_tokens_email", "email"),)


class PasswordResetTokenModel(Base):
    __tablename__ = "password_reset_tokens"
    id = Column(String(32), primary_key=True, default=_new_id)
    email = Column(String, nullable=False)
    token = Column(String, nullable=False, unique=True)
    expires = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_password_reset_tokens_email", "email"),)


class AuditModel(Base):
    __tablename__ = "audit_events"
    id = Column(Integer, primary_key=True)
    event_name = Column(String, nullable=False)
    severity = Column(String, nullable=False, default="info")
    context = Column(JSON, nullable=True, default=dict)
    timestamp = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (Index("idx_audit_events_event_name", "event_name"),)


metadata = Base.metadata
