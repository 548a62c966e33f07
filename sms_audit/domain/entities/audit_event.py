"""
AuditEvent Entity

Append-only ledger of security events, primarily authentication activity.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel, Text

from sms_audit.domain.base import utc_now

from .enums import EventCategory


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - one row per recorded security event.

    Business Rules:
    - Immutable once written (only insert and age-based bulk delete exist)
    - risk_score is computed at write time and never recomputed
    - Failed LOGIN_FAILED rows carry attempted_user_id, never subject_user_id
    - roles_snapshot is denormalized; later role changes do not rewrite history
    - occurred_at is the logical event time, recorded_at the insert time
    """

    __tablename__ = "audit_log"

    id: Optional[int] = Field(default=None, primary_key=True)

    # Event details
    event_type: str = Field(max_length=50)
    event_category: str = Field(default=EventCategory.AUTH.value, max_length=20)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))

    # User information
    subject_user_id: Optional[str] = Field(default=None, max_length=100)
    attempted_user_id: Optional[str] = Field(default=None, max_length=100)
    roles_snapshot: Optional[str] = Field(default=None, max_length=200)

    # Request context
    session_id: Optional[str] = Field(default=None, max_length=100)
    source_ip: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, sa_column=Column(Text))
    http_method: Optional[str] = Field(default=None, max_length=10)
    http_path: Optional[str] = Field(default=None, max_length=200)

    # Outcome
    succeeded: bool = Field(default=False)
    error_code: Optional[str] = Field(default=None, max_length=50)
    error_message: Optional[str] = Field(default=None, sa_column=Column(Text))

    context: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    risk_score: int = Field(default=0)

    # Deployment metadata
    server_name: Optional[str] = Field(default=None, max_length=100)
    app_version: Optional[str] = Field(default=None, max_length=20)

    # Timestamps
    occurred_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    recorded_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    __table_args__ = (
        Index("idx_audit_log_subject_occurred", "subject_user_id", "occurred_at"),
        Index("idx_audit_log_event_type", "event_type", "occurred_at"),
        Index("idx_audit_log_failed_logins", "attempted_user_id", "succeeded", "occurred_at"),
        Index("idx_audit_log_source_ip", "source_ip", "occurred_at"),
        Index("idx_audit_log_risk_score", "risk_score", "occurred_at"),
    )
