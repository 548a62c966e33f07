"""
Audit Use Case DTOs (Data Transfer Objects)

Response shapes for the audit query and maintenance use cases.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class AuditEventView(BaseModel):
    """One audit event as returned to administrators"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    event_type: str
    event_category: str
    description: Optional[str] = None
    subject_user_id: Optional[str] = None
    attempted_user_id: Optional[str] = None
    roles_snapshot: Optional[str] = None
    session_id: Optional[str] = None
    source_ip: Optional[str] = None
    user_agent: Optional[str] = None
    http_method: Optional[str] = None
    http_path: Optional[str] = None
    succeeded: bool
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    context: Optional[Dict[str, Any]] = None
    risk_score: int
    server_name: Optional[str] = None
    app_version: Optional[str] = None
    occurred_at: datetime
    recorded_at: datetime


class Pagination(BaseModel):
    current_page: int
    per_page: int
    total_records: int
    total_pages: int
    has_next: bool
    has_previous: bool


class AuditEventListResponse(BaseModel):
    success: bool = True
    data: List[AuditEventView]
    pagination: Pagination
    filters_applied: Dict[str, Any]


class AuditSummaryTotals(BaseModel):
    total_events: int
    successful_events: int
    failed_events: int
    successful_logins: int
    failed_logins: int
    unique_users: int
    unique_ips: int
    avg_risk_score: float
    max_risk_score: int
    high_risk_events: int


class EventTypeCount(BaseModel):
    event_type: str
    count: int


class FailedIpCount(BaseModel):
    source_ip: str
    failed_attempts: int


class HighRiskEvent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_type: str
    attempted_user_id: Optional[str] = None
    source_ip: Optional[str] = None
    risk_score: int
    occurred_at: datetime


class AuditSummaryResponse(BaseModel):
    success: bool = True
    summary: AuditSummaryTotals
    event_types: List[EventTypeCount]
    top_failed_ips: List[FailedIpCount]
    high_risk_events: List[HighRiskEvent]
    analysis_period_days: int


class UserActivitySummary(BaseModel):
    total_events: int
    successful_events: int
    failed_events: int
    avg_risk_score: float
    last_activity: Optional[datetime] = None
    unique_ips: int


class UserAuditHistoryResponse(BaseModel):
    success: bool = True
    user_id: str
    events: List[AuditEventView]
    summary: UserActivitySummary
    analysis_period_days: int


class CleanupResponse(BaseModel):
    success: bool = True
    message: str
    deleted_records: int
    retention_days: int


class AuditExport(BaseModel):
    """Rows selected for export plus their CSV rendering"""

    row_count: int
    csv_content: str
    filename: str
