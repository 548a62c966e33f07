"""
Event Normalizer

Turns a partially filled event description into a complete AuditEvent
candidate (no id, no risk score). Pure: nothing here touches storage.
"""

import socket
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field
from starlette.requests import Request

from sms_audit.domain.base import utc_now
from sms_audit.domain.entities import AuditEvent, EventCategory, EventType

DEFAULT_APP_VERSION = "1.0.0"
UNKNOWN = "unknown"

FAILED_SIGN_IN_EVENTS = (EventType.LOGIN_FAILED.value, EventType.LOGIN_LOCKED.value)


class AuditEventInput(BaseModel):
    """
    Loosely filled audit event description.

    Only event_type is required; every other field falls back to a default
    during normalization.
    """

    event_type: str
    event_category: Optional[str] = None
    description: Optional[str] = None

    subject_user_id: Optional[str] = None
    attempted_user_id: Optional[str] = None
    roles: Optional[Union[List[str], str]] = None

    session_id: Optional[str] = None
    source_ip: Optional[str] = None
    user_agent: Optional[str] = None
    http_method: Optional[str] = None
    http_path: Optional[str] = None

    succeeded: bool = False
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    context: Optional[Dict[str, Any]] = Field(default=None)

    server_name: Optional[str] = None
    app_version: Optional[str] = None
    occurred_at: Optional[datetime] = None


@dataclass(frozen=True)
class RequestContext:
    """Client details lifted from an inbound HTTP request"""

    source_ip: Optional[str] = UNKNOWN
    user_agent: Optional[str] = UNKNOWN
    http_method: Optional[str] = UNKNOWN
    http_path: Optional[str] = UNKNOWN

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        headers = request.headers

        source_ip = None
        forwarded_for = headers.get("x-forwarded-for")
        if forwarded_for:
            source_ip = forwarded_for.split(",")[0].strip() or None
        if not source_ip:
            source_ip = headers.get("x-real-ip") or None
        if not source_ip and request.client is not None:
            source_ip = request.client.host or None

        return cls(
            source_ip=source_ip or UNKNOWN,
            user_agent=headers.get("user-agent") or UNKNOWN,
            http_method=request.method or UNKNOWN,
            http_path=request.url.path or UNKNOWN,
        )


# Events raised outside an HTTP request carry no client details
NO_REQUEST = RequestContext(source_ip=None, user_agent=None, http_method=None, http_path=None)


def join_roles(roles: Optional[Union[List[str], str]]) -> Optional[str]:
    if roles is None:
        return None
    if isinstance(roles, str):
        return roles or None
    return ",".join(roles) or None


def normalize_event(
    event_input: AuditEventInput,
    request_context: Optional[RequestContext] = None,
    app_version: Optional[str] = None,
    server_name: Optional[str] = None,
) -> AuditEvent:
    """
    Build a fully populated AuditEvent candidate.

    Explicit input values win over request-derived ones, so normalizing an
    already normalized event yields the same event.

    Args:
        event_input: Partial event description (event_type required)
        request_context: Client details of the triggering request, if any
        app_version: Configured application version
        server_name: Configured server name; hostname when empty

    Returns:
        Unsaved AuditEvent with risk_score left at 0
    """
    ctx = request_context or NO_REQUEST

    subject_user_id = event_input.subject_user_id
    attempted_user_id = event_input.attempted_user_id or subject_user_id

    event_category = event_input.event_category or EventCategory.AUTH.value

    # A failed sign-in never names an authenticated principal
    if (
        event_input.event_type in FAILED_SIGN_IN_EVENTS
        and event_category == EventCategory.AUTH.value
        and not event_input.succeeded
    ):
        subject_user_id = None

    return AuditEvent(
        event_type=event_input.event_type,
        event_category=event_category,
        description=event_input.description or f"{event_input.event_type} event",
        subject_user_id=subject_user_id,
        attempted_user_id=attempted_user_id,
        roles_snapshot=join_roles(event_input.roles),
        session_id=event_input.session_id,
        source_ip=event_input.source_ip or ctx.source_ip,
        user_agent=event_input.user_agent or ctx.user_agent,
        http_method=event_input.http_method or ctx.http_method,
        http_path=event_input.http_path or ctx.http_path,
        succeeded=event_input.succeeded,
        error_code=event_input.error_code,
        error_message=event_input.error_message,
        context=event_input.context or None,
        server_name=event_input.server_name or server_name or socket.gethostname(),
        app_version=event_input.app_version or app_version or DEFAULT_APP_VERSION,
        occurred_at=event_input.occurred_at or utc_now(),
    )
