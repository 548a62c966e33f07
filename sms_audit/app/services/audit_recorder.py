"""
Audit Recorder

Normalizes, scores and persists audit events. Recording is best-effort:
a failing store is logged and reported as None, never raised, so the
operation that triggered the event always proceeds.
"""

import logging
from datetime import datetime
from typing import Any, AsyncContextManager, Callable, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel

from sms_audit.app.services.event_normalizer import (
    AuditEventInput,
    RequestContext,
    normalize_event,
)
from sms_audit.app.services.risk_scorer import DEFAULT_ADMIN_ROLE_MARKERS, score_event
from sms_audit.app.services.unit_of_work import UnitOfWork
from sms_audit.domain.entities import EventCategory, EventType

logger = logging.getLogger(__name__)

Roles = Optional[Union[List[str], str]]


class RecordedEvent(BaseModel):
    """Outcome of a successful audit write"""

    id: int
    recorded_at: datetime
    risk_score: int


class AuditRecorder:
    """
    Writes audit events through their own unit of work.

    The recorder never joins the caller's transaction: a business rollback
    cannot undo an audit row, and an audit failure cannot abort business work.
    """

    def __init__(
        self,
        uow_factory: Callable[[], AsyncContextManager[UnitOfWork]],
        app_version: Optional[str] = None,
        server_name: Optional[str] = None,
        admin_role_markers: Iterable[str] = DEFAULT_ADMIN_ROLE_MARKERS,
    ):
        self.uow_factory = uow_factory
        self.app_version = app_version
        self.server_name = server_name
        self.admin_role_markers = tuple(admin_role_markers)

    async def record(
        self,
        event_input: AuditEventInput,
        request_context: Optional[RequestContext] = None,
        now: Optional[datetime] = None,
    ) -> Optional[RecordedEvent]:
        """
        Normalize, score and insert one event.

        Args:
            event_input: Partial event description
            request_context: Client details of the triggering request, if any
            now: Server-local time for scoring; defaults to now

        Returns:
            RecordedEvent on success, None if the write failed
        """
        try:
            event = normalize_event(
                event_input,
                request_context,
                app_version=self.app_version,
                server_name=self.server_name,
            )
            event.risk_score = score_event(
                event, now=now, admin_role_markers=self.admin_role_markers
            )

            async with self.uow_factory() as uow:
                saved = await uow.audit_events.create(event)
                recorded = RecordedEvent(
                    id=saved.id, recorded_at=saved.recorded_at, risk_score=saved.risk_score
                )
                await uow.commit()
        except Exception:
            logger.exception(
                "Failed to record audit event %s for user %s",
                event_input.event_type,
                event_input.attempted_user_id or event_input.subject_user_id,
            )
            return None

        logger.info(
            "Audit event recorded: %s user=%s success=%s risk=%s id=%s",
            event.event_type,
            event.attempted_user_id or "unknown",
            event.succeeded,
            event.risk_score,
            recorded.id,
        )
        return recorded

    async def login_succeeded(
        self,
        user_id: str,
        roles: Roles,
        request_context: Optional[RequestContext] = None,
        session_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Optional[RecordedEvent]:
        return await self.record(
            AuditEventInput(
                event_type=EventType.LOGIN_SUCCESS.value,
                event_category=EventCategory.AUTH.value,
                description=f"User {user_id} logged in successfully",
                subject_user_id=user_id,
                attempted_user_id=user_id,
                roles=roles,
                session_id=session_id,
                succeeded=True,
                context=context,
            ),
            request_context,
        )

    async def login_failed(
        self,
        attempted_user_id: str,
        reason: str,
        request_context: Optional[RequestContext] = None,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Optional[RecordedEvent]:
        return await self.record(
            AuditEventInput(
                event_type=EventType.LOGIN_FAILED.value,
                event_category=EventCategory.AUTH.value,
                description=f"Failed login attempt for user {attempted_user_id}: {reason}",
                attempted_user_id=attempted_user_id,
                succeeded=False,
                error_code=error_code,
                error_message=reason,
                context=context,
            ),
            request_context,
        )

    async def logout(
        self,
        user_id: str,
        roles: Roles,
        request_context: Optional[RequestContext] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Optional[RecordedEvent]:
        return await self.record(
            AuditEventInput(
                event_type=EventType.LOGOUT.value,
                event_category=EventCategory.AUTH.value,
                description=f"User {user_id} logged out",
                subject_user_id=user_id,
                roles=roles,
                succeeded=True,
                context=context,
            ),
            request_context,
        )

    async def account_locked(
        self,
        user_id: str,
        reason: str,
        request_context: Optional[RequestContext] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Optional[RecordedEvent]:
        return await self.record(
            AuditEventInput(
                event_type=EventType.LOGIN_LOCKED.value,
                event_category=EventCategory.AUTH.value,
                description=f"Account {user_id} locked: {reason}",
                attempted_user_id=user_id,
                succeeded=False,
                error_message=reason,
                context=context,
            ),
            request_context,
        )

    async def suspicious_activity(
        self,
        user_id: Optional[str],
        description: str,
        request_context: Optional[RequestContext] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Optional[RecordedEvent]:
        return await self.record(
            AuditEventInput(
                event_type=EventType.SUSPICIOUS_ACTIVITY.value,
                event_category=EventCategory.AUTH.value,
                description=description,
                subject_user_id=user_id,
                succeeded=False,
                error_message="Suspicious activity detected",
                context=context,
            ),
            request_context,
        )
