"""
Cleanup Audit Events Use Case

Age-based retention for the audit ledger. The only delete path that exists.
"""

import logging
from datetime import timedelta
from typing import Optional

from libs.result import Error, Result, Return
from sms_audit.app.services.audit_recorder import AuditRecorder
from sms_audit.app.services.event_normalizer import AuditEventInput, RequestContext
from sms_audit.app.services.unit_of_work import UnitOfWork
from sms_audit.domain.base import utc_now
from sms_audit.domain.entities import EventCategory, EventType

from .dtos import CleanupResponse
from .limits import CLEANUP_DEFAULT_DAYS, CLEANUP_MIN_RETENTION_DAYS

logger = logging.getLogger(__name__)


def effective_retention_days(days: Optional[int]) -> int:
    """Requested retention, raised to the 30-day floor"""
    if days is None:
        days = CLEANUP_DEFAULT_DAYS
    return max(CLEANUP_MIN_RETENTION_DAYS, days)


class CleanupAuditEventsUseCase:
    """
    Use case for pruning old audit events.

    Business Rules:
    - Retention below 30 days is raised to 30 days
    - The cleanup itself is recorded as an AUDIT_CLEANUP event before deleting
    - A failed cleanup is recorded as a failed AUDIT_CLEANUP event
    """

    def __init__(self, uow: UnitOfWork, recorder: AuditRecorder):
        self.uow = uow
        self.recorder = recorder

    async def execute(
        self,
        actor_id: Optional[str],
        days: Optional[int] = CLEANUP_DEFAULT_DAYS,
        request_context: Optional[RequestContext] = None,
    ) -> Result[CleanupResponse]:
        retention_days = effective_retention_days(days)
        cutoff = utc_now() - timedelta(days=retention_days)

        await self.recorder.record(
            AuditEventInput(
                event_type=EventType.AUDIT_CLEANUP.value,
                event_category=EventCategory.SYSTEM.value,
                description=f"Audit log cleanup initiated by {actor_id}",
                subject_user_id=actor_id,
                succeeded=True,
                context={"retention_days": retention_days},
            ),
            request_context,
        )

        async with self.uow:
            try:
                deleted = await self.uow.audit_events.delete_older_than(cutoff)
                await self.uow.commit()
            except Exception as exc:
                logger.exception("Audit log cleanup failed")
                await self.uow.rollback()
                await self.recorder.record(
                    AuditEventInput(
                        event_type=EventType.AUDIT_CLEANUP.value,
                        event_category=EventCategory.SYSTEM.value,
                        description="Audit log cleanup failed",
                        subject_user_id=actor_id,
                        succeeded=False,
                        error_message=str(exc),
                        context={"retention_days": retention_days},
                    ),
                    request_context,
                )
                return Return.err(Error("CLEANUP_FAILED", str(exc)))

        return Return.ok(
            CleanupResponse(
                message=f"Cleaned up audit logs older than {retention_days} days",
                deleted_records=deleted,
                retention_days=retention_days,
            )
        )
