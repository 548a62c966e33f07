"""
Get User Audit History Use Case

Recent events for one user, whether they signed in or were only named in
an attempt, plus a short activity summary.
"""

from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from sms_audit.app.services.unit_of_work import UnitOfWork
from sms_audit.domain.base import utc_now

from .dtos import AuditEventView, UserActivitySummary, UserAuditHistoryResponse
from .limits import (
    MAX_WINDOW_DAYS,
    USER_HISTORY_DEFAULT_DAYS,
    USER_HISTORY_DEFAULT_LIMIT,
    USER_HISTORY_MAX_LIMIT,
    clamp,
)


class GetUserAuditHistoryUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: str,
        days: Optional[int] = USER_HISTORY_DEFAULT_DAYS,
        limit: Optional[int] = USER_HISTORY_DEFAULT_LIMIT,
    ) -> Result[UserAuditHistoryResponse]:
        days = clamp(days, 1, MAX_WINDOW_DAYS, USER_HISTORY_DEFAULT_DAYS)
        limit = clamp(limit, 1, USER_HISTORY_MAX_LIMIT, USER_HISTORY_DEFAULT_LIMIT)
        since = utc_now() - timedelta(days=days)

        async with self.uow:
            try:
                events = await self.uow.audit_events.find_by_user(user_id, since, limit)
                summary = await self.uow.audit_events.summarize_user(user_id, since)
            except SQLAlchemyError as exc:
                return Return.err(Error("AUDIT_QUERY_FAILED", str(exc)))

            return Return.ok(
                UserAuditHistoryResponse(
                    user_id=user_id,
                    events=[AuditEventView.model_validate(e) for e in events],
                    summary=UserActivitySummary(**summary),
                    analysis_period_days=days,
                )
            )
