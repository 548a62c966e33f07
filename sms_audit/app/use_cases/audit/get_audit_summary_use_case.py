"""
Get Audit Summary Use Case

Aggregate statistics over a trailing window of days.
"""

from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from sms_audit.app.services.unit_of_work import UnitOfWork
from sms_audit.domain.base import utc_now

from .dtos import (
    AuditSummaryResponse,
    AuditSummaryTotals,
    EventTypeCount,
    FailedIpCount,
    HighRiskEvent,
)
from .limits import (
    HIGH_RISK_THRESHOLD,
    MAX_WINDOW_DAYS,
    NOTABLE_RISK_THRESHOLD,
    SUMMARY_DEFAULT_DAYS,
    TOP_N,
    clamp,
)


class GetAuditSummaryUseCase:
    """
    Use case for summarizing recent audit activity.

    Business Rules:
    - days defaults to 7 and is clamped to [1, 365]
    - high_risk_events counts events scored above 50
    - top_failed_ips lists the 10 source IPs with most failed events
    - high_risk_events list holds the 10 highest-scored events above 30
    - An empty window yields zero totals and empty lists
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, days: Optional[int] = SUMMARY_DEFAULT_DAYS) -> Result[AuditSummaryResponse]:
        days = clamp(days, 1, MAX_WINDOW_DAYS, SUMMARY_DEFAULT_DAYS)
        since = utc_now() - timedelta(days=days)

        async with self.uow:
            try:
                totals = await self.uow.audit_events.summarize(
                    since, high_risk_threshold=HIGH_RISK_THRESHOLD
                )
                by_type = await self.uow.audit_events.count_by_event_type(since)
                failed_ips = await self.uow.audit_events.top_failed_ips(since, limit=TOP_N)
                risky = await self.uow.audit_events.high_risk_events(
                    since, min_score=NOTABLE_RISK_THRESHOLD, limit=TOP_N
                )
            except SQLAlchemyError as exc:
                return Return.err(Error("AUDIT_QUERY_FAILED", str(exc)))

            return Return.ok(
                AuditSummaryResponse(
                    summary=AuditSummaryTotals(**totals),
                    event_types=[EventTypeCount(event_type=t, count=c) for t, c in by_type],
                    top_failed_ips=[
                        FailedIpCount(source_ip=ip, failed_attempts=n) for ip, n in failed_ips
                    ],
                    high_risk_events=[HighRiskEvent.model_validate(e) for e in risky],
                    analysis_period_days=days,
                )
            )
