from datetime import datetime
from typing import Any, Dict, List, Tuple

from sqlalchemy import case, delete, distinct, func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from sms_audit.app.repositories.audit_event_repository import (
    AuditEventFilter,
    IAuditEventRepository,
)
from sms_audit.domain.base import utc_now
from sms_audit.domain.entities import AuditEvent, EventType


def _apply_filters(stmt, filters: AuditEventFilter):
    """Narrow a statement over AuditEvent by every populated filter field"""
    if filters.event_id is not None:
        stmt = stmt.where(AuditEvent.id == filters.event_id)

    if filters.event_type:
        stmt = stmt.where(AuditEvent.event_type == filters.event_type)

    if filters.user_id:
        pattern = f"%{filters.user_id}%"
        stmt = stmt.where(
            or_(
                AuditEvent.subject_user_id.ilike(pattern),
                AuditEvent.attempted_user_id.ilike(pattern),
            )
        )

    if filters.success is not None:
        stmt = stmt.where(AuditEvent.succeeded == filters.success)

    if filters.start_date is not None:
        stmt = stmt.where(AuditEvent.occurred_at >= filters.start_date)

    if filters.end_date is not None:
        stmt = stmt.where(AuditEvent.occurred_at <= filters.end_date)

    if filters.source_ip:
        stmt = stmt.where(AuditEvent.source_ip.ilike(f"%{filters.source_ip}%"))

    if filters.risk_score_min is not None:
        stmt = stmt.where(AuditEvent.risk_score >= filters.risk_score_min)

    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(
            or_(
                AuditEvent.description.ilike(pattern),
                AuditEvent.subject_user_id.ilike(pattern),
                AuditEvent.attempted_user_id.ilike(pattern),
                AuditEvent.error_message.ilike(pattern),
                AuditEvent.user_agent.ilike(pattern),
            )
        )

    return stmt


def _involves_user(user_id: str):
    return or_(
        AuditEvent.subject_user_id == user_id,
        AuditEvent.attempted_user_id == user_id,
    )


def _avg(value) -> float:
    return round(float(value), 2) if value is not None else 0.0


class AuditEventRepository(IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Insert a new audit event (immutable), stamping the insert time"""
        audit_event.recorded_at = utc_now()
        self.session.add(audit_event)
        await self.session.flush()
        await self.session.refresh(audit_event)
        return audit_event

    async def count(self, filters: AuditEventFilter) -> int:
        stmt = _apply_filters(select(func.count(AuditEvent.id)), filters)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def find(
        self, filters: AuditEventFilter, limit: int, offset: int = 0
    ) -> List[AuditEvent]:
        stmt = _apply_filters(select(AuditEvent), filters)
        stmt = (
            stmt.order_by(AuditEvent.occurred_at.desc(), AuditEvent.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def summarize(self, since: datetime, high_risk_threshold: int = 50) -> Dict[str, Any]:
        stmt = select(
            func.count(AuditEvent.id).label("total_events"),
            func.count(case((AuditEvent.succeeded == True, 1))).label("successful_events"),
            func.count(case((AuditEvent.succeeded == False, 1))).label("failed_events"),
            func.count(
                case((AuditEvent.event_type == EventType.LOGIN_SUCCESS.value, 1))
            ).label("successful_logins"),
            func.count(
                case((AuditEvent.event_type == EventType.LOGIN_FAILED.value, 1))
            ).label("failed_logins"),
            func.count(distinct(AuditEvent.subject_user_id)).label("unique_users"),
            func.count(distinct(AuditEvent.source_ip)).label("unique_ips"),
            func.avg(AuditEvent.risk_score).label("avg_risk_score"),
            func.max(AuditEvent.risk_score).label("max_risk_score"),
            func.count(case((AuditEvent.risk_score > high_risk_threshold, 1))).label("high_risk_events"),
        ).where(AuditEvent.occurred_at >= since)

        result = await self.session.execute(stmt)
        row = result.one()
        return {
            "total_events": row.total_events,
            "successful_events": row.successful_events,
            "failed_events": row.failed_events,
            "successful_logins": row.successful_logins,
            "failed_logins": row.failed_logins,
            "unique_users": row.unique_users,
            "unique_ips": row.unique_ips,
            "avg_risk_score": _avg(row.avg_risk_score),
            "max_risk_score": row.max_risk_score or 0,
            "high_risk_events": row.high_risk_events,
        }

    async def count_by_event_type(self, since: datetime) -> List[Tuple[str, int]]:
        count_col = func.count(AuditEvent.id).label("count")
        stmt = (
            select(AuditEvent.event_type, count_col)
            .where(AuditEvent.occurred_at >= since)
            .group_by(AuditEvent.event_type)
            .order_by(count_col.desc(), AuditEvent.event_type)
        )
        result = await self.session.execute(stmt)
        return [(row.event_type, row.count) for row in result.all()]

    async def top_failed_ips(
        self, since: datetime, limit: int = 10
    ) -> List[Tuple[str, int]]:
        failed_col = func.count(AuditEvent.id).label("failed_attempts")
        stmt = (
            select(AuditEvent.source_ip, failed_col)
            .where(
                AuditEvent.occurred_at >= since,
                AuditEvent.succeeded == False,
                AuditEvent.source_ip.is_not(None),
            )
            .group_by(AuditEvent.source_ip)
            .order_by(failed_col.desc(), AuditEvent.source_ip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(row.source_ip, row.failed_attempts) for row in result.all()]

    async def high_risk_events(
        self, since: datetime, min_score: int = 30, limit: int = 10
    ) -> List[AuditEvent]:
        stmt = (
            select(AuditEvent)
            .where(AuditEvent.occurred_at >= since, AuditEvent.risk_score > min_score)
            .order_by(AuditEvent.risk_score.desc(), AuditEvent.occurred_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_user(
        self, user_id: str, since: datetime, limit: int
    ) -> List[AuditEvent]:
        stmt = (
            select(AuditEvent)
            .where(_involves_user(user_id), AuditEvent.occurred_at >= since)
            .order_by(AuditEvent.occurred_at.desc(), AuditEvent.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def summarize_user(self, user_id: str, since: datetime) -> Dict[str, Any]:
        stmt = select(
            func.count(AuditEvent.id).label("total_events"),
            func.count(case((AuditEvent.succeeded == True, 1))).label("successful_events"),
            func.count(case((AuditEvent.succeeded == False, 1))).label("failed_events"),
            func.avg(AuditEvent.risk_score).label("avg_risk_score"),
            func.max(AuditEvent.occurred_at).label("last_activity"),
            func.count(distinct(AuditEvent.source_ip)).label("unique_ips"),
        ).where(_involves_user(user_id), AuditEvent.occurred_at >= since)

        result = await self.session.execute(stmt)
        row = result.one()
        return {
            "total_events": row.total_events,
            "successful_events": row.successful_events,
            "failed_events": row.failed_events,
            "avg_risk_score": _avg(row.avg_risk_score),
            "last_activity": row.last_activity,
            "unique_ips": row.unique_ips,
        }

    async def delete_older_than(self, cutoff: datetime) -> int:
        # Audit rows are never updated in memory, so skip reconciling the identity map
        stmt = (
            delete(AuditEvent)
            .where(AuditEvent.occurred_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
