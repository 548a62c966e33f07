from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sms_audit.domain.entities import AuditEvent


@dataclass
class AuditEventFilter:
    """Filter surface shared by list and export queries"""

    event_id: Optional[int] = None
    event_type: Optional[str] = None
    user_id: Optional[str] = None
    success: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    source_ip: Optional[str] = None
    risk_score_min: Optional[int] = None
    search: Optional[str] = None


class IAuditEventRepository(ABC):
    """AuditEvent repository interface - application layer"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Insert a new audit event (immutable)"""
        pass

    @abstractmethod
    async def count(self, filters: AuditEventFilter) -> int:
        """Count events matching filters"""
        pass

    @abstractmethod
    async def find(
        self, filters: AuditEventFilter, limit: int, offset: int = 0
    ) -> List[AuditEvent]:
        """Get events matching filters, newest first"""
        pass

    @abstractmethod
    async def summarize(self, since: datetime, high_risk_threshold: int = 50) -> Dict[str, Any]:
        """
        Aggregate totals for events that occurred at or after `since`.

        high_risk_events counts events scored above `high_risk_threshold`.

        Returns:
            Dict with total_events, successful_events, failed_events,
            successful_logins, failed_logins, unique_users, unique_ips,
            avg_risk_score, max_risk_score, high_risk_events
        """
        pass

    @abstractmethod
    async def count_by_event_type(self, since: datetime) -> List[Tuple[str, int]]:
        """(event_type, count) pairs ordered by count DESC"""
        pass

    @abstractmethod
    async def top_failed_ips(
        self, since: datetime, limit: int = 10
    ) -> List[Tuple[str, int]]:
        """(source_ip, failed_attempts) pairs ordered by failed_attempts DESC"""
        pass

    @abstractmethod
    async def high_risk_events(
        self, since: datetime, min_score: int = 30, limit: int = 10
    ) -> List[AuditEvent]:
        """Events scored above `min_score`, highest score then newest first"""
        pass

    @abstractmethod
    async def find_by_user(
        self, user_id: str, since: datetime, limit: int
    ) -> List[AuditEvent]:
        """Events where the user is the subject or the attempted identity"""
        pass

    @abstractmethod
    async def summarize_user(self, user_id: str, since: datetime) -> Dict[str, Any]:
        """
        Per-user totals.

        Returns:
            Dict with total_events, successful_events, failed_events,
            avg_risk_score, last_activity, unique_ips
        """
        pass

    @abstractmethod
    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete events that occurred before `cutoff`, return deleted count"""
        pass
