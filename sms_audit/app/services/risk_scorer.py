"""
Risk Scorer

Additive rule table mapping a normalized event to an integer in [0, 100].
Scores are computed once at write time and stored with the event.
"""

from datetime import datetime
from typing import Iterable, Optional

from sms_audit.domain.entities import AuditEvent, EventType

MAX_RISK_SCORE = 100

DEFAULT_ADMIN_ROLE_MARKERS = ("SMS_SUPERADM", "GRP_ADM", "ADMIN")
SUSPICIOUS_AGENT_MARKERS = ("bot", "crawler", "spider")

BUSINESS_HOURS_START = 6
BUSINESS_HOURS_END = 22


class RiskFactor:
    """Points contributed by each rule"""

    FAILED_LOGIN = 10
    ADMIN_ACCESS = 5
    SUSPICIOUS_USER_AGENT = 10
    UNUSUAL_HOURS = 5


def has_admin_role(roles_snapshot: Optional[str], markers: Iterable[str]) -> bool:
    if not roles_snapshot:
        return False
    roles = roles_snapshot.upper()
    return any(marker.upper() in roles for marker in markers)


def is_suspicious_user_agent(user_agent: Optional[str]) -> bool:
    agent = (user_agent or "").lower()
    return agent == "unknown" or any(m in agent for m in SUSPICIOUS_AGENT_MARKERS)


def is_unusual_hour(now: datetime) -> bool:
    return now.hour < BUSINESS_HOURS_START or now.hour > BUSINESS_HOURS_END


def score_event(
    event: AuditEvent,
    now: Optional[datetime] = None,
    admin_role_markers: Iterable[str] = DEFAULT_ADMIN_ROLE_MARKERS,
) -> int:
    """
    Score an event. Rules are independent and their points add up.

    Args:
        event: Normalized audit event
        now: Server-local time used for the hour-of-day rule; defaults to now
        admin_role_markers: Substrings marking an admin-tier role

    Returns:
        Risk score clamped to [0, 100]
    """
    if now is None:
        now = datetime.now()

    score = 0

    if event.event_type == EventType.LOGIN_FAILED.value:
        score += RiskFactor.FAILED_LOGIN

    if has_admin_role(event.roles_snapshot, admin_role_markers):
        score += RiskFactor.ADMIN_ACCESS

    if is_suspicious_user_agent(event.user_agent):
        score += RiskFactor.SUSPICIOUS_USER_AGENT

    if is_unusual_hour(now):
        score += RiskFactor.UNUSUAL_HOURS

    return max(0, min(score, MAX_RISK_SCORE))
