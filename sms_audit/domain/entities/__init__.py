"""
SMS Audit Domain Entities

All domain entities organized by model.
"""

from .enums import EventCategory, EventType

from .audit_event import AuditEvent
from .user_account import UserAccount

__all__ = [
    # Enums
    "EventType",
    "EventCategory",
    # Entities
    "AuditEvent",
    "UserAccount",
]
