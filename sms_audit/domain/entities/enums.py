"""
SMS Audit Domain Enums

Well-known values for audit event columns. The columns themselves stay
plain strings so new event types can be written without a migration.
"""

from enum import Enum


class EventType(str, Enum):
    """Audit event type"""

    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGIN_LOCKED = "LOGIN_LOCKED"
    LOGOUT = "LOGOUT"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    PASSWORD_CHANGE = "PASSWORD_CHANGE"
    PASSWORD_RESET = "PASSWORD_RESET"
    ACCOUNT_CREATED = "ACCOUNT_CREATED"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"
    ACCOUNT_ENABLED = "ACCOUNT_ENABLED"
    ROLE_CHANGED = "ROLE_CHANGED"
    SUSPICIOUS_ACTIVITY = "SUSPICIOUS_ACTIVITY"
    AUDIT_CLEANUP = "AUDIT_CLEANUP"
    AUDIT_EXPORT = "AUDIT_EXPORT"


class EventCategory(str, Enum):
    """Coarse grouping of audit events"""

    AUTH = "AUTH"
    USER_MGMT = "USER_MGMT"
    DATA_CHANGE = "DATA_CHANGE"
    SYSTEM = "SYSTEM"
