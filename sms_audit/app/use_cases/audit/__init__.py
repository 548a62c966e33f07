"""
Audit Use Cases

Query, maintenance and export operations over the audit ledger.
"""

from .cleanup_audit_events_use_case import CleanupAuditEventsUseCase
from .export_audit_events_use_case import ExportAuditEventsUseCase
from .get_audit_summary_use_case import GetAuditSummaryUseCase
from .get_user_audit_history_use_case import GetUserAuditHistoryUseCase
from .list_audit_events_use_case import ListAuditEventsUseCase

__all__ = [
    "CleanupAuditEventsUseCase",
    "ExportAuditEventsUseCase",
    "GetAuditSummaryUseCase",
    "GetUserAuditHistoryUseCase",
    "ListAuditEventsUseCase",
]
