"""
Export Audit Events Use Case

CSV export of filtered audit events, itself recorded as an audit event.
"""

from dataclasses import replace
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from sms_audit.app.repositories.audit_event_repository import AuditEventFilter
from sms_audit.app.services.audit_recorder import AuditRecorder
from sms_audit.app.services.csv_export import EXPORT_COLUMNS, render_csv
from sms_audit.app.services.event_normalizer import AuditEventInput, RequestContext
from sms_audit.app.services.unit_of_work import UnitOfWork
from sms_audit.domain.base import utc_now
from sms_audit.domain.entities import EventCategory, EventType

from .dtos import AuditExport
from .limits import EXPORT_MAX_ROWS, as_utc


def _filters_for_context(filters: AuditEventFilter) -> Dict[str, Any]:
    applied = {}
    for key, value in vars(filters).items():
        if value is None:
            continue
        applied[key] = value.isoformat() if hasattr(value, "isoformat") else value
    return applied


class ExportAuditEventsUseCase:
    """
    Use case for exporting audit events as CSV.

    Business Rules:
    - Same filters as listing, without pagination
    - At most 10,000 rows, newest first
    - Fixed column set (see EXPORT_COLUMNS)
    - Recorded as an AUDIT_EXPORT event with filters and row count
    """

    def __init__(self, uow: UnitOfWork, recorder: AuditRecorder):
        self.uow = uow
        self.recorder = recorder

    async def execute(
        self,
        actor_id: Optional[str],
        filters: AuditEventFilter,
        request_context: Optional[RequestContext] = None,
    ) -> Result[AuditExport]:
        filters = replace(
            filters,
            start_date=as_utc(filters.start_date),
            end_date=as_utc(filters.end_date),
        )

        async with self.uow:
            try:
                events = await self.uow.audit_events.find(filters, limit=EXPORT_MAX_ROWS)
            except SQLAlchemyError as exc:
                return Return.err(Error("AUDIT_EXPORT_FAILED", str(exc)))

            rows = [{col: getattr(e, col) for col in EXPORT_COLUMNS} for e in events]

        await self.recorder.record(
            AuditEventInput(
                event_type=EventType.AUDIT_EXPORT.value,
                event_category=EventCategory.SYSTEM.value,
                description=f"Audit logs exported by {actor_id}",
                subject_user_id=actor_id,
                succeeded=True,
                context={
                    "exported_records": len(rows),
                    "filters": _filters_for_context(filters),
                },
            ),
            request_context,
        )

        return Return.ok(
            AuditExport(
                row_count=len(rows),
                csv_content=render_csv(rows),
                filename=f"audit_logs_{utc_now().date().isoformat()}.csv",
            )
        )
