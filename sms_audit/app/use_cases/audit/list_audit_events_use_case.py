"""
List Audit Events Use Case

Filtered, paginated listing of the audit ledger for administrators.
"""

import math
from dataclasses import asdict, replace

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from sms_audit.app.repositories.audit_event_repository import AuditEventFilter
from sms_audit.app.services.unit_of_work import UnitOfWork

from .dtos import AuditEventListResponse, AuditEventView, Pagination
from .limits import LIST_DEFAULT_LIMIT, LIST_MAX_LIMIT, as_utc, clamp


class ListAuditEventsUseCase:
    """
    Use case for listing audit events.

    Business Rules:
    - page below 1 is treated as page 1
    - limit defaults to 50 and is clamped to [1, 500]
    - Results ordered newest first
    - Total count returned alongside the page for pagination metadata
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, filters: AuditEventFilter, page: int = 1, limit: int = LIST_DEFAULT_LIMIT
    ) -> Result[AuditEventListResponse]:
        page = max(1, page if page is not None else 1)
        limit = clamp(limit, 1, LIST_MAX_LIMIT, LIST_DEFAULT_LIMIT)
        offset = (page - 1) * limit

        filters = replace(
            filters,
            start_date=as_utc(filters.start_date),
            end_date=as_utc(filters.end_date),
        )

        async with self.uow:
            try:
                total = await self.uow.audit_events.count(filters)
                events = await self.uow.audit_events.find(filters, limit=limit, offset=offset)
            except SQLAlchemyError as exc:
                return Return.err(Error("AUDIT_QUERY_FAILED", str(exc)))

            # Build views before the unit of work rolls back and expires the rows
            data = [AuditEventView.model_validate(e) for e in events]

        total_pages = math.ceil(total / limit)
        return Return.ok(
            AuditEventListResponse(
                data=data,
                pagination=Pagination(
                    current_page=page,
                    per_page=limit,
                    total_records=total,
                    total_pages=total_pages,
                    has_next=page < total_pages,
                    has_previous=page > 1,
                ),
                filters_applied=asdict(filters),
            )
        )
