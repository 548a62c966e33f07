"""
Audit Log API Routes

Administrative endpoints for viewing, exporting and pruning the audit log.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from sms_audit.api.error import ServerError
from sms_audit.api.utils.admin_auth import require_superadmin
from sms_audit.app.repositories.audit_event_repository import AuditEventFilter
from sms_audit.app.services.audit_recorder import AuditRecorder
from sms_audit.app.services.event_normalizer import RequestContext
from sms_audit.app.services.unit_of_work import UnitOfWork
from sms_audit.app.use_cases.audit import (
    CleanupAuditEventsUseCase,
    ExportAuditEventsUseCase,
    GetAuditSummaryUseCase,
    GetUserAuditHistoryUseCase,
    ListAuditEventsUseCase,
)
from sms_audit.app.use_cases.audit.dtos import (
    AuditEventListResponse,
    AuditSummaryResponse,
    CleanupResponse,
    UserAuditHistoryResponse,
)
from sms_audit.depends import get_audit_recorder, get_request_context, get_unit_of_work

router = APIRouter(prefix="/audit-logs", tags=["Audit"])


def audit_filters(
    event_id: Optional[int] = Query(None, description="Exact event id"),
    event_type: Optional[str] = Query(None, description="Exact event type"),
    user_id: Optional[str] = Query(None, description="Substring of subject or attempted user id"),
    success: Optional[bool] = Query(None, description="Filter by outcome"),
    start_date: Optional[datetime] = Query(None, description="Inclusive lower bound on occurred_at"),
    end_date: Optional[datetime] = Query(None, description="Inclusive upper bound on occurred_at"),
    source_ip: Optional[str] = Query(None, description="Substring of source IP"),
    risk_score_min: Optional[int] = Query(None, description="Minimum risk score"),
    search: Optional[str] = Query(None, description="Free-text search"),
) -> AuditEventFilter:
    return AuditEventFilter(
        event_id=event_id,
        event_type=event_type,
        user_id=user_id,
        success=success,
        start_date=start_date,
        end_date=end_date,
        source_ip=source_ip,
        risk_score_min=risk_score_min,
        search=search,
    )


@router.get("", status_code=status.HTTP_200_OK, response_model=AuditEventListResponse)
async def list_audit_logs(
    admin: dict = Depends(require_superadmin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    filters: AuditEventFilter = Depends(audit_filters),
    page: int = Query(1, description="Page number, values below 1 read as 1"),
    limit: int = Query(50, description="Page size, clamped to 1-500"),
):
    """
    List Audit Logs

    Returns audit events newest first with pagination metadata.

    Raises:
        - 401 Unauthorized: Missing or invalid JWT
        - 403 Forbidden: Caller is not a superadmin
        - 500 Internal Server Error: Server error
    """
    result = await ListAuditEventsUseCase(uow).execute(filters, page=page, limit=limit)
    if result.is_err():
        raise ServerError(result.error)
    return result.value


@router.get("/summary", status_code=status.HTTP_200_OK, response_model=AuditSummaryResponse)
async def get_audit_summary(
    admin: dict = Depends(require_superadmin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    days: int = Query(7, description="Trailing window in days, clamped to 1-365"),
):
    """
    Audit Log Summary

    Totals, event type breakdown, top failing IPs and recent high-risk events.
    """
    result = await GetAuditSummaryUseCase(uow).execute(days)
    if result.is_err():
        raise ServerError(result.error)
    return result.value


@router.get(
    "/user/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=UserAuditHistoryResponse,
)
async def get_user_audit_history(
    user_id: str,
    admin: dict = Depends(require_superadmin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    limit: int = Query(100, description="Maximum events, clamped to 1-500"),
    days: int = Query(30, description="Trailing window in days, clamped to 1-365"),
):
    """
    User Audit History

    Events where the user is the subject or the attempted identity.
    """
    result = await GetUserAuditHistoryUseCase(uow).execute(user_id, days=days, limit=limit)
    if result.is_err():
        raise ServerError(result.error)
    return result.value


class CleanupRequest(BaseModel):
    """POST /audit-logs/cleanup request payload"""

    days: int = Field(365, description="Retention in days; values below 30 are raised to 30")


@router.post("/cleanup", status_code=status.HTTP_200_OK, response_model=CleanupResponse)
async def cleanup_audit_logs(
    request: Optional[CleanupRequest] = None,
    admin: dict = Depends(require_superadmin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    recorder: AuditRecorder = Depends(get_audit_recorder),
    request_context: RequestContext = Depends(get_request_context),
):
    """
    Cleanup Audit Logs

    Deletes events older than the retention window. The cleanup is itself
    recorded as an AUDIT_CLEANUP event.
    """
    days = request.days if request is not None else None
    use_case = CleanupAuditEventsUseCase(uow, recorder)
    result = await use_case.execute(admin.get("sub"), days, request_context)
    if result.is_err():
        raise ServerError(result.error)
    return result.value


@router.get("/export", status_code=status.HTTP_200_OK)
async def export_audit_logs(
    admin: dict = Depends(require_superadmin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    recorder: AuditRecorder = Depends(get_audit_recorder),
    request_context: RequestContext = Depends(get_request_context),
    filters: AuditEventFilter = Depends(audit_filters),
):
    """
    Export Audit Logs

    Returns up to 10,000 matching events as a CSV attachment.
    """
    use_case = ExportAuditEventsUseCase(uow, recorder)
    result = await use_case.execute(admin.get("sub"), filters, request_context)
    if result.is_err():
        raise ServerError(result.error)

    export = result.value
    if export.row_count == 0:
        return JSONResponse(
            {"success": True, "message": "No records found for export", "data": []}
        )

    return Response(
        content=export.csv_content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
