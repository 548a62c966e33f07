from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from sms_audit.app.services.audit_recorder import AuditRecorder
from sms_audit.app.use_cases.audit import CleanupAuditEventsUseCase
from sms_audit.app.use_cases.audit.cleanup_audit_events_use_case import effective_retention_days


@pytest.mark.parametrize("requested,expected", [(None, 365), (5, 30), (30, 30), (90, 90)])
def test_retention_floor(requested, expected):
    assert effective_retention_days(requested) == expected


@pytest.mark.asyncio
async def test_short_retention_is_raised_to_thirty_days(mock_uow, mock_recorder):
    mock_uow.audit_events.delete_older_than = AsyncMock(return_value=12)
    before = datetime.now(UTC)

    result = await CleanupAuditEventsUseCase(mock_uow, mock_recorder).execute("root", days=5)

    assert result.is_ok()
    assert result.value.retention_days == 30
    assert result.value.deleted_records == 12
    assert result.value.message == "Cleaned up audit logs older than 30 days"
    cutoff = mock_uow.audit_events.delete_older_than.call_args.args[0]
    assert cutoff <= before - timedelta(days=30) + timedelta(seconds=5)
    assert cutoff >= before - timedelta(days=30, seconds=5)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_cleanup_is_recorded_before_deleting(mock_uow, mock_recorder):
    mock_uow.audit_events.delete_older_than = AsyncMock(return_value=0)

    await CleanupAuditEventsUseCase(mock_uow, mock_recorder).execute("root", days=90)

    mock_recorder.record.assert_called_once()
    event_input = mock_recorder.record.call_args.args[0]
    assert event_input.event_type == "AUDIT_CLEANUP"
    assert event_input.event_category == "SYSTEM"
    assert event_input.subject_user_id == "root"
    assert event_input.succeeded is True
    assert event_input.context == {"retention_days": 90}


@pytest.mark.asyncio
async def test_failed_cleanup_is_recorded_and_reported(mock_uow, mock_recorder):
    mock_uow.audit_events.delete_older_than = AsyncMock(
        side_effect=OperationalError("DELETE FROM audit_log", {}, Exception("lock timeout"))
    )

    result = await CleanupAuditEventsUseCase(mock_uow, mock_recorder).execute("root", days=60)

    assert result.is_err()
    assert result.error.code == "CLEANUP_FAILED"
    assert mock_recorder.record.call_count == 2
    failure = mock_recorder.record.call_args.args[0]
    assert failure.event_type == "AUDIT_CLEANUP"
    assert failure.succeeded is False
    assert "lock timeout" in failure.error_message
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_audit_outage_does_not_block_cleanup(mock_uow):
    def broken_factory():
        raise OSError("audit store unreachable")

    mock_uow.audit_events.delete_older_than = AsyncMock(return_value=3)

    result = await CleanupAuditEventsUseCase(mock_uow, AuditRecorder(broken_factory)).execute("root", days=45)

    assert result.is_ok()
    assert result.value.deleted_records == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error", [TimeoutError("statement timeout"), ConnectionResetError("connection reset by peer")]
)
async def test_driver_errors_are_recorded_and_reported(mock_uow, mock_recorder, error):
    mock_uow.audit_events.delete_older_than = AsyncMock(side_effect=error)

    result = await CleanupAuditEventsUseCase(mock_uow, mock_recorder).execute("root", days=60)

    assert result.is_err()
    assert result.error.code == "CLEANUP_FAILED"
    assert mock_recorder.record.call_count == 2
    failure = mock_recorder.record.call_args.args[0]
    assert failure.succeeded is False
    assert failure.error_message == str(error)
    mock_uow.rollback.assert_called_once()
