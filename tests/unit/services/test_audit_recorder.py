from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from sms_audit.app.services.audit_recorder import AuditRecorder, RecordedEvent
from sms_audit.app.services.event_normalizer import AuditEventInput, RequestContext

TWO_AM = datetime(2026, 10, 19, 2, 0)
CURL = RequestContext(source_ip="203.0.113.5", user_agent="curl/7.68.0", http_method="POST", http_path="/login")


@pytest.mark.asyncio
async def test_record_returns_id_and_timestamp(recorder, mock_uow):
    result = await recorder.record(AuditEventInput(event_type="LOGOUT", subject_user_id="bob"))

    assert isinstance(result, RecordedEvent)
    assert result.id == 1
    assert result.recorded_at is not None
    mock_uow.audit_events.create.assert_called_once()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_record_stores_normalized_and_scored_event(recorder, mock_uow):
    result = await recorder.record(
        AuditEventInput(event_type="LOGIN_FAILED", attempted_user_id="alice"), CURL, now=TWO_AM
    )

    saved = mock_uow.audit_events.create.call_args.args[0]
    assert saved.risk_score == 15
    assert result.risk_score == 15
    assert saved.source_ip == "203.0.113.5"
    assert saved.app_version == "2.3.4"
    assert saved.server_name == "sms-test-01"


@pytest.mark.asyncio
async def test_store_failure_returns_none_instead_of_raising(recorder, mock_uow):
    mock_uow.audit_events.create = AsyncMock(
        side_effect=OperationalError("INSERT INTO audit_log", {}, Exception("connection refused"))
    )

    result = await recorder.record(AuditEventInput(event_type="LOGIN_SUCCESS"))

    assert result is None
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_commit_failure_returns_none(recorder, mock_uow):
    mock_uow.commit = AsyncMock(side_effect=RuntimeError("database is gone"))

    assert await recorder.record(AuditEventInput(event_type="LOGOUT")) is None


@pytest.mark.asyncio
async def test_unreachable_store_returns_none():
    def broken_factory():
        raise OSError("could not connect to server")

    recorder = AuditRecorder(broken_factory)

    assert await recorder.record(AuditEventInput(event_type="LOGOUT")) is None


@pytest.mark.asyncio
async def test_login_failed_records_attempted_user_only(recorder, mock_uow):
    await recorder.login_failed("alice", "Invalid password", CURL, error_code="INVALID_CREDENTIALS")

    saved = mock_uow.audit_events.create.call_args.args[0]
    assert saved.event_type == "LOGIN_FAILED"
    assert saved.attempted_user_id == "alice"
    assert saved.subject_user_id is None
    assert saved.succeeded is False
    assert saved.error_message == "Invalid password"
    assert saved.error_code == "INVALID_CREDENTIALS"
    assert saved.description == "Failed login attempt for user alice: Invalid password"


@pytest.mark.asyncio
async def test_login_succeeded_records_roles_and_session(recorder, mock_uow):
    await recorder.login_succeeded("bob", ["ADMIN", "USER"], CURL, session_id="s-123")

    saved = mock_uow.audit_events.create.call_args.args[0]
    assert saved.event_type == "LOGIN_SUCCESS"
    assert saved.subject_user_id == "bob"
    assert saved.attempted_user_id == "bob"
    assert saved.roles_snapshot == "ADMIN,USER"
    assert saved.session_id == "s-123"
    assert saved.succeeded is True


@pytest.mark.asyncio
async def test_logout_and_account_locked(recorder, mock_uow):
    await recorder.logout("bob", "TEACHER")
    logout = mock_uow.audit_events.create.call_args.args[0]

    await recorder.account_locked("carol", "Account is disabled")
    locked = mock_uow.audit_events.create.call_args.args[0]

    assert logout.event_type == "LOGOUT"
    assert logout.succeeded is True
    assert locked.event_type == "LOGIN_LOCKED"
    assert locked.subject_user_id is None
    assert locked.attempted_user_id == "carol"
    assert locked.succeeded is False
    assert locked.description == "Account carol locked: Account is disabled"


@pytest.mark.asyncio
async def test_suspicious_activity(recorder, mock_uow):
    await recorder.suspicious_activity("dave", "Token reuse detected", context={"attempts": 3})

    saved = mock_uow.audit_events.create.call_args.args[0]
    assert saved.event_type == "SUSPICIOUS_ACTIVITY"
    assert saved.error_message == "Suspicious activity detected"
    assert saved.context == {"attempts": 3}
