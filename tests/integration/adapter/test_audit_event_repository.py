from datetime import UTC, datetime, timedelta

import pytest
from sqlmodel import select

from sms_audit.adapter.repositories.audit_event_repository import AuditEventRepository
from sms_audit.domain.base import utc_now
from sms_audit.domain.entities import AuditEvent


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive UTC timestamps
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@pytest.mark.asyncio
async def test_create_stamps_insert_time(db_session):
    event = AuditEvent(
        event_type="LOGIN_SUCCESS",
        occurred_at=utc_now() - timedelta(hours=3),
        recorded_at=datetime(2020, 1, 1, tzinfo=UTC),
    )
    before = utc_now()

    saved = await AuditEventRepository(db_session).create(event)
    await db_session.commit()

    assert saved.id is not None
    assert as_utc(saved.recorded_at) >= before - timedelta(seconds=1)
    assert as_utc(saved.recorded_at) > as_utc(saved.occurred_at)


@pytest.mark.asyncio
async def test_delete_older_than_with_rows_loaded_in_session(db_session):
    old = AuditEvent(event_type="LOGOUT", occurred_at=utc_now() - timedelta(days=60))
    recent = AuditEvent(event_type="LOGOUT", occurred_at=utc_now() - timedelta(days=2))
    db_session.add_all([old, recent])
    await db_session.commit()
    # Reloaded rows carry the timestamps exactly as the database returns them
    await db_session.refresh(old)
    await db_session.refresh(recent)

    deleted = await AuditEventRepository(db_session).delete_older_than(utc_now() - timedelta(days=30))
    await db_session.commit()

    assert deleted == 1
    result = await db_session.exec(select(AuditEvent.id))
    assert list(result.all()) == [recent.id]
