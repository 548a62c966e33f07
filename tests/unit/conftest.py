from contextlib import asynccontextmanager
from itertools import count
from unittest.mock import AsyncMock, MagicMock

import pytest

from sms_audit.app.services.audit_recorder import AuditRecorder


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    ids = count(1)

    async def assign_id(event):
        event.id = next(ids)
        return event

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock(side_effect=assign_id)

    uow.user_accounts = MagicMock()
    uow.user_accounts.get_by_user_id = AsyncMock()
    uow.user_accounts.update = AsyncMock()
    return uow


@pytest.fixture
def uow_factory(mock_uow):
    @asynccontextmanager
    async def open_unit_of_work():
        async with mock_uow as uow:
            yield uow

    return open_unit_of_work


@pytest.fixture
def recorder(uow_factory):
    return AuditRecorder(uow_factory, app_version="2.3.4", server_name="sms-test-01")


@pytest.fixture
def mock_recorder():
    recorder = MagicMock(spec=AuditRecorder)
    recorder.record = AsyncMock(return_value=None)
    recorder.login_succeeded = AsyncMock(return_value=None)
    recorder.login_failed = AsyncMock(return_value=None)
    recorder.logout = AsyncMock(return_value=None)
    recorder.account_locked = AsyncMock(return_value=None)
    return recorder


@pytest.fixture
def expire_on_exit(mock_uow):
    """Wrap repository rows so that reading them after the unit of work exits fails"""
    state = {"open": True}

    async def close(*args):
        state["open"] = False
        return False

    mock_uow.__aexit__ = AsyncMock(side_effect=close)

    class Row:
        def __init__(self, event):
            self._event = event

        def __getattr__(self, name):
            if not state["open"]:
                raise RuntimeError(f"{name} read after the unit of work was closed")
            return getattr(self._event, name)

    return Row
