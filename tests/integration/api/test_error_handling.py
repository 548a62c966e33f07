from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from config import ApplicationConfig
from sms_audit.api.app import create_app
from sms_audit.depends import get_unit_of_work


def broken_unit_of_work():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)
    uow.audit_events = MagicMock()
    uow.audit_events.count = AsyncMock(
        side_effect=OperationalError("SELECT count(*) FROM audit_log", {}, Exception("relation audit_log is locked"))
    )
    return uow


async def list_with_broken_store(environment: str, admin_headers):
    class Config(ApplicationConfig):
        ENVIRONMENT = environment

    app = create_app(Config)
    app.dependency_overrides[get_unit_of_work] = broken_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        return await ac.get("/api/audit-logs", headers=admin_headers)


@pytest.mark.asyncio
async def test_production_hides_internal_error_detail(admin_headers):
    response = await list_with_broken_store("production", admin_headers)

    assert response.status_code == 500
    assert response.json() == {
        "error": {"code": "AUDIT_QUERY_FAILED", "message": "Internal server error"}
    }


@pytest.mark.asyncio
async def test_development_echoes_internal_error_detail(admin_headers):
    response = await list_with_broken_store("development", admin_headers)

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "AUDIT_QUERY_FAILED"
    assert "relation audit_log is locked" in error["message"]
