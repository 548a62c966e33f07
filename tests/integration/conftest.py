from typing import List

import bcrypt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from sms_audit.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from sms_audit.api.utils.jwt import generate_jwt
from sms_audit.depends import build_audit_recorder, get_audit_recorder, get_unit_of_work
from sms_audit.domain.entities import UserAccount


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def recorder(session_factory):
    return build_audit_recorder(session_factory)


@pytest_asyncio.fixture
async def client(db_session, recorder):
    from sms_audit.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_audit_recorder] = lambda: recorder

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def create_account(db_session):
    async def _create(
        user_id: str, password: str, roles: List[str], is_active: bool = True
    ) -> UserAccount:
        account = UserAccount(
            user_id=user_id,
            password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode(),
            roles=",".join(roles),
            is_active=is_active,
        )
        db_session.add(account)
        await db_session.commit()
        return account

    return _create


@pytest.fixture
def admin_headers():
    token = generate_jwt("root", ["SMS_SUPERADM"], "admin-session")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff_headers():
    token = generate_jwt("t.kumar", ["TEACHER"], "staff-session")
    return {"Authorization": f"Bearer {token}"}
