from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from sms_audit.adapter.repositories.audit_event_repository import AuditEventRepository
from sms_audit.adapter.repositories.user_account_repository import UserAccountRepository
from sms_audit.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.audit_events = AuditEventRepository(self.session)
        self.user_accounts = UserAccountRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()


def unit_of_work_factory(
    session_factory: sessionmaker,
) -> Callable[[], AsyncContextManager[UnitOfWork]]:
    """Build a factory that opens a fresh session-backed unit of work per call"""

    @asynccontextmanager
    async def open_unit_of_work() -> AsyncIterator[UnitOfWork]:
        async with session_factory() as session:
            async with SqlAlchemyUnitOfWork(session) as uow:
                yield uow

    return open_unit_of_work
