from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from sms_audit.app.repositories.user_account_repository import IUserAccountRepository
from sms_audit.domain.entities import UserAccount


class UserAccountRepository(IUserAccountRepository):
    """UserAccount repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: str) -> Optional[UserAccount]:
        """Get account by login name"""
        stmt = select(UserAccount).where(UserAccount.user_id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, account: UserAccount) -> UserAccount:
        """Update existing account"""
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account
