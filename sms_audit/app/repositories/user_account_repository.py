from abc import ABC, abstractmethod
from typing import Optional

from sms_audit.domain.entities import UserAccount


class IUserAccountRepository(ABC):
    """UserAccount repository interface - application layer"""

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> Optional[UserAccount]:
        """Get account by login name"""
        pass

    @abstractmethod
    async def update(self, account: UserAccount) -> UserAccount:
        """Update existing account"""
        pass
