from abc import ABC, abstractmethod

from sms_audit.app.repositories.audit_event_repository import IAuditEventRepository
from sms_audit.app.repositories.user_account_repository import IUserAccountRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    audit_events: IAuditEventRepository
    user_accounts: IUserAccountRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
