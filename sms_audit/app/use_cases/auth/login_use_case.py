"""
Login Use Case

Authenticates an SMS user and records the attempt in the audit ledger.
"""

import secrets
from datetime import UTC, datetime
from typing import Optional

import bcrypt

from libs.result import Error, Result, Return
from sms_audit.api.utils.jwt import generate_jwt
from sms_audit.app.services.audit_recorder import AuditRecorder
from sms_audit.app.services.event_normalizer import RequestContext
from sms_audit.app.services.unit_of_work import UnitOfWork

from .dtos import LoginResponse

# Checked against when the user does not exist to keep timing uniform
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(12))


class LoginUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - Unknown user or wrong password -> LOGIN_FAILED event for the attempted id
    - Inactive account -> LOGIN_LOCKED event
    - Success -> LOGIN_SUCCESS event with roles snapshot and session id
    - Audit events are recorded outside the login transaction
    """

    def __init__(self, uow: UnitOfWork, recorder: AuditRecorder):
        self.uow = uow
        self.recorder = recorder

    async def execute(
        self,
        user_id: str,
        password: str,
        request_context: Optional[RequestContext] = None,
    ) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            user_id: Login name
            password: Plain text password
            request_context: Client details of the login request

        Returns:
            Result with LoginResponse, or Error
        """
        async with self.uow:
            account = await self.uow.user_accounts.get_by_user_id(user_id)

            if account is None:
                bcrypt.checkpw(password.encode(), _DUMMY_HASH)
                await self.recorder.login_failed(
                    user_id, "User not found", request_context, error_code="INVALID_CREDENTIALS"
                )
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid username or password")
                )

            if not bcrypt.checkpw(password.encode(), account.password_hash.encode()):
                await self.recorder.login_failed(
                    user_id, "Invalid password", request_context, error_code="INVALID_CREDENTIALS"
                )
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid username or password")
                )

            if not account.is_active:
                await self.recorder.account_locked(
                    user_id, "Account is disabled", request_context
                )
                return Return.err(Error("ACCOUNT_DISABLED", "User account is disabled"))

            roles = account.role_list()
            session_id = secrets.token_urlsafe(16)

            account.last_login_at = datetime.now(UTC)
            await self.uow.user_accounts.update(account)
            await self.uow.commit()

        await self.recorder.login_succeeded(
            user_id, roles, request_context, session_id=session_id
        )

        return Return.ok(
            LoginResponse(
                access_token=generate_jwt(user_id, roles, session_id),
                user_id=user_id,
                roles=roles,
                session_id=session_id,
            )
        )
