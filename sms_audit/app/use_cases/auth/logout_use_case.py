"""
Logout Use Case

Records the end of an authenticated session. Tokens are stateless, so the
only lasting effect is the LOGOUT audit event.
"""

from typing import List, Optional

from libs.result import Result, Return
from sms_audit.app.services.audit_recorder import AuditRecorder
from sms_audit.app.services.event_normalizer import RequestContext

from .dtos import LogoutResponse


class LogoutUseCase:
    def __init__(self, recorder: AuditRecorder):
        self.recorder = recorder

    async def execute(
        self,
        user_id: str,
        roles: List[str],
        session_id: Optional[str] = None,
        request_context: Optional[RequestContext] = None,
    ) -> Result[LogoutResponse]:
        await self.recorder.logout(
            user_id,
            roles,
            request_context,
            context={"session_id": session_id} if session_id else None,
        )
        return Return.ok(LogoutResponse(message="Logged out successfully"))
