from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from sms_audit.api.error import ClientError, ServerError
from sms_audit.app.services.audit_recorder import AuditRecorder
from sms_audit.app.services.event_normalizer import RequestContext
from sms_audit.app.services.unit_of_work import UnitOfWork
from sms_audit.app.use_cases.auth import (
    LoginResponse,
    LoginUseCase,
    LogoutResponse,
    LogoutUseCase,
)
from sms_audit.depends import (
    get_audit_recorder,
    get_current_user,
    get_request_context,
    get_unit_of_work,
)

router = APIRouter(tags=["Authentication"])


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    user_id: str = Field(..., min_length=1, max_length=100, description="Login name")
    password: str = Field(..., min_length=1, description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    recorder: AuditRecorder = Depends(get_audit_recorder),
    request_context: RequestContext = Depends(get_request_context),
):
    """
    User Login

    Authenticates the user and returns a JWT access token. Every attempt is
    recorded in the audit log.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: Account disabled
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUseCase(uow, recorder)
    result = await use_case.execute(request.user_id, request.password, request_context)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "ACCOUNT_DISABLED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    current_user: dict = Depends(get_current_user),
    recorder: AuditRecorder = Depends(get_audit_recorder),
    request_context: RequestContext = Depends(get_request_context),
):
    """
    User Logout

    Records a LOGOUT audit event for the caller.

    Raises:
        - 401 Unauthorized: Missing, invalid or expired JWT
    """
    use_case = LogoutUseCase(recorder)
    result = await use_case.execute(
        current_user["sub"],
        current_user.get("roles") or [],
        session_id=current_user.get("sid"),
        request_context=request_context,
    )

    if result.is_err():
        raise ServerError(result.error)

    return result.value
