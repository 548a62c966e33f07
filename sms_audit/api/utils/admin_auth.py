"""
Admin Authorization

Gates the audit administration endpoints on a verified JWT role claim.
"""

from fastapi import Depends, status

from config import ApplicationConfig
from libs.result import Error
from sms_audit.api.error import ClientError
from sms_audit.depends import get_current_user


async def require_superadmin(current_user: dict = Depends(get_current_user)) -> dict:
    """
    Require the superadmin role in the caller's token.

    Args:
        current_user: Decoded JWT payload

    Raises:
        ClientError: 403 if the roles claim lacks the superadmin role

    Returns:
        The decoded JWT payload
    """
    roles = current_user.get("roles") or []
    if isinstance(roles, str):
        roles = roles.split(",")

    if ApplicationConfig.SUPERADMIN_ROLE not in roles:
        raise ClientError(
            Error("ADMIN_REQUIRED", "Administrative access required"),
            status_code=status.HTTP_403_FORBIDDEN,
        )

    return current_user
