from datetime import UTC, datetime, timedelta
from typing import List, Optional

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(user_id: str, roles: List[str], session_id: str) -> str:
    """
    Generate JWT access token

    Args:
        user_id: Login name of the authenticated user
        roles: Role codes held by the user
        session_id: Session identifier issued at login

    Returns:
        JWT token string (HS256, JWT_EXPIRE_MINUTES expiry)
    """
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "roles": roles,
        "sid": session_id,
        "exp": now + timedelta(minutes=ApplicationConfig.JWT_EXPIRE_MINUTES),
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"]
        )
        return payload
    except JWTError:
        return None
