"""
Authentication Use Case DTOs (Data Transfer Objects)
"""

from typing import List

from pydantic import BaseModel


class LoginResponse(BaseModel):
    """Response for user login use case"""

    access_token: str
    token_type: str = "bearer"
    user_id: str
    roles: List[str]
    session_id: str


class LogoutResponse(BaseModel):
    """Response for logout use case"""

    message: str
