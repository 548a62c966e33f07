"""
Authentication Use Cases
"""

from .dtos import LoginResponse, LogoutResponse
from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase

__all__ = [
    "LoginUseCase",
    "LogoutUseCase",
    "LoginResponse",
    "LogoutResponse",
]
