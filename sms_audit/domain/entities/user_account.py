"""
UserAccount Entity

Login identity checked by the authentication endpoints.
"""

from datetime import datetime
from typing import List, Optional

from sqlmodel import Column, DateTime, Field, SQLModel


class UserAccount(SQLModel, table=True):
    """
    UserAccount entity - a person who can sign in to the SMS.

    Business Rules:
    - user_id is the login name and is unique
    - Password stored as bcrypt hash (cost factor 12)
    - roles is a comma-joined list of role codes (e.g. "SMS_SUPERADM,TEACHER")
    - Inactive accounts cannot sign in
    """

    __tablename__ = "sms_users"

    user_id: str = Field(primary_key=True, max_length=100)
    password_hash: str = Field(max_length=60)
    roles: str = Field(default="", max_length=200)
    is_active: bool = Field(default=True)

    last_login_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )

    def role_list(self) -> List[str]:
        return [r.strip() for r in self.roles.split(",") if r.strip()]
