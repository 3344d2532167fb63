"""
Request and session schemas.

Request bodies keep every field optional so that missing values reach the
services, which report them with specific messages.
"""
from typing import Optional

from pydantic import BaseModel, Field

from shiftdesk.models.user import UserRole


class SessionClaims(BaseModel):
    """Identity asserted by a verified session token."""
    user_id: str
    email: str
    role: UserRole = UserRole.MEMBER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SignupRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    department: Optional[str] = None


class ShiftCreateRequest(BaseModel):
    """Payload for assigning a shift to an employee."""
    user_id: Optional[str] = Field(None, alias="userId")
    date: Optional[str] = None
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")

    model_config = {"populate_by_name": True}
