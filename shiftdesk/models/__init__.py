"""Database models package."""
from shiftdesk.models.user import User, UserRole
from shiftdesk.models.shift import Shift

__all__ = [
    "User",
    "UserRole",
    "Shift",
]
