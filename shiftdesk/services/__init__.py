"""Business logic services package."""
from shiftdesk.services.access_service import AccessService
from shiftdesk.services.auth_service import AuthService
from shiftdesk.services.shift_service import ShiftService
from shiftdesk.services.token_service import TokenService

__all__ = [
    "AccessService",
    "AuthService",
    "ShiftService",
    "TokenService",
]
