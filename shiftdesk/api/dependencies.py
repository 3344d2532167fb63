"""Request dependencies for session authentication and role gating."""
from typing import Optional

from fastapi import Depends, Header

from shiftdesk.models.user import UserRole
from shiftdesk.schemas import SessionClaims
from shiftdesk.services.access_service import AccessService
from shiftdesk.exceptions import UnauthenticatedError


BEARER_PREFIX = "Bearer "


def get_access_service() -> AccessService:
    return AccessService()


def get_current_claims(
    authorization: Optional[str] = Header(None),
    access_service: AccessService = Depends(get_access_service)
) -> SessionClaims:
    """
    Get the session claims of the current caller.

    Args:
        authorization: Authorization header, expected as "Bearer <token>"
        access_service: Authorization gate

    Returns:
        Claims of the authenticated identity

    Raises:
        UnauthenticatedError: If the header is missing or the session is invalid
        MalformedTokenError: If the session lacks required claims
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthenticatedError("Authentication required")

    return access_service.authenticate(authorization[len(BEARER_PREFIX):])


def require_admin(claims: SessionClaims = Depends(get_current_claims)) -> SessionClaims:
    """Get the current caller's claims, requiring the admin role."""
    return AccessService.authorize_role(claims, UserRole.ADMIN)
