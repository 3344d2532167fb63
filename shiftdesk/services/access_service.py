"""Authorization gate: session authentication and permission checks."""
import logging
from typing import Optional

from shiftdesk.exceptions import (
    ForbiddenError,
    MalformedTokenError,
    UnauthenticatedError,
)
from shiftdesk.models.user import UserRole
from shiftdesk.schemas import SessionClaims
from shiftdesk.services.token_service import TokenService


logger = logging.getLogger(__name__)

# Values that browsers and clients send when no token was stored
PLACEHOLDER_TOKENS = {"undefined", "null"}

REQUIRED_CLAIMS = ("sub", "email")


class AccessService:
    """Service for authenticating sessions and authorizing actions."""

    def __init__(self, token_service: Optional[TokenService] = None):
        """
        Initialize access service.

        Args:
            token_service: Token verifier, defaults to one using app settings
        """
        self.token_service = token_service or TokenService()

    def authenticate(self, token: Optional[str]) -> SessionClaims:
        """
        Map a presented session token to the identity it asserts.

        Args:
            token: Raw token string, or None when the request carried none

        Returns:
            SessionClaims with the identity id, email and role

        Raises:
            UnauthenticatedError: If no token is presented, the token is an
                empty placeholder, fails verification, or has expired
            MalformedTokenError: If a verified token lacks the identity id
                or email
        """
        if token is None:
            raise UnauthenticatedError("Authentication required")

        token = token.strip()
        if not token or token in PLACEHOLDER_TOKENS:
            raise UnauthenticatedError("Invalid token format")

        try:
            claims = self.token_service.decode(token)
        except UnauthenticatedError as e:
            logger.warning(f"Rejected session token: {e.message}")
            raise

        missing = [
            name for name in REQUIRED_CLAIMS
            if not claims.get(name) or not isinstance(claims.get(name), str)
        ]
        if missing:
            logger.warning(f"Session token missing claims: {missing}")
            raise MalformedTokenError(missing)

        role = claims.get("role")
        try:
            role = UserRole(role) if role else UserRole.MEMBER
        except ValueError:
            raise MalformedTokenError(["role"])

        return SessionClaims(user_id=str(claims["sub"]), email=claims["email"], role=role)

    @staticmethod
    def authorize_role(claims: SessionClaims, required_role: UserRole) -> SessionClaims:
        """
        Require the identity to hold a specific role.

        Raises:
            ForbiddenError: If the identity's role differs
        """
        if claims.role != required_role:
            logger.warning(
                f"Role check failed: user={claims.user_id} role={claims.role.value} "
                f"required={required_role.value}"
            )
            if required_role == UserRole.ADMIN:
                raise ForbiddenError("Admin privileges required")
            raise ForbiddenError(f"{required_role.value.capitalize()} role required")
        return claims

    @staticmethod
    def authorize_owner_or_admin(
        claims: SessionClaims,
        resource_owner_id: str,
        message: str = "Not authorized to access this resource"
    ) -> SessionClaims:
        """
        Require the identity to own the resource or be an admin.

        Raises:
            ForbiddenError: If the identity is neither owner nor admin
        """
        if claims.user_id == resource_owner_id or claims.is_admin:
            return claims

        logger.warning(
            f"Ownership check failed: user={claims.user_id} owner={resource_owner_id}"
        )
        raise ForbiddenError(message)
