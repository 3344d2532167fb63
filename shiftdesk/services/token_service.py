"""Session token issuing and verification."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from shiftdesk.config import settings as app_settings
from shiftdesk.exceptions import InvalidSessionError, SessionExpiredError
from shiftdesk.models.user import User


class TokenService:
    """Service for issuing signed, time-limited session tokens.

    Sessions are bearer assertions: nothing is stored server-side and a token
    stays valid until it expires. There is no revocation.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        ttl: Optional[timedelta] = None
    ):
        """
        Initialize token service.

        Args:
            secret: Signing key, defaults to the configured JWT secret
            algorithm: Signing algorithm, defaults to the configured one
            ttl: Session lifetime, defaults to the configured number of hours
        """
        self.secret = secret or app_settings.jwt_secret
        self.algorithm = algorithm or app_settings.jwt_algorithm
        self.ttl = ttl or timedelta(hours=app_settings.session_ttl_hours)

    def issue(self, user: User, now: Optional[datetime] = None) -> str:
        """
        Issue a session token for a user.

        Args:
            user: Authenticated user
            now: Issue time (defaults to the current UTC time)

        Returns:
            Encoded token binding the user's id, email and role
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "email": user.email,
            "role": user.role.value,
            "iat": issued_at,
            "exp": issued_at + self.ttl
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify a token's signature and expiry and return its claims.

        Raises:
            SessionExpiredError: If the token was valid but has expired
            InvalidSessionError: If the token fails verification
        """
        try:
            # Claim shapes are checked by the access gate
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_sub": False}
            )
        except jwt.ExpiredSignatureError:
            raise SessionExpiredError()
        except jwt.InvalidTokenError:
            raise InvalidSessionError()
