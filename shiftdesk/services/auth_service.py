"""Authentication service for registration, login and admin accounts."""
import hashlib
import hmac
import logging
import re
import secrets
import uuid
from typing import List, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shiftdesk.config import settings as app_settings
from shiftdesk.exceptions import (
    ConflictError,
    InternalError,
    InvalidInputError,
    UnauthenticatedError,
)
from shiftdesk.models.user import User, UserRole
from shiftdesk.services.token_service import TokenService


logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NAME_PATTERN = re.compile(r"^[a-zA-Z\s'-]{2,50}$")
MIN_PASSWORD_LENGTH = 6

MEMBER_CODE_PREFIX = "EMP"
ADMIN_CODE_PREFIX = "ADM"


def normalize_email(email: Optional[str]) -> str:
    """Trim and lowercase an email address."""
    return (email or "").strip().lower()


class AuthService:
    """Service for handling authentication operations."""

    def __init__(self, db: Session, token_service: Optional[TokenService] = None):
        """
        Initialize authentication service.

        Args:
            db: Database session
            token_service: Session issuer, defaults to one using app settings
        """
        self.db = db
        self.token_service = token_service or TokenService()

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash a password using PBKDF2-HMAC-SHA256.

        Args:
            password: Plain text password

        Returns:
            Hashed password in format: salt$hash
        """
        if not password:
            raise ValueError("Password is required")

        # Generate a random salt
        salt = secrets.token_hex(32)

        pwd_hash = hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            100000  # iterations
        )

        return f"{salt}${pwd_hash.hex()}"

    @staticmethod
    def verify_password(password: str, hashed_password: str) -> bool:
        """
        Verify a password against a hashed password.

        Args:
            password: Plain text password to verify
            hashed_password: Hashed password in format: salt$hash

        Returns:
            True if password matches, False otherwise
        """
        if not password or not hashed_password:
            return False

        try:
            salt, stored_hash = hashed_password.split('$')

            pwd_hash = hashlib.pbkdf2_hmac(
                'sha256',
                password.encode('utf-8'),
                salt.encode('utf-8'),
                100000  # iterations
            )

            return hmac.compare_digest(pwd_hash.hex(), stored_hash)
        except (ValueError, AttributeError):
            return False

    def get_user_by_email(self, email: str) -> Optional[User]:
        """
        Get a user by email address.

        Args:
            email: Email address, normalized before lookup

        Returns:
            User object if found, None otherwise
        """
        normalized = normalize_email(email)
        if not normalized:
            return None
        return self.db.query(User).filter(User.email == normalized).first()

    def _next_code(self, prefix: str, width: int) -> str:
        """
        Generate the next human-readable code for a new account.

        Starts from the current account count and advances past any code
        already taken, so deleted or seeded accounts never cause a repeat.
        The unique constraint on the column still guards concurrent signups.
        """
        sequence = self.db.query(User).count() + 1
        while True:
            code = f"{prefix}{sequence:0{width}d}"
            taken = self.db.query(User.id).filter(User.employee_code == code).first()
            if not taken:
                return code
            sequence += 1

    @staticmethod
    def _validate_registration(name: Optional[str], email: str, password: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Name is required", "name")
        if not NAME_PATTERN.match(name):
            raise InvalidInputError(
                "Name should only contain letters and be 2-50 characters", "name"
            )

        if not email:
            raise InvalidInputError("Email is required", "email")
        if not EMAIL_PATTERN.match(email):
            raise InvalidInputError("Invalid email format", "email")

        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidInputError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", "password"
            )
        return name

    def _create_user(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole,
        department: str
    ) -> User:
        if self.get_user_by_email(email):
            raise ConflictError("An account with this email already exists")

        if role == UserRole.ADMIN:
            code = self._next_code(ADMIN_CODE_PREFIX, 3)
        else:
            code = self._next_code(MEMBER_CODE_PREFIX, 4)

        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=self.hash_password(password),
            role=role,
            employee_code=code,
            department=department
        )
        user.validate()

        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"IntegrityError creating user {email}: {str(e)}")
            if self.get_user_by_email(email):
                raise ConflictError("An account with this email already exists")
            raise InternalError("Could not create account")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Unexpected error creating user {email}: {str(e)}")
            raise InternalError("Could not create account")

        logger.info(f"Created {role.value} account {user.employee_code} ({user.id})")
        return user

    def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        department: Optional[str] = None
    ) -> Tuple[User, str]:
        """
        Register a new member account and open a session for it.

        Args:
            name: Display name (letters, spaces, apostrophes, hyphens; 2-50 chars)
            email: Email address, normalized before storage
            password: Plain text password, at least 6 characters
            department: Optional department label

        Returns:
            Tuple of (new User, session token)

        Raises:
            InvalidInputError: If a field is missing or malformed
            ConflictError: If the email is already registered
        """
        normalized_email = normalize_email(email)
        name = self._validate_registration(name, normalized_email, password)
        department = (department or "").strip() or app_settings.default_department

        user = self._create_user(name, normalized_email, password, UserRole.MEMBER, department)
        return user, self.token_service.issue(user)

    def create_admin(
        self,
        name: str,
        email: str,
        password: str,
        department: str = "Management"
    ) -> User:
        """
        Create a new administrator account.

        Args:
            name: Admin display name
            email: Admin email address
            password: Admin password (plain text, will be hashed)
            department: Department label

        Returns:
            Newly created User object with admin role

        Raises:
            InvalidInputError: If a field is missing or malformed
            ConflictError: If the email is already registered
        """
        normalized_email = normalize_email(email)
        name = self._validate_registration(name, normalized_email, password)
        return self._create_user(name, normalized_email, password, UserRole.ADMIN, department)

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
        """
        Authenticate a user by email and password.

        Unknown emails and wrong passwords fail with the same message so the
        response does not reveal which accounts exist.

        Returns:
            Tuple of (User, session token)

        Raises:
            InvalidInputError: If email or password is missing, or the email
                is malformed
            UnauthenticatedError: If the credentials do not match
        """
        normalized_email = normalize_email(email)
        if not normalized_email or not password:
            raise InvalidInputError("Email and password are required")
        if not EMAIL_PATTERN.match(normalized_email):
            raise InvalidInputError("Invalid email format", "email")

        user = self.get_user_by_email(normalized_email)
        if not user or not self.verify_password(password, user.password_hash):
            logger.warning(f"Failed login for {normalized_email}")
            raise UnauthenticatedError("Invalid credentials")

        logger.info(f"User {user.id} logged in")
        return user, self.token_service.issue(user)

    def list_employees(self) -> List[Dict[str, str]]:
        """
        List member accounts for shift assignment.

        Returns:
            List of {id, name} dictionaries ordered by name
        """
        employees = self.db.query(User).filter(
            User.role == UserRole.MEMBER
        ).order_by(User.name.asc()).all()

        return [{"id": employee.id, "name": employee.name} for employee in employees]
