"""User model for members and administrators."""
from sqlalchemy import Column, String, Enum, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from typing import Dict, Any
import enum
from shiftdesk.database import Base


class UserRole(str, enum.Enum):
    """User role enumeration.

    Roles are fixed when the account is created; there is no promotion flow.
    """
    MEMBER = "member"
    ADMIN = "admin"


class User(Base):
    """User model representing members and administrators."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.MEMBER)
    employee_code = Column(String(16), unique=True, nullable=False)
    department = Column(String(100), nullable=False, default="General")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    shifts = relationship("Shift", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def validate(self) -> None:
        """Validate user data."""
        if not self.id:
            raise ValueError("User ID is required")
        if not self.email:
            raise ValueError("Email is required")
        if not self.name:
            raise ValueError("Name is required")
        if not self.password_hash:
            raise ValueError("Password hash is required")
        if not self.role:
            raise ValueError("Role is required")
        if not self.employee_code:
            raise ValueError("Employee code is required")

    def to_public_dict(self) -> Dict[str, Any]:
        """Public identity fields; the password hash is never exposed."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "employee_code": self.employee_code,
            "department": self.department
        }

    def to_owner_dict(self) -> Dict[str, Any]:
        """Identity fields embedded in shift responses."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "employee_code": self.employee_code
        }
