"""Shift model for work schedules."""
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime, date
from typing import Dict, Any
from shiftdesk.database import Base


class Shift(Base):
    """Shift model representing one bounded work interval on one date."""

    __tablename__ = "shifts"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    shift_date = Column(Date, nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Overlap lookups always scan a single owner+date partition
    __table_args__ = (
        Index("ix_shifts_user_date_window", "user_id", "shift_date", "start_time", "end_time"),
    )

    # Relationships
    user = relationship("User", back_populates="shifts")

    def __repr__(self) -> str:
        return (
            f"<Shift(id={self.id}, user_id={self.user_id}, date={self.shift_date}, "
            f"start={self.start_time}, end={self.end_time})>"
        )

    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600

    def validate(self) -> None:
        """Validate shift data."""
        if not self.id:
            raise ValueError("Shift ID is required")
        if not self.user_id:
            raise ValueError("User ID is required")
        if not self.shift_date:
            raise ValueError("Shift date is required")
        if not isinstance(self.shift_date, date):
            raise ValueError("Shift date must be a date object")
        if not self.start_time or not self.end_time:
            raise ValueError("Start and end times are required")
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the shift joined with its owner's public identity."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "shift_date": self.shift_date.isoformat(),
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "duration_hours": round(self.duration_hours, 1),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "user": self.user.to_owner_dict() if self.user else None
        }
