"""Shift management service: validation, conflict detection and persistence."""
import logging
import re
import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

from dateutil.parser import isoparse
from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from shiftdesk.config import settings as app_settings
from shiftdesk.exceptions import (
    ConflictError,
    InternalError,
    InvalidDurationError,
    InvalidInputError,
    NotFoundError,
)
from shiftdesk.models.shift import Shift
from shiftdesk.models.user import User
from shiftdesk.schemas import SessionClaims
from shiftdesk.services.access_service import AccessService


logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_valid_id(value: Optional[str]) -> bool:
    """Check that a value is a record id in canonical dashed UUID form."""
    if not value or not isinstance(value, str):
        return False
    try:
        return str(uuid.UUID(value)) == value.lower()
    except ValueError:
        return False


def parse_shift_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a YYYY-MM-DD calendar date.

    Returns:
        The date, or None if the value is not a real date in that exact shape
    """
    if not value or not isinstance(value, str) or not DATE_PATTERN.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_instant(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into a naive UTC datetime.

    Aware values are converted to UTC; naive values are taken as UTC already.

    Returns:
        The instant, or None if the value does not parse
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = isoparse(value.strip())
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open overlap: [a) and [b) conflict iff each starts before the other ends."""
    return start_a < end_b and start_b < end_a


def validate_shift_window(
    start: datetime,
    end: datetime,
    min_hours: Optional[float] = None,
    max_hours: Optional[float] = None
) -> float:
    """
    Check a shift's time window against the duration rules.

    Args:
        start: Shift start
        end: Shift end
        min_hours: Shortest allowed shift, defaults to the configured minimum
        max_hours: Longest allowed shift, defaults to the configured maximum

    Returns:
        Duration in hours

    Raises:
        InvalidDurationError: If end is not after start, or the duration is
            outside [min_hours, max_hours]
    """
    min_hours = app_settings.min_shift_hours if min_hours is None else min_hours
    max_hours = app_settings.max_shift_hours if max_hours is None else max_hours

    hours = (end - start).total_seconds() / 3600
    if hours <= 0:
        raise InvalidDurationError("Shift end must be after start", hours)
    if hours < min_hours:
        raise InvalidDurationError(
            f"Shift must be at least {min_hours:g} hours (currently {hours:.1f}h)", hours
        )
    if hours > max_hours:
        raise InvalidDurationError(f"Shift cannot exceed {max_hours:g} hours", hours)
    return hours


class ShiftService:
    """Service for handling shift operations."""

    def __init__(self, db: Session):
        """
        Initialize shift service.

        Args:
            db: Database session
        """
        self.db = db

    def find_conflict(
        self,
        user_id: str,
        shift_date: date,
        start: datetime,
        end: datetime
    ) -> Optional[Shift]:
        """
        Find an existing shift overlapping [start, end) for one owner and date.

        Returns:
            The first overlapping Shift, or None
        """
        return self.db.query(Shift).filter(
            and_(
                Shift.user_id == user_id,
                Shift.shift_date == shift_date,
                Shift.start_time < end,
                Shift.end_time > start
            )
        ).first()

    def create_shift(
        self,
        user_id: Optional[str],
        shift_date: Optional[str],
        start_raw: Optional[str],
        end_raw: Optional[str]
    ) -> Shift:
        """
        Validate a proposed shift, check it for conflicts and persist it.

        The owner's row is locked before the overlap query, so concurrent
        requests for the same owner are serialized on databases that support
        row locks. Every check runs before the single insert.

        Args:
            user_id: ID of the employee the shift is assigned to
            shift_date: Calendar date in YYYY-MM-DD form
            start_raw: ISO 8601 start timestamp
            end_raw: ISO 8601 end timestamp

        Returns:
            The stored Shift, with its owner loaded

        Raises:
            InvalidInputError: If the owner, date or times are malformed, or
                the owner does not exist
            InvalidDurationError: If the window breaks the duration rules
            ConflictError: If the window overlaps another shift of the same
                owner on the same date
            InternalError: If the write fails
        """
        if not is_valid_id(user_id):
            raise InvalidInputError("Valid employee selection required", "user_id")

        parsed_date = parse_shift_date(shift_date)
        if parsed_date is None:
            raise InvalidInputError("Valid date required (YYYY-MM-DD)", "date")

        start = parse_instant(start_raw)
        end = parse_instant(end_raw)
        if start is None or end is None:
            raise InvalidInputError("Valid start and end times required")

        hours = validate_shift_window(start, end)

        try:
            owner = self.db.query(User).filter(User.id == user_id).with_for_update().first()
            if not owner:
                raise InvalidInputError("Valid employee selection required", "user_id")

            if self.find_conflict(user_id, parsed_date, start, end):
                logger.info(
                    f"Rejected overlapping shift: user={user_id} date={parsed_date} "
                    f"window={start.isoformat()}-{end.isoformat()}"
                )
                raise ConflictError("This overlaps with an existing shift")

            shift = Shift(
                id=str(uuid.uuid4()),
                user_id=user_id,
                shift_date=parsed_date,
                start_time=start,
                end_time=end
            )
            shift.validate()

            self.db.add(shift)
            self.db.commit()
        except (InvalidInputError, ConflictError):
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Unexpected error saving shift for user {user_id}: {str(e)}")
            raise InternalError("Could not create shift")

        logger.info(f"Created shift {shift.id}: user={user_id} date={parsed_date} hours={hours:.1f}")
        return self.get_shift(shift.id)

    def get_shift(self, shift_id: str) -> Optional[Shift]:
        return self.db.query(Shift).options(
            joinedload(Shift.user)
        ).filter(Shift.id == shift_id).first()

    def list_shifts(
        self,
        claims: SessionClaims,
        date_filter: Optional[str] = None
    ) -> List[Shift]:
        """
        List shifts visible to the caller.

        Admins see every shift; members only ever see their own.

        Args:
            claims: Caller's session claims
            date_filter: Optional YYYY-MM-DD date to restrict the result to

        Returns:
            List of Shift objects ordered by date and start time

        Raises:
            InvalidInputError: If the date filter is malformed
        """
        query = self.db.query(Shift).options(joinedload(Shift.user))

        if date_filter:
            parsed_date = parse_shift_date(date_filter)
            if parsed_date is None:
                raise InvalidInputError("Invalid date format", "date")
            query = query.filter(Shift.shift_date == parsed_date)

        if not claims.is_admin:
            query = query.filter(Shift.user_id == claims.user_id)

        return query.order_by(Shift.shift_date.asc(), Shift.start_time.asc()).all()

    def delete_shift(self, claims: SessionClaims, shift_id: str) -> None:
        """
        Delete a shift on behalf of its owner or an admin.

        Raises:
            InvalidInputError: If the shift id is malformed
            NotFoundError: If no shift has that id
            ForbiddenError: If the caller is neither owner nor admin
            InternalError: If the delete fails
        """
        if not is_valid_id(shift_id):
            raise InvalidInputError("Invalid shift ID", "shift_id")

        shift = self.db.query(Shift).filter(Shift.id == shift_id).first()
        if not shift:
            raise NotFoundError("shift", shift_id)

        AccessService.authorize_owner_or_admin(
            claims, shift.user_id, "Not authorized to delete this shift"
        )

        try:
            self.db.delete(shift)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Unexpected error deleting shift {shift_id}: {str(e)}")
            raise InternalError("Could not delete shift")

        logger.info(f"Deleted shift {shift_id} by user {claims.user_id}")
