"""Unit tests for error handling.

This test module validates:
- the error body shape and status codes of every error kind
- storage failures surfacing as generic internal errors
"""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from shiftdesk.exceptions import (
    ConflictError,
    ForbiddenError,
    InternalError,
    InvalidDurationError,
    InvalidInputError,
    MalformedTokenError,
    NotFoundError,
    SessionExpiredError,
    UnauthenticatedError,
    format_error_for_api,
)
from shiftdesk.models.shift import Shift
from shiftdesk.models.user import User
from shiftdesk.services.auth_service import AuthService
from shiftdesk.services.shift_service import ShiftService
from tests.conftest import make_user


class TestErrorTaxonomy:
    """Test status codes and serialization of each error kind."""

    @pytest.mark.parametrize("error,status,code", [
        (InvalidInputError("bad"), 400, "INVALID_INPUT"),
        (InvalidDurationError("short", 3.0), 400, "INVALID_DURATION"),
        (UnauthenticatedError("who"), 401, "UNAUTHENTICATED"),
        (SessionExpiredError(), 401, "SESSION_EXPIRED"),
        (MalformedTokenError(["sub"]), 401, "MALFORMED_TOKEN"),
        (ForbiddenError("no"), 403, "FORBIDDEN"),
        (NotFoundError("shift", "abc"), 404, "NOT_FOUND"),
        (ConflictError("overlap"), 409, "CONFLICT"),
        (InternalError("oops"), 500, "INTERNAL"),
    ])
    def test_status_and_code(self, error, status, code):
        assert error.status_code == status
        assert error.error_code == code

    def test_format_error_for_api(self):
        error = NotFoundError("shift", "abc")

        assert format_error_for_api(error) == {
            "success": False,
            "error": {
                "code": "NOT_FOUND",
                "message": "Shift not found",
                "details": {"resource_type": "shift", "resource_id": "abc"}
            }
        }

    def test_session_expired_is_unauthenticated(self):
        assert isinstance(SessionExpiredError(), UnauthenticatedError)


class TestStorageFailures:
    """Storage errors are rolled back and reported without internals."""

    def test_shift_commit_failure_becomes_internal_error(self, test_db: Session):
        member = make_user(test_db)
        service = ShiftService(test_db)

        with patch.object(test_db, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk I/O error"))):
            with pytest.raises(InternalError) as exc_info:
                service.create_shift(member.id, "2025-06-10", "2025-06-10T09:00", "2025-06-10T17:00")

        assert exc_info.value.message == "Could not create shift"
        assert "disk" not in exc_info.value.message
        assert test_db.query(Shift).count() == 0

    def test_signup_commit_failure_becomes_internal_error(self, test_db: Session):
        with patch.object(test_db, "commit", side_effect=OperationalError("INSERT", {}, Exception("locked"))):
            with pytest.raises(InternalError) as exc_info:
                AuthService(test_db).register("Jane Smith", "jane@company.com", "secret1")

        assert exc_info.value.message == "Could not create account"
        assert test_db.query(User).count() == 0
