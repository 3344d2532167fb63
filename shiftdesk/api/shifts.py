"""Shift routes: assignment, listing and deletion."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shiftdesk.api.dependencies import get_current_claims, require_admin
from shiftdesk.database import get_db
from shiftdesk.schemas import SessionClaims, ShiftCreateRequest
from shiftdesk.services.shift_service import ShiftService


logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.post("")
async def create_shift(
    payload: ShiftCreateRequest,
    admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Assign a shift to an employee (admin only).

    Args:
        payload: Owner id, date and start/end timestamps
        admin: Current authenticated admin
        db: Database session

    Returns:
        JSON with the stored shift joined with its owner
    """
    shift = ShiftService(db).create_shift(
        payload.user_id,
        payload.date,
        payload.start_time,
        payload.end_time
    )
    logger.info(f"Admin {admin.user_id} assigned shift {shift.id}")

    return JSONResponse(
        status_code=201,
        content={"message": "Shift created", "shift": shift.to_dict()}
    )


@router.get("")
async def get_shifts(
    date: Optional[str] = Query(None),
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db)
):
    """
    List shifts: every shift for admins, the caller's own for members.

    Args:
        date: Optional YYYY-MM-DD filter
        claims: Current caller's session claims
        db: Database session
    """
    shifts = ShiftService(db).list_shifts(claims, date)
    return {"shifts": [shift.to_dict() for shift in shifts]}


@router.delete("/{shift_id}")
async def delete_shift(
    shift_id: str,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db)
):
    """Delete a shift; allowed for its owner or an admin."""
    ShiftService(db).delete_shift(claims, shift_id)
    return {"message": "Shift deleted"}
