"""Account routes: signup, login and the employee directory."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shiftdesk.api.dependencies import require_admin
from shiftdesk.database import get_db
from shiftdesk.schemas import LoginRequest, SessionClaims, SignupRequest
from shiftdesk.services.auth_service import AuthService


# Create router
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """
    Log in with email and password.

    Returns:
        JSON with a session token and the user's public identity
    """
    user, token = AuthService(db).login(payload.email, payload.password)
    return {"message": "Login successful", "token": token, "user": user.to_public_dict()}


@router.post("/signup")
async def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    """
    Register a new member account.

    Returns:
        JSON with a session token and the new user's public identity
    """
    user, token = AuthService(db).register(
        payload.name,
        payload.email,
        payload.password,
        payload.department
    )
    return JSONResponse(
        status_code=201,
        content={"message": "Account created", "token": token, "user": user.to_public_dict()}
    )


@router.get("/employees")
async def get_employees(
    admin: SessionClaims = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """List member accounts (admin only)."""
    return {"employees": AuthService(db).list_employees()}
