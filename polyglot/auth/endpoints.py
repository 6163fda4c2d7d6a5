"""
Authentication endpoints for Polyglot.

Registration, lockout-aware login and logout. Session state is read from and
written back to the request's server-side session.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field, field_validator

from ..dependencies import get_auth_service
from ..sessions.middleware import Session, get_request_session
from ..structured_logging.enhanced_logging_config import get_logger
from .service import AuthService, LoginResult

logger = get_logger(__name__)

auth_router = APIRouter(prefix="/api", tags=["auth"])

# Body shared by unknown-email and wrong-password responses
INVALID_CREDENTIALS = {"detail": "Invalid email or password"}


class NewUserRequest(BaseModel):
    """Schema for registration requests."""

    userName: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    password: str

    @field_validator("password")
    @classmethod
    def validate_password_not_empty(cls, v: str) -> str:
        """Validate that password is not empty."""
        if not v or not v.strip():
            raise ValueError("Password cannot be empty")
        return v


class AuthRequest(BaseModel):
    """Schema for login requests."""

    email: str
    password: str


@auth_router.post("/register", status_code=201)
async def register_user(
    body: NewUserRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    """
    Create an account.

    Storage failures (including a duplicate email) surface as a 500 whose
    message is the sanitized description from the error handler.
    """
    user = await auth_service.register_user(body.userName, body.email, body.password)
    return user.to_public_dict()


@auth_router.post("/login")
async def login(
    body: AuthRequest,
    session: Session = Depends(get_request_session),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Log in against the session's lockout state.

    200 with the identity on success, 404 for unknown email or wrong password,
    429 with a plain-text remaining-time message while locked out.
    """
    outcome, new_state = await auth_service.log_in(session.state, body.email, body.password)

    if outcome.result is LoginResult.THROTTLED:
        return PlainTextResponse(outcome.message or "", status_code=429)

    if outcome.result is LoginResult.NOT_FOUND:
        # Saved even when unchanged so both failure kinds send the same headers
        session.update(new_state)
        return JSONResponse(INVALID_CREDENTIALS, status_code=404)

    session.update(new_state, rotate=True)
    user = new_state.authenticated_user
    if user is None:
        raise RuntimeError("Successful login produced a session without an identity")
    return {"userId": user.user_id, "email": user.email}


@auth_router.post("/logout")
async def logout(session: Session = Depends(get_request_session)) -> dict:
    """Destroy the current session and expire its cookie."""
    was_logged_in = session.state.is_logged_in
    session.clear()
    logger.info("Session logged out", was_logged_in=was_logged_in)
    return {"loggedOut": True}
