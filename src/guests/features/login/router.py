import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from src.auth.session import AUTH_COOKIE_NAME, SessionSigner, get_session_signer
from src.config.settings import settings
from src.dependencies import get_guest_directory
from src.guests.dtos import SessionGuestDTO
from src.guests.repository.read_models import GuestDirectory
from src.guests.urls import LOGIN_URL

logger = logging.getLogger(__name__)

router = APIRouter()

UNKNOWN_NAME_MESSAGE = (
    "We couldn't find that name. Please enter your name as it appears on your invitation."
)


class LoginRequest(BaseModel):
    name: str = ""


class LoginResponse(BaseModel):
    success: bool
    guest: str


@router.post(LOGIN_URL, response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    response: Response,
    directory: GuestDirectory = Depends(get_guest_directory),
    signer: SessionSigner = Depends(get_session_signer),
) -> LoginResponse:
    """
    Log a guest in by the name on their invitation.
    Sets the session cookie and returns the canonical guest name.
    """
    if not login_data.name.strip():
        raise HTTPException(status_code=400, detail="Please enter your name")

    try:
        guest = await directory.find_by_name(login_data.name)
    except Exception as e:
        logger.error(f"Guest lookup failed during login: {e}")
        raise HTTPException(status_code=500, detail="Login is temporarily unavailable")

    if guest is None:
        raise HTTPException(status_code=401, detail=UNKNOWN_NAME_MESSAGE)

    response.set_cookie(
        AUTH_COOKIE_NAME,
        signer.dumps(SessionGuestDTO.from_guest(guest)),
        max_age=signer.max_age_seconds,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )
    logger.info(f"Guest logged in: {guest.name}")
    return LoginResponse(success=True, guest=guest.name)
