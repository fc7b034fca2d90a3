from fastapi import Depends, HTTPException, Request

from src.auth.session import AUTH_COOKIE_NAME, SessionSigner, get_session_signer
from src.guests.dtos import SessionGuestDTO


def get_optional_guest(
    request: Request,
    signer: SessionSigner = Depends(get_session_signer),
) -> SessionGuestDTO | None:
    return signer.loads(request.cookies.get(AUTH_COOKIE_NAME))


def get_current_guest(
    request: Request,
    signer: SessionSigner = Depends(get_session_signer),
) -> SessionGuestDTO:
    cookie = request.cookies.get(AUTH_COOKIE_NAME)
    if not cookie:
        raise HTTPException(status_code=401, detail="Unauthorized")

    guest = signer.loads(cookie)
    if guest is None:
        raise HTTPException(status_code=401, detail="Invalid session")
    return guest
