from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from src.auth.session import AUTH_COOKIE_NAME
from src.guests.urls import LOGOUT_URL

router = APIRouter()


def _logout_response() -> RedirectResponse:
    response = RedirectResponse(url="/", status_code=302)
    response.delete_cookie(AUTH_COOKIE_NAME, path="/")
    return response


@router.get(LOGOUT_URL)
async def logout() -> RedirectResponse:
    """Clear the session cookie and go back to the homepage."""
    return _logout_response()


@router.post(LOGOUT_URL)
async def logout_post() -> RedirectResponse:
    return _logout_response()
