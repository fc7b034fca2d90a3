"""Who may see which route: the site master switch, login, and per-wedding invitations."""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.auth.session import AUTH_COOKIE_NAME, get_session_signer
from src.config.features import FeatureFlags, get_features
from src.events.dtos import Wedding
from src.guests.dtos import SessionGuestDTO
from src.pages.urls import ALWAYS_OPEN_PREFIXES, HOME_URL, PROTECTED_PREFIXES, PUBLIC_ROUTES

logger = logging.getLogger(__name__)


def resolve_redirect(
    path: str,
    features: FeatureFlags,
    guest: SessionGuestDTO | None,
) -> str | None:
    """Where to send a request for ``path``, or None to let it through."""
    if not features.site_enabled:
        if path == HOME_URL or path.startswith(ALWAYS_OPEN_PREFIXES) or "." in path:
            return None
        return HOME_URL

    if path in PUBLIC_ROUTES or not path.startswith(PROTECTED_PREFIXES):
        return None

    if guest is None:
        return HOME_URL

    primary_route = guest.primary_wedding.route
    for wedding in Wedding:
        if path.startswith(wedding.route) and not guest.is_invited_to(wedding):
            return primary_route
    return None


def _provider(request: Request, provider: Callable[[], Any]) -> Any:
    return request.app.dependency_overrides.get(provider, provider)()


class SiteAccessMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        features: FeatureFlags = _provider(request, get_features)
        signer = _provider(request, get_session_signer)
        guest = signer.loads(request.cookies.get(AUTH_COOKIE_NAME))

        target = resolve_redirect(request.url.path, features, guest)
        if target is not None:
            logger.debug(f"Redirecting {request.url.path} to {target}")
            return RedirectResponse(url=target, status_code=302)
        return await call_next(request)
