import contextlib
from collections.abc import AsyncIterator, Callable

import pytest
from httpx import ASGITransport, AsyncClient

from src.auth.session import AUTH_COOKIE_NAME, SessionSigner, get_session_signer
from src.calendar_feed.tokens import CalendarTokenCodec, get_token_codec
from src.config.features import FeatureFlags, GlobalFlags, get_features
from src.events.dtos import Wedding
from src.guests.dtos import SessionGuestDTO
from src.main import app

TEST_SECRET_KEY = "test-session-secret"
TEST_CALENDAR_SECRET = "test-calendar-secret-with-plenty-of-entropy"


@pytest.fixture
def site_features() -> FeatureFlags:
    """Default flags with the site switched on."""
    return FeatureFlags(global_=GlobalFlags(wedding_site_enabled=True))


@pytest.fixture
def session_signer() -> SessionSigner:
    return SessionSigner(secret_key=TEST_SECRET_KEY, max_age_days=90)


@pytest.fixture
def token_codec() -> CalendarTokenCodec:
    return CalendarTokenCodec(secret=TEST_CALENDAR_SECRET)


@pytest.fixture
def session_cookie(session_signer) -> Callable[..., dict[str, str]]:
    """Build the cookie jar of a logged-in guest."""

    def _cookie(
        guest: str = "Sam Gross",
        notion_id: str | None = "guest-page-1",
        event_invitations: list[Wedding] | None = None,
    ) -> dict[str, str]:
        session = SessionGuestDTO(
            guest=guest,
            notion_id=notion_id,
            event_invitations=list(Wedding) if event_invitations is None else event_invitations,
        )
        return {AUTH_COOKIE_NAME: session_signer.dumps(session)}

    return _cookie


@pytest.fixture
def client_factory(site_features, session_signer, token_codec):
    """
    Create a test client with dependency overrides applied.

    The site is switched on and secrets are fixed unless the overrides say otherwise.
    """

    @contextlib.asynccontextmanager
    async def _factory(
        overrides: dict | None = None,
        cookies: dict[str, str] | None = None,
    ) -> AsyncIterator[AsyncClient]:
        app.dependency_overrides.update(
            {
                get_features: lambda: site_features,
                get_session_signer: lambda: session_signer,
                get_token_codec: lambda: token_codec,
            }
        )
        app.dependency_overrides.update(overrides or {})

        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(
                transport=transport, base_url="http://test", cookies=cookies
            ) as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return _factory


@pytest.fixture
async def client(client_factory) -> AsyncIterator[AsyncClient]:
    async with client_factory() as ac:
        yield ac
