"""Signed session cookie set after a successful name login."""

import logging

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from src.config.settings import settings
from src.events.dtos import Wedding
from src.guests.dtos import SessionGuestDTO

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "sargaux_auth"
SESSION_SALT = "session"


class SessionSigner:
    def __init__(self, secret_key: str | None = None, max_age_days: int | None = None):
        self._serializer = URLSafeTimedSerializer(
            secret_key or settings.secret_key, salt=SESSION_SALT
        )
        self.max_age_seconds = 60 * 60 * 24 * (max_age_days or settings.session_max_age_days)

    def dumps(self, guest: SessionGuestDTO) -> str:
        payload = {
            "guest": guest.guest,
            "event_invitations": [wedding.value for wedding in guest.event_invitations],
        }
        if guest.notion_id:
            payload["notion_id"] = guest.notion_id
        return self._serializer.dumps(payload)

    def loads(self, token: str | None) -> SessionGuestDTO | None:
        if not token:
            return None
        try:
            payload = self._serializer.loads(token, max_age=self.max_age_seconds)
        except SignatureExpired:
            logger.debug("Session cookie expired")
            return None
        except BadSignature:
            return None

        if not isinstance(payload, dict) or not isinstance(payload.get("guest"), str):
            return None

        invitations = [
            Wedding(value)
            for value in payload.get("event_invitations") or []
            if value in (Wedding.NYC.value, Wedding.FRANCE.value)
        ]
        return SessionGuestDTO(
            guest=payload["guest"],
            event_invitations=invitations,
            notion_id=payload.get("notion_id"),
        )


def get_session_signer() -> SessionSigner:
    """Dependency to get the session signer. Override in tests."""
    return SessionSigner()
