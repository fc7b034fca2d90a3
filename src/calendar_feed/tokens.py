"""
Calendar subscription tokens.

A token authorizes read-only access to one guest's calendar feed without a
session cookie, since calendar apps polling a webcal:// URL never send one.

Format: ``base64url(identifier) + "." + hex(HMAC-SHA256(secret, identifier))[:32]``

Tokens are stateless and never expire. Rotating ``CALENDAR_HMAC_SECRET``
invalidates every link handed out so far.
"""

import base64
import binascii
import hashlib
import hmac
import logging
import re

from src.config.settings import settings

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 32
_BASE64URL_RE = re.compile(r"[A-Za-z0-9_-]+")


class CalendarSecretMissingError(RuntimeError):
    """Raised when a token must be signed but no secret is configured."""

    def __init__(self) -> None:
        super().__init__("CALENDAR_HMAC_SECRET is not set.")


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64url_decode(encoded: str) -> bytes | None:
    if not _BASE64URL_RE.fullmatch(encoded):
        return None
    padded = encoded + "=" * (-len(encoded) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError):
        return None
    # Reject non-canonical encodings so every segment maps to exactly one identifier
    if _b64url_encode(raw) != encoded:
        return None
    return raw


class CalendarTokenCodec:
    def __init__(self, secret: str | None = None):
        self._secret = settings.calendar_hmac_secret if secret is None else secret

    def _sign(self, identifier: str) -> str:
        if not self._secret:
            raise CalendarSecretMissingError()
        digest = hmac.new(
            self._secret.encode("utf-8"),
            identifier.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return digest[:SIGNATURE_LENGTH]

    def generate(self, identifier: str) -> str:
        """Mint a token for a guest identifier."""
        encoded = _b64url_encode(identifier.encode("utf-8"))
        return f"{encoded}.{self._sign(identifier)}"

    def verify(self, token: str) -> str | None:
        """
        Return the identifier carried by a valid token, None otherwise.

        Every failure (bad shape, bad encoding, missing secret, wrong
        signature) looks the same to the caller.
        """
        encoded, sep, provided = token.partition(".")
        if not sep or not encoded or not provided:
            return None

        raw = _b64url_decode(encoded)
        if raw is None:
            return None
        try:
            identifier = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
        if not identifier:
            return None

        try:
            expected = self._sign(identifier)
        except CalendarSecretMissingError:
            logger.error("Cannot verify calendar token: CALENDAR_HMAC_SECRET is not set")
            return None

        if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
            return None
        return identifier


def get_token_codec() -> CalendarTokenCodec:
    """Dependency to get the token codec. Override in tests."""
    return CalendarTokenCodec()
