import abc
import logging

from src.events.dtos import Wedding
from src.guests.dtos import GuestNotFoundError, GuestRecord
from src.guests.names import normalize_name
from src.notion.cache import SingleFlightCache
from src.notion.client import NotionClient
from src.notion.properties import parse_guest_page

logger = logging.getLogger(__name__)

# Guests who can log in when the Notion backend is off
AUTHORIZED_GUESTS = [
    "Sam Gross",
    "Margaux Ancel",
    "Charles Gross",
    "Dorothee Ancel",
    "Nicolas Ancel",
    "Toni Waldman",
]

GUEST_LIST_CACHE_KEY = "guests"


class GuestDirectory(abc.ABC):
    @abc.abstractmethod
    async def list_guests(self) -> list[GuestRecord]:
        raise NotImplementedError

    async def find_by_name(self, name: str) -> GuestRecord | None:
        """Match a typed name against the guest list, ignoring case, accents and spacing."""
        wanted = normalize_name(name)
        if not wanted:
            return None
        for guest in await self.list_guests():
            if guest.normalized_name == wanted:
                return guest
        return None

    async def get_party(self, guest_id: str) -> list[GuestRecord]:
        """
        The guest followed by their Related Guests.
        Order: the guest, then the rest of the party, then plus-ones.
        """
        guests = {guest.id: guest for guest in await self.list_guests() if guest.id}
        primary = guests.get(guest_id)
        if primary is None:
            raise GuestNotFoundError(guest_id)

        related = [guests[related_id] for related_id in primary.related_guest_ids if related_id in guests]
        related.sort(key=lambda guest: guest.is_plus_one)
        return [primary, *related]


class HardcodedGuestDirectory(GuestDirectory):
    """Fixed guest list, everybody invited to both weddings."""

    def __init__(self, names: list[str] | None = None):
        self._guests = [
            GuestRecord(
                name=name,
                normalized_name=normalize_name(name),
                event_invitations=[Wedding.NYC, Wedding.FRANCE],
            )
            for name in (names if names is not None else AUTHORIZED_GUESTS)
        ]

    async def list_guests(self) -> list[GuestRecord]:
        return list(self._guests)


class NotionGuestDirectory(GuestDirectory):
    """Guest List database, read once per process."""

    def __init__(self, client: NotionClient, cache: SingleFlightCache):
        self._client = client
        self._cache = cache

    async def _fetch_guests(self) -> list[GuestRecord]:
        database_id = self._client.config.require_guest_list_db()
        pages = await self._client.query_all(database_id)

        guests = []
        for page in pages:
            guest = parse_guest_page(page)
            if guest:
                guests.append(guest)
        logger.info(f"Loaded {len(guests)} guests from Notion")
        return guests

    async def list_guests(self) -> list[GuestRecord]:
        return await self._cache.get_or_fetch(GUEST_LIST_CACHE_KEY, self._fetch_guests)

    def clear_cache(self) -> None:
        self._cache.invalidate(GUEST_LIST_CACHE_KEY)
