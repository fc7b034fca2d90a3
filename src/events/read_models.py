import abc
import asyncio
import logging

from src.events.dtos import EventRecord, ScheduledEventDTO, Wedding
from src.notion.cache import SingleFlightCache
from src.notion.client import NotionClient
from src.notion.properties import parse_day_date, parse_event_page, parse_invited_event_ids

logger = logging.getLogger(__name__)


class EventReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_event_catalog(self, wedding: Wedding) -> list[EventRecord]:
        """All catalog events of one wedding."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_guest_events(self, guest_id: str) -> list[EventRecord]:
        """Events the guest is invited to."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_day_date(self, day_id: str) -> str | None:
        raise NotImplementedError

    async def with_dates(self, events: list[EventRecord]) -> list[ScheduledEventDTO]:
        """Resolve every event's day concurrently. Any failed lookup fails the whole call."""

        async def resolve(event: EventRecord) -> ScheduledEventDTO:
            date = await self.get_day_date(event.day_id) if event.day_id else None
            return ScheduledEventDTO(event=event, date=date)

        return list(await asyncio.gather(*(resolve(event) for event in events)))


class HardcodedEventReadModel(EventReadModel):
    """No event catalog without Notion."""

    async def get_event_catalog(self, wedding: Wedding) -> list[EventRecord]:
        return []

    async def get_guest_events(self, guest_id: str) -> list[EventRecord]:
        return []

    async def get_day_date(self, day_id: str) -> str | None:
        return None


class NotionEventReadModel(EventReadModel):
    """
    Event Catalog and Wedding Timeline reads.
    Catalogs and day dates are cached for the process; a guest's invitations are always fetched fresh.
    """

    def __init__(self, client: NotionClient, cache: SingleFlightCache):
        self._client = client
        self._cache = cache

    async def _fetch_catalog(self, wedding: Wedding) -> list[EventRecord]:
        database_id = self._client.config.require_event_catalog_db()
        pages = await self._client.query_all(database_id)

        events = []
        for page in pages:
            event = parse_event_page(page)
            # The Wedding select is stored as "New York" / "France"
            wedding_label = ((page.get("properties", {}).get("Wedding") or {}).get("select") or {}).get("name")
            if event and wedding_label == wedding.catalog_label:
                events.append(event)
        return events

    async def get_event_catalog(self, wedding: Wedding) -> list[EventRecord]:
        return await self._cache.get_or_fetch(
            ("catalog", wedding), lambda: self._fetch_catalog(wedding)
        )

    async def get_guest_events(self, guest_id: str) -> list[EventRecord]:
        guest_page = await self._client.retrieve_page(guest_id)
        event_ids = parse_invited_event_ids(guest_page)
        if not event_ids:
            return []

        pages = await asyncio.gather(*(self._client.retrieve_page(event_id) for event_id in event_ids))
        events = []
        for page in pages:
            event = parse_event_page(page)
            if event:
                events.append(event)
        return events

    async def _fetch_day_date(self, day_id: str) -> str | None:
        return parse_day_date(await self._client.retrieve_page(day_id))

    async def get_day_date(self, day_id: str) -> str | None:
        return await self._cache.get_or_fetch(("day", day_id), lambda: self._fetch_day_date(day_id))
