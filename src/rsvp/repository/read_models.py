import abc

from src.events.dtos import Wedding
from src.notion.client import NotionClient
from src.notion.properties import parse_rsvp_page
from src.rsvp.dtos import RSVPRecordDTO


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_latest_rsvp(self, guest_id: str, event: Wedding) -> RSVPRecordDTO | None:
        """Most recent RSVP of a guest for one wedding, used to prefill the form."""
        raise NotImplementedError


class NotionRSVPReadModel(RSVPReadModel):
    def __init__(self, client: NotionClient):
        self._client = client

    async def get_latest_rsvp(self, guest_id: str, event: Wedding) -> RSVPRecordDTO | None:
        database_id = self._client.config.require_rsvp_responses_db()
        response = await self._client.query_database(
            database_id,
            {
                "page_size": 1,
                "filter": {
                    "and": [
                        {"property": "Guest", "relation": {"contains": guest_id}},
                        {"property": "Event", "select": {"equals": event.rsvp_label}},
                    ]
                },
                "sorts": [{"property": "Submitted At", "direction": "descending"}],
            },
        )
        results = response.get("results") or []
        return parse_rsvp_page(results[0] if results else None, guest_id, event)
