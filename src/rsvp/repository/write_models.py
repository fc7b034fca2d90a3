"""RSVP write models. Notion has no delete, so removing an RSVP archives its page."""

import logging
from abc import ABC, abstractmethod

from src.events.dtos import Wedding
from src.guests.repository.read_models import GuestDirectory
from src.notion.client import NotionClient
from src.notion.properties import build_rsvp_properties
from src.rsvp.dtos import RSVPSubmissionDTO
from src.rsvp.repository.read_models import RSVPReadModel

logger = logging.getLogger(__name__)

UNKNOWN_GUEST_NAME = "Unknown Guest"


class RSVPWriteModel(ABC):
    @abstractmethod
    async def submit_rsvp(self, guest_id: str, submission: RSVPSubmissionDTO) -> str:
        """
        Create or update the guest's RSVP for the submitted wedding.
        Returns the id of the RSVP page.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_rsvp(self, guest_id: str, event: Wedding) -> bool:
        """Remove the latest RSVP. Returns False when there was none."""
        raise NotImplementedError


class NotionRSVPWriteModel(RSVPWriteModel):
    def __init__(
        self,
        client: NotionClient,
        read_model: RSVPReadModel,
        guest_directory: GuestDirectory,
    ):
        self._client = client
        self._read_model = read_model
        self._guest_directory = guest_directory

    async def _guest_name(self, guest_id: str) -> str:
        for guest in await self._guest_directory.list_guests():
            if guest.id == guest_id:
                return guest.name
        return UNKNOWN_GUEST_NAME

    async def submit_rsvp(self, guest_id: str, submission: RSVPSubmissionDTO) -> str:
        database_id = self._client.config.require_rsvp_responses_db()
        guest_name = await self._guest_name(guest_id)
        properties = build_rsvp_properties(guest_id, guest_name, submission)

        existing = await self._read_model.get_latest_rsvp(guest_id, submission.event)
        if existing:
            await self._client.update_page(existing.id, properties=properties)
            logger.info(f"Updated RSVP {existing.id} for {guest_name} ({submission.event.value})")
            return existing.id

        page = await self._client.create_page(database_id, properties)
        logger.info(f"Created RSVP {page['id']} for {guest_name} ({submission.event.value})")
        return page["id"]

    async def delete_rsvp(self, guest_id: str, event: Wedding) -> bool:
        existing = await self._read_model.get_latest_rsvp(guest_id, event)
        if not existing:
            return False

        await self._client.update_page(existing.id, archived=True)
        logger.info(f"Archived RSVP {existing.id} ({event.value})")
        return True
