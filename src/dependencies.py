"""
Data-access dependencies, built once from the backend mode chosen at startup.

Routers depend on these providers; tests replace them through
``app.dependency_overrides``.
"""

from functools import lru_cache

from src.config.backend import BackendMode, get_backend_mode
from src.events.read_models import EventReadModel, HardcodedEventReadModel, NotionEventReadModel
from src.guests.repository.read_models import (
    GuestDirectory,
    HardcodedGuestDirectory,
    NotionGuestDirectory,
)
from src.notion.cache import SingleFlightCache
from src.notion.client import NotionClient
from src.rsvp.repository.read_models import NotionRSVPReadModel, RSVPReadModel
from src.rsvp.repository.write_models import NotionRSVPWriteModel, RSVPWriteModel


@lru_cache
def get_notion_cache() -> SingleFlightCache:
    """Process-scoped cache shared by every Notion read model."""
    return SingleFlightCache()


@lru_cache
def _notion_client(mode: BackendMode) -> NotionClient | None:
    if not mode.is_notion:
        return None
    return NotionClient(mode.notion)


def get_notion_client() -> NotionClient | None:
    return _notion_client(get_backend_mode())


@lru_cache
def get_guest_directory() -> GuestDirectory:
    client = get_notion_client()
    if client is None:
        return HardcodedGuestDirectory()
    return NotionGuestDirectory(client, get_notion_cache())


@lru_cache
def get_event_read_model() -> EventReadModel:
    client = get_notion_client()
    if client is None:
        return HardcodedEventReadModel()
    return NotionEventReadModel(client, get_notion_cache())


def get_rsvp_read_model() -> RSVPReadModel | None:
    """None when RSVPs cannot be stored (hardcoded backend)."""
    client = get_notion_client()
    if client is None:
        return None
    return NotionRSVPReadModel(client)


def get_rsvp_write_model() -> RSVPWriteModel | None:
    client = get_notion_client()
    read_model = get_rsvp_read_model()
    if client is None or read_model is None:
        return None
    return NotionRSVPWriteModel(client, read_model, get_guest_directory())
