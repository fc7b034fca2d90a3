"""Selects where guest, event and RSVP data come from, once per process."""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from src.config.features import FeatureFlags, get_features
from src.config.settings import Settings, settings

logger = logging.getLogger(__name__)


class NotionConfigError(RuntimeError):
    """Raised when a Notion setting needed for a call is missing."""

    def __init__(self, env_var: str) -> None:
        self.env_var = env_var
        super().__init__(f"{env_var} is not set. Add it to the environment (never commit it).")


class BackendKind(str, Enum):
    HARDCODED = "hardcoded"
    NOTION = "notion"


@dataclass(frozen=True)
class NotionConfig:
    api_key: str
    api_url: str
    version: str
    guest_list_db: str = ""
    event_catalog_db: str = ""
    rsvp_responses_db: str = ""

    @classmethod
    def from_settings(cls, config: Settings) -> "NotionConfig":
        return cls(
            api_key=config.notion_api_key,
            api_url=config.notion_api_url,
            version=config.notion_version,
            guest_list_db=config.notion_guest_list_db,
            event_catalog_db=config.notion_event_catalog_db,
            rsvp_responses_db=config.notion_rsvp_responses_db,
        )

    def require_guest_list_db(self) -> str:
        if not self.guest_list_db:
            raise NotionConfigError("NOTION_GUEST_LIST_DB")
        return self.guest_list_db

    def require_event_catalog_db(self) -> str:
        if not self.event_catalog_db:
            raise NotionConfigError("NOTION_EVENT_CATALOG_DB")
        return self.event_catalog_db

    def require_rsvp_responses_db(self) -> str:
        if not self.rsvp_responses_db:
            raise NotionConfigError("NOTION_RSVP_RESPONSES_DB")
        return self.rsvp_responses_db


@dataclass(frozen=True)
class BackendMode:
    kind: BackendKind
    notion: NotionConfig | None = None

    @classmethod
    def hardcoded(cls) -> "BackendMode":
        return cls(kind=BackendKind.HARDCODED)

    @classmethod
    def remote(cls, notion: NotionConfig) -> "BackendMode":
        return cls(kind=BackendKind.NOTION, notion=notion)

    @property
    def is_notion(self) -> bool:
        return self.kind == BackendKind.NOTION


def select_backend_mode(features: FeatureFlags, config: Settings) -> BackendMode:
    if not features.global_.notion_backend:
        return BackendMode.hardcoded()

    if not config.notion_api_key:
        logger.warning("Notion backend enabled but NOTION_API_KEY is not set, using hardcoded guests")
        return BackendMode.hardcoded()

    return BackendMode.remote(NotionConfig.from_settings(config))


@lru_cache
def get_backend_mode() -> BackendMode:
    mode = select_backend_mode(get_features(), settings)
    logger.info(f"Using {mode.kind.value} backend")
    return mode
