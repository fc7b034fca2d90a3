"""
Feature flags for the wedding site.

Defaults live on the flag groups below. Each flag can be overridden by the
environment variable listed in ``FEATURE_ENV_VARS``; only the literal strings
``true`` and ``false`` count as an override.
"""

import logging
import os
from collections.abc import Mapping
from functools import lru_cache

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class _FlagGroup(BaseModel):
    model_config = ConfigDict(frozen=True)


class GlobalFlags(_FlagGroup):
    wedding_site_enabled: bool = False
    notion_backend: bool = False
    i18n: bool = False
    content_labels_removed: bool = False


class HomepageFlags(_FlagGroup):
    teaser: bool = False


class NycFlags(_FlagGroup):
    details_page_consolidated: bool = False
    schedule_page: bool = True
    optional_events: bool = False
    calendar_subscribe: bool = False
    map_embeds: bool = False
    travel_bus: bool = False
    travel_mta: bool = False
    travel_museums: bool = False


class FranceFlags(_FlagGroup):
    calendar_subscribe: bool = False
    optional_excursions: bool = False
    travel_restructured: bool = False
    accommodation_request: bool = False
    eu_allergens: bool = False
    location_map: bool = False


class RegistryFlags(_FlagGroup):
    enabled: bool = True


class FeatureFlags(_FlagGroup):
    global_: GlobalFlags = GlobalFlags()
    homepage: HomepageFlags = HomepageFlags()
    nyc: NycFlags = NycFlags()
    france: FranceFlags = FranceFlags()
    registry: RegistryFlags = RegistryFlags()

    @property
    def site_enabled(self) -> bool:
        return self.global_.wedding_site_enabled


# (group, field) -> environment variable
FEATURE_ENV_VARS: dict[tuple[str, str], str] = {
    ("global_", "wedding_site_enabled"): "FEATURE_GLOBAL_WEDDING_SITE_ENABLED",
    ("global_", "notion_backend"): "FEATURE_GLOBAL_NOTION_BACKEND",
    ("global_", "i18n"): "FEATURE_GLOBAL_I18N",
    ("global_", "content_labels_removed"): "FEATURE_GLOBAL_CONTENT_LABELS_REMOVED",
    ("homepage", "teaser"): "FEATURE_HOMEPAGE_TEASER",
    ("nyc", "details_page_consolidated"): "FEATURE_NYC_DETAILS_PAGE_CONSOLIDATED",
    ("nyc", "schedule_page"): "FEATURE_NYC_SCHEDULE_PAGE",
    ("nyc", "optional_events"): "FEATURE_NYC_OPTIONAL_EVENTS",
    ("nyc", "calendar_subscribe"): "FEATURE_NYC_CALENDAR_SUBSCRIBE",
    ("nyc", "map_embeds"): "FEATURE_NYC_MAP_EMBEDS",
    ("nyc", "travel_bus"): "FEATURE_NYC_TRAVEL_BUS",
    ("nyc", "travel_mta"): "FEATURE_NYC_TRAVEL_MTA",
    ("nyc", "travel_museums"): "FEATURE_NYC_TRAVEL_MUSEUMS",
    ("france", "calendar_subscribe"): "FEATURE_FRANCE_CALENDAR_SUBSCRIBE",
    ("france", "optional_excursions"): "FEATURE_FRANCE_OPTIONAL_EXCURSIONS",
    ("france", "travel_restructured"): "FEATURE_FRANCE_TRAVEL_RESTRUCTURED",
    ("france", "accommodation_request"): "FEATURE_FRANCE_ACCOMMODATION_REQUEST",
    ("france", "eu_allergens"): "FEATURE_FRANCE_EU_ALLERGENS",
    ("france", "location_map"): "FEATURE_FRANCE_LOCATION_MAP",
    ("registry", "enabled"): "FEATURE_REGISTRY_ENABLED",
}


def _parse_override(raw: str | None) -> bool | None:
    if raw == "true":
        return True
    if raw == "false":
        return False
    return None


def load_features(environ: Mapping[str, str] | None = None) -> FeatureFlags:
    """Resolve flag defaults plus environment overrides."""
    source = os.environ if environ is None else environ
    overrides: dict[str, dict[str, bool]] = {}

    for (group, field), env_var in FEATURE_ENV_VARS.items():
        value = _parse_override(source.get(env_var))
        if value is None:
            continue
        overrides.setdefault(group, {})[field] = value

    defaults = FeatureFlags()
    updates = {
        group: getattr(defaults, group).model_copy(update=fields)
        for group, fields in overrides.items()
    }
    if updates:
        logger.debug(f"Feature flag overrides: {overrides}")
    return defaults.model_copy(update=updates)


@lru_cache
def get_features() -> FeatureFlags:
    return load_features()
