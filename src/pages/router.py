import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.auth.dependencies import get_current_guest
from src.calendar_feed.router import calendar_subscription_url
from src.calendar_feed.tokens import CalendarSecretMissingError, CalendarTokenCodec, get_token_codec
from src.config.features import FeatureFlags, get_features
from src.dependencies import get_event_read_model, get_guest_directory
from src.events.dtos import EventType, ScheduledEventDTO, Wedding
from src.events.read_models import EventReadModel
from src.guests.dtos import GuestNotFoundError, SessionGuestDTO
from src.guests.repository.read_models import GuestDirectory
from src.pages.urls import HOME_URL, REGISTRY_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class HomeResponse(BaseModel):
    message: str
    site_enabled: bool
    teaser: bool


class PartyMemberResponse(BaseModel):
    name: str
    is_plus_one: bool = False


class ScheduleEventResponse(BaseModel):
    id: str
    name: str
    type: EventType
    date: str | None = None
    time: str | None = None
    location: str | None = None
    description: str | None = None


class WeddingPageResponse(BaseModel):
    guest: str
    wedding: Wedding
    party: list[PartyMemberResponse]
    events: list[ScheduleEventResponse]
    calendar_url: str | None = None


class RegistryResponse(BaseModel):
    enabled: bool


def _optional_events_enabled(wedding: Wedding, features: FeatureFlags) -> bool:
    if wedding == Wedding.NYC:
        return features.nyc.optional_events
    return features.france.optional_excursions


def _calendar_enabled(wedding: Wedding, features: FeatureFlags) -> bool:
    if wedding == Wedding.NYC:
        return features.nyc.calendar_subscribe
    return features.france.calendar_subscribe


def visible_events(
    scheduled: list[ScheduledEventDTO], wedding: Wedding, features: FeatureFlags
) -> list[ScheduledEventDTO]:
    """Website events of a wedding, optional ones only when their flag is on, by date."""
    show_optional = _optional_events_enabled(wedding, features)
    events = [
        item
        for item in scheduled
        if item.event.show_on_website and (item.event.type == EventType.CORE or show_optional)
    ]
    # Undated events go last
    return sorted(events, key=lambda item: (item.date is None, item.date or ""))


async def _party(guest: SessionGuestDTO, directory: GuestDirectory) -> list[PartyMemberResponse]:
    if not guest.notion_id:
        return [PartyMemberResponse(name=guest.guest)]
    try:
        party = await directory.get_party(guest.notion_id)
    except GuestNotFoundError:
        logger.warning(f"Session guest {guest.notion_id} is no longer in the guest list")
        return [PartyMemberResponse(name=guest.guest)]
    return [PartyMemberResponse(name=member.name, is_plus_one=member.is_plus_one) for member in party]


async def _wedding_page(
    wedding: Wedding,
    guest: SessionGuestDTO,
    features: FeatureFlags,
    directory: GuestDirectory,
    events: EventReadModel,
    codec: CalendarTokenCodec,
) -> WeddingPageResponse:
    try:
        party = await _party(guest, directory)
        scheduled = await events.with_dates(await events.get_event_catalog(wedding))
    except Exception as e:
        logger.error(f"Failed to load the {wedding.value} page for {guest.guest}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    calendar_url = None
    if guest.notion_id and _calendar_enabled(wedding, features):
        try:
            calendar_url = calendar_subscription_url(codec.generate(guest.notion_id))
        except CalendarSecretMissingError as e:
            logger.error(f"Cannot build calendar link: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    return WeddingPageResponse(
        guest=guest.guest,
        wedding=wedding,
        party=party,
        events=[
            ScheduleEventResponse(
                id=item.event.id,
                name=item.event.name,
                type=item.event.type,
                date=item.date,
                time=item.event.time,
                location=item.event.location,
                description=item.event.description,
            )
            for item in visible_events(scheduled, wedding, features)
        ],
        calendar_url=calendar_url,
    )


@router.get(HOME_URL, response_model=HomeResponse)
async def home(features: FeatureFlags = Depends(get_features)) -> HomeResponse:
    return HomeResponse(
        message="Welcome to the Sargaux wedding",
        site_enabled=features.site_enabled,
        teaser=features.homepage.teaser,
    )


@router.get(Wedding.NYC.route, response_model=WeddingPageResponse)
async def nyc_page(
    guest: SessionGuestDTO = Depends(get_current_guest),
    features: FeatureFlags = Depends(get_features),
    directory: GuestDirectory = Depends(get_guest_directory),
    events: EventReadModel = Depends(get_event_read_model),
    codec: CalendarTokenCodec = Depends(get_token_codec),
) -> WeddingPageResponse:
    """Data for the New York wedding page."""
    return await _wedding_page(Wedding.NYC, guest, features, directory, events, codec)


@router.get(Wedding.FRANCE.route, response_model=WeddingPageResponse)
async def france_page(
    guest: SessionGuestDTO = Depends(get_current_guest),
    features: FeatureFlags = Depends(get_features),
    directory: GuestDirectory = Depends(get_guest_directory),
    events: EventReadModel = Depends(get_event_read_model),
    codec: CalendarTokenCodec = Depends(get_token_codec),
) -> WeddingPageResponse:
    """Data for the France wedding page."""
    return await _wedding_page(Wedding.FRANCE, guest, features, directory, events, codec)


@router.get(REGISTRY_URL, response_model=RegistryResponse)
async def registry(
    guest: SessionGuestDTO = Depends(get_current_guest),
    features: FeatureFlags = Depends(get_features),
) -> RegistryResponse:
    if not features.registry.enabled:
        raise HTTPException(status_code=404, detail="Not found")
    return RegistryResponse(enabled=True)
