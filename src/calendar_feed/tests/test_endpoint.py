import pytest

from src.calendar_feed.router import calendar_subscription_url
from src.calendar_feed.tokens import CalendarTokenCodec
from src.calendar_feed.urls import CALENDAR_FEED_URL
from src.config.features import FeatureFlags, get_features
from src.dependencies import get_event_read_model
from src.events.dtos import EventRecord, Wedding
from src.events.tests.inmemory_models import InMemoryEventReadModel
from src.notion.client import NotionAPIError

GUEST_ID = "guest-page-1"

EVENTS = [
    EventRecord(
        id="reception",
        name="Reception",
        wedding=Wedding.NYC,
        time="6:00 PM",
        location="Brooklyn, NY",
        day_id="day-1",
    ),
    EventRecord(id="brunch", name="Brunch", wedding=Wedding.FRANCE, day_id="day-2"),
    EventRecord(id="tbd", name="Surprise", wedding=Wedding.FRANCE),
    EventRecord(id="not-invited", name="Rehearsal dinner", wedding=Wedding.NYC, day_id="day-1"),
]


@pytest.fixture
def event_model() -> InMemoryEventReadModel:
    return InMemoryEventReadModel(
        events=EVENTS,
        invitations={GUEST_ID: ["reception", "brunch", "tbd"]},
        day_dates={"day-1": "2026-10-11", "day-2": "2027-05-30"},
    )


@pytest.mark.asyncio
async def test_valid_token_returns_guest_calendar(client_factory, token_codec, event_model):
    token = token_codec.generate(GUEST_ID)
    overrides = {get_event_read_model: lambda: event_model}

    async with client_factory(overrides) as client:
        response = await client.get(CALENDAR_FEED_URL.format(token=token))

    assert response.status_code == 200
    assert response.headers["content-type"] == "text/calendar; charset=utf-8"
    assert response.headers["content-disposition"] == 'attachment; filename="sargaux-wedding.ics"'
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"

    body = response.text
    assert body.startswith("BEGIN:VCALENDAR\r\n")
    assert body.endswith("END:VCALENDAR")
    assert body.count("BEGIN:VEVENT") == 2
    assert "DTSTART;TZID=America/New_York:20261011T180000" in body
    assert "DTSTART;VALUE=DATE:20270530" in body
    assert "LOCATION:Brooklyn\\, NY" in body
    # Not invited / no date
    assert "Rehearsal dinner" not in body
    assert "Surprise" not in body
    assert sorted(event_model.day_lookups) == ["day-1", "day-2"]


@pytest.mark.asyncio
async def test_guest_without_events_gets_empty_calendar(client_factory, token_codec, event_model):
    token = token_codec.generate("guest-without-events")
    overrides = {get_event_read_model: lambda: event_model}

    async with client_factory(overrides) as client:
        response = await client.get(CALENDAR_FEED_URL.format(token=token))

    assert response.status_code == 200
    assert "BEGIN:VCALENDAR" in response.text
    assert "BEGIN:VEVENT" not in response.text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "token",
    ["not-a-real-token", "Z3Vlc3QtcGFnZS0x.aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa", "!!!.abc"],
)
async def test_invalid_token_is_not_found(client_factory, event_model, token):
    overrides = {get_event_read_model: lambda: event_model}

    async with client_factory(overrides) as client:
        response = await client.get(CALENDAR_FEED_URL.format(token=token))

    assert response.status_code == 404
    assert response.json()["detail"] == "Not found"


@pytest.mark.asyncio
async def test_tampered_signature_is_not_found(client_factory, token_codec, event_model):
    encoded = token_codec.generate(GUEST_ID).split(".")[0]
    overrides = {get_event_read_model: lambda: event_model}

    async with client_factory(overrides) as client:
        response = await client.get(CALENDAR_FEED_URL.format(token=f"{encoded}.{'a' * 32}"))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_token_from_rotated_secret_is_not_found(client_factory, event_model):
    token = CalendarTokenCodec(secret="previous-secret").generate(GUEST_ID)
    overrides = {get_event_read_model: lambda: event_model}

    async with client_factory(overrides) as client:
        response = await client.get(CALENDAR_FEED_URL.format(token=token))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_upstream_failure_is_server_error(client_factory, token_codec):
    failing = InMemoryEventReadModel(fail_with=NotionAPIError(502, "Bad gateway"))
    overrides = {get_event_read_model: lambda: failing}

    async with client_factory(overrides) as client:
        response = await client.get(CALENDAR_FEED_URL.format(token=token_codec.generate(GUEST_ID)))

    assert response.status_code == 500
    assert "BEGIN:VCALENDAR" not in response.text


@pytest.mark.asyncio
async def test_feed_is_reachable_while_site_is_disabled(client_factory, token_codec, event_model):
    overrides = {
        get_features: lambda: FeatureFlags(),
        get_event_read_model: lambda: event_model,
    }

    async with client_factory(overrides) as client:
        response = await client.get(CALENDAR_FEED_URL.format(token=token_codec.generate(GUEST_ID)))

    assert response.status_code == 200


def test_subscription_url_uses_webcal_scheme():
    assert (
        calendar_subscription_url("abc.def", host="sargaux.com")
        == "webcal://sargaux.com/api/calendar/abc.def.ics"
    )
