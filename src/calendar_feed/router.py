import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from src.calendar_feed.ics import EventOccurrence, build_ics
from src.calendar_feed.tokens import CalendarTokenCodec, get_token_codec
from src.calendar_feed.urls import CALENDAR_FEED_URL, CALENDAR_FILENAME
from src.config.settings import settings
from src.dependencies import get_event_read_model
from src.events.read_models import EventReadModel

logger = logging.getLogger(__name__)

router = APIRouter()


def calendar_subscription_url(token: str, host: str | None = None) -> str:
    """webcal:// link calendar apps subscribe to."""
    return f"webcal://{host or settings.site_host}{CALENDAR_FEED_URL.format(token=token)}"


async def load_guest_occurrences(guest_id: str, events: EventReadModel) -> list[EventOccurrence]:
    """Events a guest is invited to, with their days resolved to dates."""
    scheduled = await events.with_dates(await events.get_guest_events(guest_id))
    return [
        EventOccurrence(
            id=item.event.id,
            name=item.event.name,
            wedding=item.event.wedding,
            date=item.date,
            time=item.event.time,
            location=item.event.location,
            description=item.event.description,
        )
        for item in scheduled
    ]


@router.get(CALENDAR_FEED_URL)
async def get_calendar_feed(
    token: str,
    codec: CalendarTokenCodec = Depends(get_token_codec),
    events: EventReadModel = Depends(get_event_read_model),
) -> Response:
    """
    Personal calendar feed polled by calendar apps.
    Bad tokens get the same 404 as unknown URLs.
    """
    guest_id = codec.verify(token)
    if not guest_id:
        raise HTTPException(status_code=404, detail="Not found")

    try:
        occurrences = await load_guest_occurrences(guest_id, events)
    except Exception as e:
        logger.error(f"Calendar: failed to fetch events for guest {guest_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    return Response(
        content=build_ics(occurrences),
        media_type="text/calendar; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{CALENDAR_FILENAME}"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )
