"""
Mapping between Notion page properties and our records.

Property names match the columns of the Guest List, Event Catalog,
Wedding Timeline and RSVP Responses databases.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any

from src.events.dtos import EventRecord, EventType, Wedding
from src.guests.dtos import GuestRecord
from src.guests.names import normalize_name
from src.rsvp.dtos import RSVPDetailsDTO, RSVPRecordDTO, RSVPStatus, RSVPSubmissionDTO

logger = logging.getLogger(__name__)

# Guest List country -> weddings, used until every guest has Event Invitations set
COUNTRY_INVITATIONS: dict[str, list[Wedding]] = {
    "USA": [Wedding.NYC],
    "CANADA": [Wedding.NYC],
    "FRANCE": [Wedding.FRANCE],
    "UNITED KINGDOM": [Wedding.FRANCE],
}

_DETAILS_KEYS = {
    "song_request": "songRequest",
    "accommodation": "accommodation",
    "allergens": "allergens",
    "transport": "transport",
}


# =============================================================================
# Property readers
# =============================================================================


def _plain_text(prop: dict | None, kind: str = "rich_text") -> str | None:
    if not prop or not isinstance(prop.get(kind), list) or not prop[kind]:
        return None
    return prop[kind][0].get("plain_text") or None


def _select_name(prop: dict | None) -> str | None:
    if not prop or not prop.get("select"):
        return None
    return prop["select"].get("name")


def _relation_ids(prop: dict | None) -> list[str]:
    if not prop:
        return []
    return [item["id"] for item in prop.get("relation") or []]


def _checkbox(prop: dict | None) -> bool:
    return bool(prop) and prop.get("checkbox") is True


def _is_page(page: dict | None) -> bool:
    return bool(page) and page.get("object") == "page"


# =============================================================================
# Guest List
# =============================================================================


def derive_event_invitations(country: str | None) -> list[Wedding]:
    return list(COUNTRY_INVITATIONS.get(country or "", [Wedding.NYC, Wedding.FRANCE]))


def parse_guest_page(page: dict) -> GuestRecord | None:
    if not _is_page(page):
        return None
    props = page.get("properties", {})

    formula = (props.get("Full Name") or {}).get("formula") or {}
    full_name = formula.get("string") or _plain_text(props.get("Name of Guest"), "title")
    if not full_name:
        return None

    invitations = [
        Wedding(option["name"].lower())
        for option in (props.get("Event Invitations") or {}).get("multi_select") or []
        if option.get("name", "").lower() in (Wedding.NYC.value, Wedding.FRANCE.value)
    ]
    if not invitations:
        invitations = derive_event_invitations(_select_name(props.get("Country")))

    return GuestRecord(
        id=page["id"],
        name=full_name,
        normalized_name=normalize_name(full_name),
        event_invitations=invitations,
        is_plus_one=_checkbox(props.get("+1")),
        related_guest_ids=_relation_ids(props.get("Related Guests")),
    )


def parse_invited_event_ids(page: dict) -> list[str]:
    return _relation_ids(page.get("properties", {}).get("Events Invited"))


# =============================================================================
# Event Catalog / Wedding Timeline
# =============================================================================


def parse_event_page(page: dict) -> EventRecord | None:
    if not _is_page(page):
        return None
    props = page.get("properties", {})

    name = _plain_text(props.get("Event Name"), "title")
    if not name:
        return None

    wedding_label = (_select_name(props.get("Wedding")) or "").lower()
    day_ids = _relation_ids(props.get("Day"))

    return EventRecord(
        id=page["id"],
        name=name,
        wedding=Wedding.FRANCE if wedding_label == "france" else Wedding.NYC,
        type=EventType.OPTIONAL if _select_name(props.get("Event Type")) == "Optional" else EventType.CORE,
        time=_plain_text(props.get("Time")),
        location=_plain_text(props.get("Location")),
        description=_plain_text(props.get("Description")),
        day_id=day_ids[0] if day_ids else None,
        show_on_website=_checkbox(props.get("Show on Website")),
    )


def parse_day_date(page: dict) -> str | None:
    """Date of a Wedding Timeline page as ``YYYY-MM-DD``."""
    date_prop = (page.get("properties", {}).get("Date") or {}).get("date") or {}
    start = date_prop.get("start")
    return start[:10] if start else None


# =============================================================================
# RSVP Responses
# =============================================================================


def _details_to_json(submission: RSVPSubmissionDTO) -> str:
    details: dict[str, Any] = {}
    if submission.details:
        for field_name, key in _DETAILS_KEYS.items():
            value = getattr(submission.details, field_name)
            if value is not None:
                details[key] = value
    details["eventsAttending"] = submission.events_attending
    return json.dumps(details)


def _details_from_json(text: str | None) -> tuple[RSVPDetailsDTO | None, list[str] | None]:
    if not text or not text.strip():
        return None, None
    try:
        parsed = json.loads(text)
    except ValueError:
        logger.warning("Ignoring RSVP Details that are not valid JSON")
        return None, None
    if not isinstance(parsed, dict):
        return None, None

    events_attending = None
    if isinstance(parsed.get("eventsAttending"), list):
        events_attending = [item for item in parsed["eventsAttending"] if isinstance(item, str)]

    details = RSVPDetailsDTO(
        **{field_name: parsed.get(key) for field_name, key in _DETAILS_KEYS.items()}
    )
    return (None if details.is_empty() else details), events_attending


def _rich_text(content: str | None) -> dict:
    return {"rich_text": [{"text": {"content": content}}] if content else []}


def build_rsvp_properties(
    guest_id: str,
    guest_name: str,
    submission: RSVPSubmissionDTO,
    submitted_at: datetime | None = None,
) -> dict[str, Any]:
    label = submission.event.rsvp_label
    attending_names = ", ".join(g.name for g in submission.guests_attending if g.attending)
    status = RSVPStatus.from_attendance(submission.guests_attending)

    return {
        "Response": {"title": [{"text": {"content": f"{guest_name} — {label}"}}]},
        "Guest": {"relation": [{"id": guest_id}]},
        "Event": {"select": {"name": label}},
        "Submitted At": {"date": {"start": (submitted_at or datetime.now(UTC)).isoformat()}},
        "Status": {"select": {"name": status.value}},
        "Guests Attending": {"rich_text": [{"text": {"content": attending_names}}]},
        "Dietary Needs": _rich_text(submission.dietary),
        "Message": _rich_text(submission.message),
        "Details": {"rich_text": [{"text": {"content": _details_to_json(submission)}}]},
    }


def parse_rsvp_page(page: dict | None, guest_id: str, event: Wedding) -> RSVPRecordDTO | None:
    if not page or not _is_page(page):
        return None
    props = page.get("properties") or {}

    submitted_at = ((props.get("Submitted At") or {}).get("date") or {}).get("start")
    status_name = _select_name(props.get("Status"))
    try:
        status = RSVPStatus(status_name) if status_name else RSVPStatus.ATTENDING
    except ValueError:
        logger.warning(f"Unknown RSVP status {status_name!r} on page {page.get('id')}")
        status = RSVPStatus.ATTENDING

    details, events_attending = _details_from_json(_plain_text(props.get("Details")))

    return RSVPRecordDTO(
        id=page["id"],
        guest_id=guest_id,
        event=event,
        submitted_at=submitted_at or datetime.now(UTC).isoformat(),
        status=status,
        guests_attending=_plain_text(props.get("Guests Attending")) or "",
        dietary=_plain_text(props.get("Dietary Needs")),
        message=_plain_text(props.get("Message")),
        details=details,
        events_attending=events_attending,
    )
