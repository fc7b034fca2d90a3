"""RFC 5545 calendar feed for a single guest."""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import NamedTuple

from src.events.dtos import Wedding

UID_DOMAIN = "sargaux.com"
PRODUCT_ID = "-//Sargaux Wedding//sargaux.com//EN"
CALENDAR_NAME = "Sargaux Wedding"
CALENDAR_DESCRIPTION = "Your personal schedule for Sam & Margaux's wedding"
# Upstream events never carry an end time
DEFAULT_DURATION = timedelta(hours=2)
CRLF = "\r\n"

_TIME_12H_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)$", re.IGNORECASE | re.ASCII)
_TIME_24H_RE = re.compile(r"^(\d{1,2}):(\d{2})$", re.ASCII)
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


class ClockTime(NamedTuple):
    hour: int
    minute: int


@dataclass(frozen=True)
class EventOccurrence:
    id: str
    name: str
    wedding: Wedding
    date: str | None = None  # YYYY-MM-DD
    time: str | None = None  # free text, e.g. "6:00 PM"
    location: str | None = None
    description: str | None = None


def parse_time(text: str) -> ClockTime | None:
    """
    Parse "6:00 PM" / "11:30 am" or "14:00" into wall-clock hour and minute.
    Returns None for anything else.
    """
    text = text.strip()

    if match := _TIME_12H_RE.match(text):
        hour, minute = int(match.group(1)), int(match.group(2))
        if not 1 <= hour <= 12 or minute > 59:
            return None
        period = match.group(3).upper()
        if period == "AM" and hour == 12:
            hour = 0
        elif period == "PM" and hour != 12:
            hour += 12
        return ClockTime(hour, minute)

    if match := _TIME_24H_RE.match(text):
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            return None
        return ClockTime(hour, minute)

    return None


def escape_text(text: str) -> str:
    """Escape a TEXT value (RFC 5545 section 3.3.11). Backslash goes first."""
    return (
        text.replace("\\", "\\\\")
        # Bare CR is not valid in TEXT, fold every line break into \n
        .replace("\r\n", "\n")
        .replace("\r", "\n")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def _parse_date(value: str | None) -> date | None:
    if not value or not _DATE_RE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _format_local(value: datetime) -> str:
    return value.strftime("%Y%m%dT%H%M%S")


def _format_stamp(value: datetime) -> str:
    return value.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")


def _event_lines(occurrence: EventOccurrence, day: date, stamp: str) -> list[str]:
    parsed = parse_time(occurrence.time) if occurrence.time else None

    if parsed:
        tzid = occurrence.wedding.timezone
        start = datetime(day.year, day.month, day.day, parsed.hour, parsed.minute)
        end = start + DEFAULT_DURATION
        dtstart = f"DTSTART;TZID={tzid}:{_format_local(start)}"
        dtend = f"DTEND;TZID={tzid}:{_format_local(end)}"
    else:
        all_day = day.strftime("%Y%m%d")
        dtstart = f"DTSTART;VALUE=DATE:{all_day}"
        dtend = f"DTEND;VALUE=DATE:{all_day}"

    lines = [
        "BEGIN:VEVENT",
        f"UID:{occurrence.id}@{UID_DOMAIN}",
        f"DTSTAMP:{stamp}",
        dtstart,
        dtend,
        f"SUMMARY:{escape_text(occurrence.name)}",
    ]
    if occurrence.description:
        lines.append(f"DESCRIPTION:{escape_text(occurrence.description)}")
    if occurrence.location:
        lines.append(f"LOCATION:{escape_text(occurrence.location)}")
    lines.append("END:VEVENT")
    return lines


def build_ics(occurrences: Iterable[EventOccurrence], now: datetime | None = None) -> str:
    """
    Render occurrences into one VCALENDAR document.

    Occurrences without a usable date are left out. Occurrences whose time
    cannot be parsed become all-day entries.
    """
    stamp = _format_stamp(now or datetime.now(UTC))

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODUCT_ID}",
        f"X-WR-CALNAME:{CALENDAR_NAME}",
        f"X-WR-CALDESC:{CALENDAR_DESCRIPTION}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]
    for occurrence in occurrences:
        day = _parse_date(occurrence.date)
        if day is None:
            continue
        lines.extend(_event_lines(occurrence, day, stamp))
    lines.append("END:VCALENDAR")

    return CRLF.join(lines)
