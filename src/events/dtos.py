from dataclasses import dataclass
from enum import Enum


class Wedding(str, Enum):
    NYC = "nyc"
    FRANCE = "france"

    @property
    def timezone(self) -> str:
        return WEDDING_TIMEZONES[self]

    @property
    def catalog_label(self) -> str:
        """Option name of the Event Catalog ``Wedding`` select."""
        return "New York" if self == Wedding.NYC else "France"

    @property
    def rsvp_label(self) -> str:
        """Option name of the RSVP Responses ``Event`` select."""
        return "NYC" if self == Wedding.NYC else "France"

    @property
    def route(self) -> str:
        return f"/{self.value}"


WEDDING_TIMEZONES: dict[Wedding, str] = {
    Wedding.NYC: "America/New_York",
    Wedding.FRANCE: "Europe/Paris",
}


class EventType(str, Enum):
    CORE = "Core"
    OPTIONAL = "Optional"


@dataclass(frozen=True)
class EventRecord:
    """An entry of the Event Catalog."""

    id: str
    name: str
    wedding: Wedding
    type: EventType = EventType.CORE
    time: str | None = None
    location: str | None = None
    description: str | None = None
    # Wedding Timeline page holding the event's date
    day_id: str | None = None
    show_on_website: bool = False


@dataclass(frozen=True)
class ScheduledEventDTO:
    """An event with its day resolved to a date."""

    event: EventRecord
    date: str | None = None
