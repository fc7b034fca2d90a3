from dataclasses import dataclass, field
from enum import Enum

from src.events.dtos import Wedding


class RSVPStatus(str, Enum):
    ATTENDING = "Attending"
    DECLINED = "Declined"
    PARTIAL = "Partial"

    @classmethod
    def from_attendance(cls, attendance: list["GuestAttendanceDTO"]) -> "RSVPStatus":
        """Nobody attending is Declined, everybody is Attending, anything else Partial."""
        attending = sum(1 for guest in attendance if guest.attending)
        if attending == 0:
            return cls.DECLINED
        if attending == len(attendance):
            return cls.ATTENDING
        return cls.PARTIAL


@dataclass(frozen=True)
class GuestAttendanceDTO:
    name: str
    attending: bool


@dataclass(frozen=True)
class RSVPDetailsDTO:
    """Wedding-specific answers, stored as JSON on the RSVP page."""

    # NYC
    song_request: str | None = None
    # France
    accommodation: str | None = None
    allergens: str | None = None
    transport: str | None = None

    def is_empty(self) -> bool:
        return not any((self.song_request, self.accommodation, self.allergens, self.transport))


@dataclass(frozen=True)
class RSVPSubmissionDTO:
    event: Wedding
    guests_attending: list[GuestAttendanceDTO]
    events_attending: list[str] = field(default_factory=list)
    dietary: str | None = None
    message: str | None = None
    email: str | None = None
    details: RSVPDetailsDTO | None = None


@dataclass(frozen=True)
class RSVPRecordDTO:
    """An RSVP as read back from the RSVP Responses database."""

    id: str
    guest_id: str
    event: Wedding
    submitted_at: str
    status: RSVPStatus
    guests_attending: str
    dietary: str | None = None
    message: str | None = None
    details: RSVPDetailsDTO | None = None
    events_attending: list[str] | None = None
