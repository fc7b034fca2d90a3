from dataclasses import dataclass, field

from src.events.dtos import Wedding


class GuestNotFoundError(Exception):
    """Raised when a guest id is not in the guest list."""

    def __init__(self, guest_id: str) -> None:
        self.guest_id = guest_id
        super().__init__(f"Guest not found: {guest_id}")


@dataclass(frozen=True)
class GuestRecord:
    """A guest list entry."""

    name: str
    normalized_name: str
    event_invitations: list[Wedding] = field(default_factory=list)
    # Notion page id, None for the hardcoded guest list
    id: str | None = None
    is_plus_one: bool = False
    related_guest_ids: list[str] = field(default_factory=list)

    @property
    def primary_wedding(self) -> Wedding:
        if Wedding.NYC in self.event_invitations or not self.event_invitations:
            return Wedding.NYC
        return Wedding.FRANCE


@dataclass(frozen=True)
class SessionGuestDTO:
    """Who is logged in, as carried by the session cookie."""

    guest: str
    event_invitations: list[Wedding] = field(default_factory=lambda: list(Wedding))
    notion_id: str | None = None

    def is_invited_to(self, wedding: Wedding) -> bool:
        return wedding in self.event_invitations

    @property
    def primary_wedding(self) -> Wedding:
        return Wedding.NYC if self.is_invited_to(Wedding.NYC) else Wedding.FRANCE

    @classmethod
    def from_guest(cls, guest: GuestRecord) -> "SessionGuestDTO":
        return cls(
            guest=guest.name,
            event_invitations=list(guest.event_invitations),
            notion_id=guest.id,
        )
