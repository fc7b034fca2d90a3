import pytest

from src.events.dtos import Wedding
from src.guests.dtos import GuestNotFoundError
from src.guests.repository.read_models import (
    AUTHORIZED_GUESTS,
    HardcodedGuestDirectory,
    NotionGuestDirectory,
)
from src.notion.cache import SingleFlightCache
from src.notion.client import NotionAPIError
from src.notion.tests.fake_client import FakeNotionClient, guest_page


@pytest.fixture
def notion() -> FakeNotionClient:
    client = FakeNotionClient()
    client.add(
        "guest-db",
        guest_page("g-sam", "Sam Gross", invitations=["NYC"], related=("g-plus", "g-margaux")),
        guest_page("g-margaux", "Margaux Ancel", invitations=["NYC", "France"], related=("g-sam",)),
        guest_page("g-plus", "Guest of Sam", country="USA", plus_one=True),
        guest_page("g-dorothee", "Dorothée Ancel", country="FRANCE"),
    )
    return client


@pytest.fixture
def directory(notion) -> NotionGuestDirectory:
    return NotionGuestDirectory(notion, SingleFlightCache())


# =============================================================================
# Hardcoded guest list
# =============================================================================


@pytest.mark.asyncio
async def test_hardcoded_directory_matches_loosely():
    directory = HardcodedGuestDirectory()

    guest = await directory.find_by_name("  sam   GROSS ")

    assert guest.name == "Sam Gross"
    assert guest.id is None
    assert guest.event_invitations == [Wedding.NYC, Wedding.FRANCE]


@pytest.mark.asyncio
async def test_hardcoded_directory_lists_authorized_guests():
    guests = await HardcodedGuestDirectory().list_guests()
    assert [guest.name for guest in guests] == AUTHORIZED_GUESTS


@pytest.mark.asyncio
@pytest.mark.parametrize("typed", ["", "   ", "Sam", "Sam Grosss", "Gross Sam"])
async def test_hardcoded_directory_rejects_non_matches(typed):
    assert await HardcodedGuestDirectory().find_by_name(typed) is None


# =============================================================================
# Notion guest list
# =============================================================================


@pytest.mark.asyncio
async def test_accents_do_not_matter(directory):
    guest = await directory.find_by_name("dorothee ancel")

    assert guest.id == "g-dorothee"
    assert guest.name == "Dorothée Ancel"
    assert guest.event_invitations == [Wedding.FRANCE]


@pytest.mark.asyncio
async def test_guest_list_is_fetched_once(directory, notion):
    await directory.find_by_name("Sam Gross")
    await directory.find_by_name("Margaux Ancel")

    assert [call for call in notion.calls if call[0] == "query_all"] == [("query_all", "guest-db")]


@pytest.mark.asyncio
async def test_clear_cache_refetches(directory, notion):
    await directory.list_guests()
    notion.add("guest-db", guest_page("g-toni", "Toni Waldman"))
    directory.clear_cache()

    assert (await directory.find_by_name("Toni Waldman")).id == "g-toni"


@pytest.mark.asyncio
async def test_failed_fetch_is_retried():
    notion = FakeNotionClient(fail_with=NotionAPIError(503, "Service unavailable"))
    notion.add("guest-db", guest_page("g-sam", "Sam Gross"))
    directory = NotionGuestDirectory(notion, SingleFlightCache())

    with pytest.raises(NotionAPIError):
        await directory.find_by_name("Sam Gross")

    notion.fail_with = None
    assert (await directory.find_by_name("Sam Gross")).id == "g-sam"


@pytest.mark.asyncio
async def test_party_lists_primary_then_party_then_plus_ones(directory):
    party = await directory.get_party("g-sam")

    assert [guest.id for guest in party] == ["g-sam", "g-margaux", "g-plus"]


@pytest.mark.asyncio
async def test_party_of_a_single_guest(directory):
    assert [guest.id for guest in await directory.get_party("g-dorothee")] == ["g-dorothee"]


@pytest.mark.asyncio
async def test_party_of_unknown_guest_raises(directory):
    with pytest.raises(GuestNotFoundError):
        await directory.get_party("g-nobody")
