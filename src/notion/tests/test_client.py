"""Unit tests for NotionClient, mocking the HTTP client."""

import pytest

from src.notion.client import PAGE_SIZE, NotionAPIError, NotionClient
from src.notion.tests.fake_client import TEST_NOTION_CONFIG

API_URL = TEST_NOTION_CONFIG.api_url

# =============================================================================
# Mock HTTP infrastructure
# =============================================================================


class MockResponse:
    def __init__(self, *, json_data=None, status_code=200):
        self._json_data = json_data
        self.status_code = status_code

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON body")
        return self._json_data


class MockHttpClient:
    """
    Replaces httpx.AsyncClient as the http_client_class.

    NotionClient calls self._http_client_class() and uses the result as an
    async context manager, so __call__ returns self. Responses are served
    in the order they were queued.
    """

    def __init__(self, *responses: MockResponse):
        self.calls: list[dict] = []
        self._responses = list(responses)

    async def request(self, method: str, url: str, **kwargs) -> MockResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._responses:
            raise AssertionError(f"No mock response queued for {method} {url}")
        return self._responses.pop(0)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass

    def __call__(self):
        return self


def _client(*responses: MockResponse) -> tuple[NotionClient, MockHttpClient]:
    http = MockHttpClient(*responses)
    return NotionClient(TEST_NOTION_CONFIG, http_client_class=http), http


# =============================================================================
# Tests
# =============================================================================


@pytest.mark.asyncio
async def test_requests_carry_auth_and_version_headers():
    client, http = _client(MockResponse(json_data={"object": "page", "id": "page-1"}))

    await client.retrieve_page("page-1")

    call = http.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == f"{API_URL}/pages/page-1"
    assert call["headers"]["Authorization"] == "Bearer secret_test"
    assert call["headers"]["Notion-Version"] == "2022-06-28"
    assert call["headers"]["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_query_all_follows_cursors():
    client, http = _client(
        MockResponse(json_data={"results": [{"id": "a"}, {"id": "b"}], "has_more": True, "next_cursor": "c1"}),
        MockResponse(json_data={"results": [{"id": "c"}], "has_more": False, "next_cursor": None}),
    )

    pages = await client.query_all("guest-db", {"filter": {"property": "x"}})

    assert [page["id"] for page in pages] == ["a", "b", "c"]
    assert [call["url"] for call in http.calls] == [f"{API_URL}/databases/guest-db/query"] * 2
    assert http.calls[0]["json"] == {"filter": {"property": "x"}, "page_size": PAGE_SIZE}
    assert http.calls[1]["json"]["start_cursor"] == "c1"


@pytest.mark.asyncio
async def test_query_all_stops_when_has_more_is_false():
    client, http = _client(
        MockResponse(json_data={"results": [{"id": "a"}], "has_more": False, "next_cursor": "ignored"})
    )

    pages = await client.query_all("guest-db")

    assert len(pages) == 1
    assert len(http.calls) == 1


@pytest.mark.asyncio
async def test_create_page_targets_the_database():
    client, http = _client(MockResponse(json_data={"object": "page", "id": "new-page"}))

    page = await client.create_page("rsvp-db", {"Status": {"select": {"name": "Attending"}}})

    assert page["id"] == "new-page"
    assert http.calls[0]["method"] == "POST"
    assert http.calls[0]["url"] == f"{API_URL}/pages"
    assert http.calls[0]["json"]["parent"] == {"type": "database_id", "database_id": "rsvp-db"}


@pytest.mark.asyncio
async def test_update_page_only_sends_given_fields():
    client, http = _client(MockResponse(json_data={"object": "page", "id": "page-1", "archived": True}))

    await client.update_page("page-1", archived=True)

    assert http.calls[0]["method"] == "PATCH"
    assert http.calls[0]["json"] == {"archived": True}


@pytest.mark.asyncio
async def test_error_status_raises_with_notion_message():
    client, _ = _client(
        MockResponse(json_data={"object": "error", "message": "Could not find page"}, status_code=404)
    )

    with pytest.raises(NotionAPIError) as exc_info:
        await client.retrieve_page("missing")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Could not find page"


@pytest.mark.asyncio
async def test_error_without_json_body_still_raises():
    client, _ = _client(MockResponse(status_code=502))

    with pytest.raises(NotionAPIError) as exc_info:
        await client.query_database("guest-db")

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "HTTP 502"
