"""Tests for the Blinko note service client."""

import json

import httpx
import pytest
import respx

from shared.clients.notes.blinko.NotesClientBlinko import NotesClientBlinko
from shared.clients.notes.models.Note import Flag, NoteType, NoteUpsert
from shared.errors import ProviderError
from shared.models.caller import CallerContext, CallerRole

BASE_URL = "http://blinko.local:1111"
CALLER = CallerContext(account_id="42", role=CallerRole.SUPERADMIN)


@pytest.fixture
async def client(helper_config, transport, monkeypatch):
    monkeypatch.setenv("NOTES_BASE_URL", BASE_URL)
    monkeypatch.setenv("NOTES_API_KEY", "blinko-token")
    notes_client = NotesClientBlinko(helper_config=helper_config, transport=transport)
    yield notes_client
    await transport.close()


def note_item(note_id: int, content: str = "note", **extra) -> dict:
    return {"id": note_id, "content": content, "type": 0, "isArchived": False, "isRecycle": False, **extra}


class TestConfiguration:
    def test_base_url_required(self, helper_config, transport, monkeypatch):
        monkeypatch.delenv("NOTES_BASE_URL", raising=False)
        with pytest.raises(ValueError, match="NOTES_BASE_URL"):
            NotesClientBlinko(helper_config=helper_config, transport=transport)


class TestListing:
    @pytest.mark.asyncio
    @respx.mock
    async def test_pages_until_short_page(self, client):
        pages = {1: [note_item(i) for i in range(100)], 2: [note_item(100 + i) for i in range(3)]}

        def respond(request):
            page = json.loads(request.content)["page"]
            return httpx.Response(200, json=pages.get(page, []))

        route = respx.post(f"{BASE_URL}/api/v1/note/list").mock(side_effect=respond)

        notes = await client.do_fetch_notes()

        assert len(notes) == 103
        assert route.call_count == 2
        first_body = json.loads(route.calls[0].request.content)
        assert first_body == {"page": 1, "size": 100, "type": -1, "isRecycle": False}
        assert route.calls[0].request.headers["Authorization"] == "Bearer blinko-token"

    @pytest.mark.asyncio
    @respx.mock
    async def test_documents_skip_recycled_and_empty_notes(self, client):
        respx.post(f"{BASE_URL}/api/v1/note/list").mock(return_value=httpx.Response(200, json={"items": [
            note_item(1, "keep me"),
            note_item(2, "in the bin", isRecycle=True),
            note_item(3, "   "),
            note_item(4, None),
            note_item(5, "todo item", type=2),
        ]}))

        documents = await client.do_fetch_documents()

        assert [(d.source_id, d.text) for d in documents] == [("1", "keep me"), ("5", "todo item")]

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_listing(self, client):
        respx.post(f"{BASE_URL}/api/v1/note/list").mock(return_value=httpx.Response(200, json={"unexpected": True}))
        with pytest.raises(ProviderError, match="Invalid note listing"):
            await client.do_fetch_notes()

    @pytest.mark.asyncio
    @respx.mock
    async def test_listing_error(self, client):
        respx.post(f"{BASE_URL}/api/v1/note/list").mock(return_value=httpx.Response(500, text="down"))
        with pytest.raises(ProviderError) as exc_info:
            await client.do_fetch_notes()
        assert exc_info.value.http_status == 500


class TestMutations:
    @pytest.mark.asyncio
    @respx.mock
    async def test_trash_many(self, client):
        route = respx.post(f"{BASE_URL}/api/v1/note/batch-trash").mock(return_value=httpx.Response(200, json={"ok": True}))

        await client.do_trash_many([1, 2], CALLER)

        request = route.calls.last.request
        assert json.loads(request.content) == {"ids": [1, 2]}
        assert request.headers["X-Impersonate-Account"] == "42"
        assert request.headers["X-Impersonate-Role"] == "superadmin"

    @pytest.mark.asyncio
    @respx.mock
    async def test_upsert_sends_only_set_flags(self, client):
        route = respx.post(f"{BASE_URL}/api/v1/note/upsert").mock(return_value=httpx.Response(200, json={"id": 7}))
        note = NoteUpsert(id=7, content="updated", type=NoteType.TODO, is_top=Flag.TRUE, is_archived=Flag.FALSE)

        assert await client.do_upsert(note, CALLER) == {"id": 7}

        body = json.loads(route.calls.last.request.content)
        assert body == {"id": 7, "content": "updated", "type": 2, "isArchived": False, "isTop": True}

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_response_body(self, client):
        respx.post(f"{BASE_URL}/api/v1/note/upsert").mock(return_value=httpx.Response(204))
        assert await client.do_upsert(NoteUpsert(id=1, content="x"), CALLER) is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_rejected_mutation(self, client):
        respx.post(f"{BASE_URL}/api/v1/note/batch-trash").mock(return_value=httpx.Response(403, text="Forbidden"))
        with pytest.raises(ProviderError) as exc_info:
            await client.do_trash_many([1], CALLER)
        assert exc_info.value.http_status == 403
