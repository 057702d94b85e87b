"""Tests for the HTTP surface, with the assistant context mocked out."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from server.api_server import app
from services.tools.models.ToolResult import NoteUpdateOutcome, ToolResult
from shared.errors import IndexNotReady, IngestError, InvalidCallerError, ProviderError
from shared.models.search import SearchResponse, SearchResultItem

HEADERS = {"X-API-Key": "test-key"}


@pytest.fixture
def context(helper_config, logger, monkeypatch):
    monkeypatch.setenv("APP_API_KEY", "test-key")
    context = MagicMock()
    app.state.helper_config = helper_config
    app.state.logging = logger
    app.state.context = context
    return context


@pytest.fixture
def client(context):
    return TestClient(app)


class TestAuth:
    def test_missing_key(self, client):
        assert client.post("/retrieve", json={"query": "milk"}).status_code == 401

    def test_wrong_key(self, client):
        assert client.get("/tools", headers={"X-API-Key": "nope"}).status_code == 401


class TestRetrieval:
    def test_retrieve(self, client, context):
        hit = SearchResultItem(source_id="12", sequence_index=0, score=0.93, chunk_text="buy milk", start_offset=0, end_offset=8)
        service = context.get_retrieval_service.return_value
        service.retrieve = AsyncMock(return_value=SearchResponse(query="milk", results=[hit], total=1))

        response = client.post("/retrieve", json={"query": "milk", "limit": 3}, headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["results"][0]["source_id"] == "12"
        service.retrieve.assert_awaited_once_with("milk", k=3)

    def test_index_not_ready(self, client, context):
        context.get_retrieval_service.return_value.retrieve = AsyncMock(side_effect=IndexNotReady("rebuilding"))

        response = client.post("/retrieve", json={"query": "milk"}, headers=HEADERS)

        assert response.status_code == 503
        assert response.json()["error"] == "IndexNotReady"

    def test_ingest(self, client, context):
        service = context.get_retrieval_service.return_value
        service.ingest = AsyncMock(return_value=4)

        response = client.post("/ingest", json={"source_id": "12", "text": "long note"}, headers=HEADERS)

        assert response.json() == {"source_id": "12", "chunks": 4}
        document = service.ingest.await_args.args[0]
        assert (document.source_id, document.text) == ("12", "long note")

    def test_ingest_failure(self, client, context):
        cause = ProviderError(provider="openai", http_status=500, message="down")
        context.get_retrieval_service.return_value.ingest = AsyncMock(side_effect=IngestError("12", 3, cause))

        response = client.post("/ingest", json={"source_id": "12", "text": "long note"}, headers=HEADERS)

        assert response.status_code == 502
        assert "chunk 3" in response.json()["detail"]


class TestIndex:
    def test_stats(self, client, context):
        context.get_index_manager.return_value.stats = AsyncMock(return_value={
            "location": "/data/vector.db", "engine": "sqlite", "state": "ready", "dimension": 768, "chunk_count": 120,
        })

        response = client.get("/index", headers=HEADERS)

        assert response.json()["chunk_count"] == 120

    def test_rebuild_runs_in_background(self, client, context):
        calls = []

        async def rebuild():
            calls.append("rebuild")

        context.get_index_manager.return_value.rebuild = rebuild

        response = client.post("/index/rebuild", headers=HEADERS)

        assert response.json() == {"status": "accepted"}
        assert calls == ["rebuild"]


class TestTools:
    def test_list(self, client, context):
        context.get_tool_executor.return_value.list_tools.return_value = [
            {"id": "delete-notes", "description": "Delete notes", "input_schema": {"type": "object"}},
        ]

        response = client.get("/tools", headers=HEADERS)

        assert response.json()[0]["id"] == "delete-notes"

    def test_invoke_passes_account_header(self, client, context):
        executor = context.get_tool_executor.return_value
        executor.invoke = AsyncMock(return_value=ToolResult.success(
            "batch-update-notes", [NoteUpdateOutcome(id=1, ok=True)],
        ))
        body = {"notes": [{"id": 1, "content": "x"}]}

        response = client.post("/tools/batch-update-notes", json=body, headers={**HEADERS, "X-Account-Id": "42"})

        assert response.status_code == 200
        assert response.json() == {"tool_id": "batch-update-notes", "ok": True, "result": [{"id": 1, "ok": True}], "error_type": None}
        executor.invoke.assert_awaited_once_with("batch-update-notes", body, {"accountId": "42"})

    def test_failures_are_reported_in_body(self, client, context):
        context.get_tool_executor.return_value.invoke = AsyncMock(
            return_value=ToolResult.failure("delete-notes", InvalidCallerError(None)),
        )

        response = client.post("/tools/delete-notes", json={"ids": [1]}, headers=HEADERS)

        assert response.status_code == 200
        payload = response.json()
        assert payload["ok"] is False
        assert payload["error_type"] == "InvalidCallerError"
        assert "Invalid account id" in payload["result"]


class TestWebhook:
    def test_changed_note_is_ingested(self, client, context):
        service = context.get_retrieval_service.return_value
        service.ingest = AsyncMock(return_value=2)

        response = client.post("/webhook/note", json={"note_id": 5, "content": "new text"}, headers=HEADERS)

        assert response.json() == {"status": "accepted", "note_id": 5}
        document = service.ingest.await_args.args[0]
        assert (document.source_id, document.text) == ("5", "new text")

    @pytest.mark.parametrize("body", [{"note_id": 5, "deleted": True}, {"note_id": 5, "content": "  "}])
    def test_deleted_or_empty_note_is_removed(self, client, context, body):
        service = context.get_retrieval_service.return_value
        service.remove = AsyncMock(return_value=True)
        service.ingest = AsyncMock()

        client.post("/webhook/note", json=body, headers=HEADERS)

        service.remove.assert_awaited_once_with("5")
        service.ingest.assert_not_awaited()

    def test_sync_failure_is_logged_not_raised(self, client, context):
        cause = ProviderError(provider="openai", message="down")
        context.get_retrieval_service.return_value.ingest = AsyncMock(side_effect=IngestError("5", 0, cause))

        response = client.post("/webhook/note", json={"note_id": 5, "content": "text"}, headers=HEADERS)

        assert response.status_code == 200
