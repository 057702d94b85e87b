"""Tests for the tool executor and the note tools."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from services.tools.ToolExecutor import ToolExecutor
from services.tools.models.ToolResult import NoteUpdateOutcome, render_for_agent
from shared.clients.notes.models.Note import Flag, NoteType
from shared.errors import InvalidCallerError, ProviderError, ToolExecutionError, ValidationError
from shared.models.caller import CallerRole

CONTEXT = {"accountId": "42"}


@pytest.fixture
def notes_client():
    client = MagicMock()
    client.do_trash_many = AsyncMock(return_value=None)
    client.do_upsert = AsyncMock(return_value=None)
    return client


@pytest.fixture
def index_manager():
    manager = MagicMock()
    manager.remove = AsyncMock(return_value=True)
    return manager


@pytest.fixture
def executor(helper_config, notes_client, index_manager):
    return ToolExecutor(helper_config=helper_config, notes_client=notes_client, index_manager=index_manager)


class TestDeleteNotes:
    @pytest.mark.asyncio
    async def test_success(self, executor, notes_client, index_manager):
        result = await executor.invoke("delete-notes", {"ids": [1, 2, 3]}, CONTEXT)

        assert result.ok
        assert result.value is True
        assert render_for_agent(result) is True
        ids, caller = notes_client.do_trash_many.await_args.args
        assert ids == [1, 2, 3]
        assert caller.account_id == "42"
        assert caller.role is CallerRole.SUPERADMIN
        assert [call.args[0] for call in index_manager.remove.await_args_list] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_backend_failure_is_typed(self, executor, notes_client, index_manager):
        notes_client.do_trash_many.side_effect = ProviderError(provider="blinko", http_status=403, message="Forbidden")

        result = await executor.invoke("delete-notes", {"ids": [1]}, CONTEXT)

        assert not result.ok
        assert isinstance(result.error, ToolExecutionError)
        assert result.error_type == "ToolExecutionError"
        assert render_for_agent(result) == "Forbidden"
        index_manager.remove.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_input", [
        {"ids": []},
        {"ids": ["1"]},
        {"ids": [1.5]},
        {"ids": [True]},
        {},
        {"ids": [1], "force": True},
        None,
        [1, 2],
    ])
    async def test_invalid_input(self, executor, notes_client, raw_input):
        result = await executor.invoke("delete-notes", raw_input, CONTEXT)

        assert not result.ok
        assert isinstance(result.error, ValidationError)
        notes_client.do_trash_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_index_failure_does_not_fail_the_tool(self, executor, index_manager):
        index_manager.remove.side_effect = RuntimeError("index closed")
        result = await executor.invoke("delete-notes", {"ids": [5]}, CONTEXT)
        assert result.ok

    @pytest.mark.asyncio
    async def test_without_index(self, helper_config, notes_client):
        executor = ToolExecutor(helper_config=helper_config, notes_client=notes_client)
        assert (await executor.invoke("delete-notes", {"ids": [5]}, CONTEXT)).ok


class TestBatchUpdateNotes:
    @pytest.mark.asyncio
    async def test_all_items_succeed(self, executor, notes_client):
        raw = {"notes": [
            {"id": 1, "content": "first", "type": "todo", "isTop": True},
            {"id": 2, "content": "second"},
        ]}

        result = await executor.invoke("batch-update-notes", raw, CONTEXT)

        assert result.ok
        assert render_for_agent(result) == [{"id": 1, "ok": True}, {"id": 2, "ok": True}]
        upserts = {call.args[0].id: call.args[0] for call in notes_client.do_upsert.await_args_list}
        assert upserts[1].type is NoteType.TODO
        assert upserts[1].is_top is Flag.TRUE
        assert upserts[1].is_archived is Flag.UNSET
        assert upserts[2].type is NoteType.BLINKO

    @pytest.mark.asyncio
    async def test_items_fail_independently(self, executor, notes_client):
        async def upsert(note, caller):
            if note.id == 2:
                raise ProviderError(provider="blinko", http_status=404, message="Note not found")

        notes_client.do_upsert.side_effect = upsert
        raw = {"notes": [{"id": i, "content": f"note {i}"} for i in (1, 2, 3)]}

        result = await executor.invoke("batch-update-notes", raw, CONTEXT)

        assert result.ok
        assert [outcome.ok for outcome in result.value] == [True, False, True]
        assert isinstance(result.value[1], NoteUpdateOutcome)
        assert isinstance(result.value[1].error, ToolExecutionError)
        assert render_for_agent(result)[1] == {"id": 2, "ok": False, "error": "Note not found"}

    @pytest.mark.asyncio
    async def test_empty_batch(self, executor, notes_client):
        result = await executor.invoke("batch-update-notes", {"notes": []}, CONTEXT)
        assert result.ok
        assert result.value == []
        notes_client.do_upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_explicit_false_and_null_flags(self, executor, notes_client):
        raw = {"notes": [{"id": 1, "content": "x", "isArchived": False, "isShare": None}]}

        await executor.invoke("batch-update-notes", raw, CONTEXT)

        upsert = notes_client.do_upsert.await_args.args[0]
        assert upsert.is_archived is Flag.FALSE
        assert upsert.is_share is Flag.UNSET

    @pytest.mark.asyncio
    async def test_recycled_note_leaves_index(self, executor, index_manager):
        raw = {"notes": [{"id": 1, "content": "x", "isRecycle": True}, {"id": 2, "content": "y"}]}

        await executor.invoke("batch-update-notes", raw, CONTEXT)

        index_manager.remove.assert_awaited_once_with("1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("note", [
        {"id": "1", "content": "x"},
        {"id": 1},
        {"id": 1, "content": "x", "type": "memo"},
        {"id": 1, "content": "x", "type": True},
        {"id": 1, "content": "x", "isTop": "maybe"},
        {"id": 1, "content": "x", "pinned": True},
    ])
    async def test_invalid_items_reject_whole_batch(self, executor, notes_client, note):
        raw = {"notes": [{"id": 9, "content": "valid"}, note]}

        result = await executor.invoke("batch-update-notes", raw, CONTEXT)

        assert isinstance(result.error, ValidationError)
        notes_client.do_upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_numeric_type_code(self, executor, notes_client):
        await executor.invoke("batch-update-notes", {"notes": [{"id": 1, "content": "x", "type": 1}]}, CONTEXT)
        assert notes_client.do_upsert.await_args.args[0].type is NoteType.NOTE


class TestCaller:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("context", [
        None,
        {},
        {"accountId": None},
        {"accountId": ""},
        {"accountId": "   "},
        {"accountId": "abc"},
        {"accountId": "-1"},
        {"accountId": "4.2"},
        {"accountId": True},
    ])
    async def test_invalid_account(self, executor, notes_client, context):
        result = await executor.invoke("delete-notes", {"ids": [1]}, context)

        assert isinstance(result.error, InvalidCallerError)
        notes_client.do_trash_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_validation_runs_before_caller_check(self, executor):
        result = await executor.invoke("delete-notes", {"ids": []}, {})
        assert isinstance(result.error, ValidationError)

    @pytest.mark.parametrize("raw, expected", [("42", "42"), (" 7 ", "7"), (42, "42"), ("007", "7")])
    def test_account_id_normalized(self, executor, raw, expected):
        assert executor.build_caller({"accountId": raw}).account_id == expected

    def test_fresh_context_per_call(self, executor):
        first = executor.build_caller(CONTEXT)
        second = executor.build_caller(CONTEXT)
        assert first is not second

    @pytest.mark.asyncio
    async def test_configured_role(self, helper_config, notes_client, monkeypatch):
        monkeypatch.setenv("TOOLS_IMPERSONATION_ROLE", "User")
        executor = ToolExecutor(helper_config=helper_config, notes_client=notes_client)

        await executor.invoke("delete-notes", {"ids": [1]}, CONTEXT)

        assert notes_client.do_trash_many.await_args.args[1].role is CallerRole.USER

    def test_unknown_role_rejected(self, helper_config, notes_client, monkeypatch):
        monkeypatch.setenv("TOOLS_IMPERSONATION_ROLE", "root")
        with pytest.raises(ValueError):
            ToolExecutor(helper_config=helper_config, notes_client=notes_client)


class TestExecutor:
    @pytest.mark.asyncio
    async def test_unknown_tool(self, executor):
        result = await executor.invoke("rename-notes", {}, CONTEXT)
        assert isinstance(result.error, ValidationError)
        assert "rename-notes" in render_for_agent(result)

    @pytest.mark.asyncio
    async def test_crashing_tool_becomes_execution_error(self, executor, notes_client):
        notes_client.do_upsert.side_effect = None
        tool = executor.get_tool("delete-notes")
        tool.execute = AsyncMock(side_effect=KeyError("boom"))

        result = await executor.invoke("delete-notes", {"ids": [1]}, CONTEXT)

        assert isinstance(result.error, ToolExecutionError)

    def test_list_tools(self, executor):
        tools = {tool["id"]: tool for tool in executor.list_tools()}

        assert set(tools) == {"delete-notes", "batch-update-notes"}
        assert tools["delete-notes"]["input_schema"]["properties"]["ids"]["type"] == "array"
        note_schema = tools["batch-update-notes"]["input_schema"]["$defs"]["NoteUpdateInput"]
        assert "isArchived" in note_schema["properties"]
        assert note_schema["properties"]["isTop"]["type"] == ["boolean", "null"]
        assert set(note_schema["required"]) == {"id", "content"}
        assert all(tool["description"] for tool in tools.values())
