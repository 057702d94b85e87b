import asyncio

from services.tools.ToolInterface import ToolInterface
from services.tools.models.ToolInputs import BatchUpdateNotesInput, NoteUpdateInput
from services.tools.models.ToolResult import NoteUpdateOutcome, ToolResult
from shared.clients.notes.models.Note import Flag, NoteUpsert
from shared.errors import ProviderError, ToolExecutionError
from shared.models.caller import CallerContext


class BatchUpdateNotesTool(ToolInterface):
    """Applies note updates concurrently; every item succeeds or fails on its own."""

    def get_tool_id(self) -> str:
        return "batch-update-notes"

    def get_description(self) -> str:
        return (
            "Update several notes at once. Each note takes its id, the new content, an optional type "
            "(blinko, note or todo) and optional isArchived, isTop, isShare and isRecycle flags; "
            "flags left out are not changed."
        )

    def get_input_model(self) -> type[BatchUpdateNotesInput]:
        return BatchUpdateNotesInput

    async def _update_one(self, note: NoteUpdateInput, caller: CallerContext) -> NoteUpdateOutcome:
        upsert = NoteUpsert(
            id=note.id,
            content=note.content,
            type=note.type,
            is_archived=note.is_archived,
            is_top=note.is_top,
            is_share=note.is_share,
            is_recycle=note.is_recycle,
        )
        try:
            await self._notes_client.do_upsert(upsert, caller)
        except Exception as e:
            message = e.message if isinstance(e, ProviderError) else str(e)
            self.logging.warning("Updating note %d failed: %s", note.id, message)
            return NoteUpdateOutcome(id=note.id, ok=False, error=ToolExecutionError(self.get_tool_id(), message))
        if note.is_recycle is Flag.TRUE:
            await self._drop_from_index([str(note.id)])
        return NoteUpdateOutcome(id=note.id, ok=True)

    async def execute(self, validated_input: BatchUpdateNotesInput, caller: CallerContext) -> ToolResult:
        outcomes = await asyncio.gather(*(self._update_one(note, caller) for note in validated_input.notes))
        failed = sum(1 for outcome in outcomes if not outcome.ok)
        self.logging.info(
            "batch-update-notes for account %s: %d updated, %d failed",
            caller.account_id, len(outcomes) - failed, failed,
        )
        return ToolResult.success(self.get_tool_id(), list(outcomes))
