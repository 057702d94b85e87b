from services.tools.ToolInterface import ToolInterface
from services.tools.models.ToolInputs import DeleteNotesInput
from services.tools.models.ToolResult import ToolResult
from shared.errors import ProviderError, ToolExecutionError
from shared.models.caller import CallerContext


class DeleteNotesTool(ToolInterface):
    """Moves notes to the recycle bin in one batch call."""

    def get_tool_id(self) -> str:
        return "delete-notes"

    def get_description(self) -> str:
        return "Delete notes by moving them to the recycle bin. Takes the ids of the notes to delete."

    def get_input_model(self) -> type[DeleteNotesInput]:
        return DeleteNotesInput

    async def execute(self, validated_input: DeleteNotesInput, caller: CallerContext) -> ToolResult:
        try:
            await self._notes_client.do_trash_many(validated_input.ids, caller)
        except Exception as e:
            message = e.message if isinstance(e, ProviderError) else str(e)
            self.logging.error("delete-notes failed for account %s: %s", caller.account_id, message)
            return ToolResult.failure(self.get_tool_id(), ToolExecutionError(self.get_tool_id(), message))
        await self._drop_from_index([str(note_id) for note_id in validated_input.ids])
        return ToolResult.success(self.get_tool_id(), True)
