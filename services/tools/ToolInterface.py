from abc import ABC, abstractmethod

from pydantic import BaseModel

from services.tools.models.ToolResult import ToolResult
from shared.clients.notes.NotesClientInterface import NotesClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.caller import CallerContext


class ToolInterface(ABC):
    """
    An agent-invocable note mutation.

    execute() only ever receives validated input and a freshly built caller;
    it reports downstream failures in its ToolResult instead of raising.
    """

    def __init__(self, helper_config: HelperConfig, notes_client: NotesClientInterface, index_manager=None):
        self.logging = helper_config.get_logger()
        self._notes_client = notes_client
        self._index_manager = index_manager

    ##########################################
    ################ GETTER ##################
    ##########################################

    @abstractmethod
    def get_tool_id(self) -> str:
        """
        Returns the id the agent invokes the tool by. E.g. "delete-notes"
        """
        pass

    @abstractmethod
    def get_description(self) -> str:
        """
        Returns the natural-language description shown to the agent's planner.
        """
        pass

    @abstractmethod
    def get_input_model(self) -> type[BaseModel]:
        """
        Returns the pydantic model the raw input is validated against.
        """
        pass

    def get_input_schema(self) -> dict:
        return self.get_input_model().model_json_schema(by_alias=True)

    ##########################################
    ############### EXECUTION ################
    ##########################################

    @abstractmethod
    async def execute(self, validated_input: BaseModel, caller: CallerContext) -> ToolResult:
        """
        Runs the tool.

        Args:
            validated_input (BaseModel): An instance of get_input_model().
            caller (CallerContext): The identity the note service acts as.

        Returns:
            ToolResult: The success value or a ToolExecutionError.
        """
        pass

    async def _drop_from_index(self, source_ids: list[str]) -> None:
        """Removes chunks of notes that left the corpus. The mutation already succeeded, so failures are only logged."""
        if self._index_manager is None:
            return
        for source_id in source_ids:
            try:
                await self._index_manager.remove(source_id)
            except Exception as e:
                self.logging.warning("Could not remove '%s' from the index: %s", source_id, e)
