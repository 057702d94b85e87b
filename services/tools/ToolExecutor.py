"""Tool executor.

Validates agent tool calls, builds the impersonated caller from the runtime
context and runs the tool. invoke() never raises: every outcome, including
bad input and unknown tools, comes back as a ToolResult.
"""

import re
from typing import Any

import pydantic

from services.tools.BatchUpdateNotesTool import BatchUpdateNotesTool
from services.tools.DeleteNotesTool import DeleteNotesTool
from services.tools.ToolInterface import ToolInterface
from services.tools.models.ToolResult import ToolResult
from shared.clients.notes.NotesClientInterface import NotesClientInterface
from shared.errors import InvalidCallerError, ToolExecutionError, ValidationError
from shared.helper.HelperConfig import HelperConfig
from shared.models.caller import CallerContext, CallerRole

ACCOUNT_ID_KEY = "accountId"
_NUMERIC = re.compile(r"^\d+$")


class ToolExecutor:
    def __init__(
        self,
        helper_config: HelperConfig,
        notes_client: NotesClientInterface,
        index_manager=None,
        tools: list[ToolInterface] | None = None,
    ):
        self.logging = helper_config.get_logger()
        # the agent runtime is trusted to bind the account id; the role is policy
        self.impersonation_role = CallerRole(
            helper_config.get_string_val("TOOLS_IMPERSONATION_ROLE", default=CallerRole.SUPERADMIN.value).lower()
        )
        if tools is None:
            tools = [
                DeleteNotesTool(helper_config=helper_config, notes_client=notes_client, index_manager=index_manager),
                BatchUpdateNotesTool(helper_config=helper_config, notes_client=notes_client, index_manager=index_manager),
            ]
        self._tools: dict[str, ToolInterface] = {tool.get_tool_id(): tool for tool in tools}

    def get_tool(self, tool_id: str) -> ToolInterface | None:
        return self._tools.get(tool_id)

    def list_tools(self) -> list[dict]:
        """
        Returns id, description and JSON input schema of every tool, for the agent planner.
        """
        return [
            {"id": tool.get_tool_id(), "description": tool.get_description(), "input_schema": tool.get_input_schema()}
            for tool in self._tools.values()
        ]

    def build_caller(self, runtime_context: dict | None) -> CallerContext:
        """
        Builds a fresh CallerContext from the account id in the runtime context.

        Raises:
            InvalidCallerError: If the account id is missing, empty or not numeric.
        """
        account_id = (runtime_context or {}).get(ACCOUNT_ID_KEY)
        if isinstance(account_id, bool) or account_id is None:
            raise InvalidCallerError(account_id)
        raw = str(account_id).strip()
        if not _NUMERIC.match(raw):
            raise InvalidCallerError(account_id)
        return CallerContext(account_id=str(int(raw)), role=self.impersonation_role)

    async def invoke(self, tool_id: str, raw_input: Any, runtime_context: dict | None) -> ToolResult:
        """
        Validates and runs a tool call.

        Input is validated before the caller is built, and both happen before
        any call to the note service.

        Args:
            tool_id (str): The tool to run.
            raw_input (Any): The arguments produced by the agent.
            runtime_context (dict | None): Trusted context carrying "accountId".

        Returns:
            ToolResult: Success value, or a ValidationError, InvalidCallerError or ToolExecutionError.
        """
        tool = self._tools.get(tool_id)
        if tool is None:
            return ToolResult.failure(tool_id, ValidationError(tool_id, [{"loc": ("tool_id",), "msg": f"Unknown tool '{tool_id}'"}]))

        try:
            validated = tool.get_input_model().model_validate(raw_input)
        except pydantic.ValidationError as e:
            error = ValidationError(tool_id, e.errors(include_url=False, include_context=False, include_input=False))
            self.logging.warning("%s", error)
            return ToolResult.failure(tool_id, error)

        try:
            caller = self.build_caller(runtime_context)
        except InvalidCallerError as e:
            self.logging.warning("Rejected %s call: %s", tool_id, e)
            return ToolResult.failure(tool_id, e)

        self.logging.info("Running tool %s as account %s (%s)", tool_id, caller.account_id, caller.role.value)
        try:
            return await tool.execute(validated, caller)
        except Exception as e:
            self.logging.exception("Tool %s crashed: %s", tool_id, e)
            return ToolResult.failure(tool_id, ToolExecutionError(tool_id, str(e)))
