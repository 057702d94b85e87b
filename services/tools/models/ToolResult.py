"""Typed results of tool executions and their rendering for the agent."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from shared.errors import AssistantCoreError


class NoteUpdateOutcome(BaseModel):
    """Outcome of one item of a batch update."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: int
    ok: bool
    error: AssistantCoreError | None = Field(default=None, exclude=True)


class ToolResult(BaseModel):
    """
    Either a success value or a typed failure. Failures keep the original
    error object; only render_for_agent turns them into text.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tool_id: str
    ok: bool
    value: Any = None
    error: AssistantCoreError | None = Field(default=None, exclude=True)

    @classmethod
    def success(cls, tool_id: str, value: Any) -> "ToolResult":
        return cls(tool_id=tool_id, ok=True, value=value)

    @classmethod
    def failure(cls, tool_id: str, error: AssistantCoreError) -> "ToolResult":
        return cls(tool_id=tool_id, ok=False, error=error)

    @property
    def error_type(self) -> str | None:
        return type(self.error).__name__ if self.error is not None else None


def _render_error(error: AssistantCoreError | None) -> str:
    if error is None:
        return "Unknown error."
    return getattr(error, "message", None) or str(error)


def _render_value(value: Any) -> Any:
    if isinstance(value, list):
        return [_render_value(item) for item in value]
    if isinstance(value, NoteUpdateOutcome):
        rendered: dict = {"id": value.id, "ok": value.ok}
        if not value.ok:
            rendered["error"] = _render_error(value.error)
        return rendered
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def render_for_agent(result: ToolResult) -> Any:
    """
    Renders a tool result for the agent loop.

    Returns:
        Any: The JSON-compatible success value, or the failure message as a string.
    """
    if not result.ok:
        return _render_error(result.error)
    return _render_value(result.value)
