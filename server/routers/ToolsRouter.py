from typing import Any

from fastapi import APIRouter, Body, Depends, Header, Request

from server.dependencies.auth import verify_api_key
from server.models.responses import ToolDescription, ToolInvocationResponse
from services.tools.models.ToolResult import render_for_agent

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get("")
async def list_tools(
    request: Request,
    _: None = Depends(verify_api_key),
) -> list[ToolDescription]:
    """List the tools an agent may invoke, with their input schemas."""
    tool_executor = request.app.state.context.get_tool_executor()
    return [ToolDescription(**tool) for tool in tool_executor.list_tools()]


@router.post("/{tool_id}")
async def invoke_tool(
    request: Request,
    tool_id: str,
    body: Any = Body(default=None),
    x_account_id: str | None = Header(default=None),
    _: None = Depends(verify_api_key),
) -> ToolInvocationResponse:
    """Invoke a tool on behalf of an account.

    The X-Account-Id header is set by the agent runtime, which is responsible
    for binding it to the authenticated end user.

    Args:
        request (Request): FastAPI request (provides app.state.context).
        tool_id (str): The tool to run.
        body (Any): The tool input as produced by the agent.
        x_account_id (str | None): Account the tool acts for.
        _ (None): Auth dependency result (unused).

    Returns:
        ToolInvocationResponse: The rendered result; failures are reported in the body, not as HTTP errors.
    """
    tool_executor = request.app.state.context.get_tool_executor()
    result = await tool_executor.invoke(tool_id, body, {"accountId": x_account_id})
    return ToolInvocationResponse(
        tool_id=tool_id,
        ok=result.ok,
        result=render_for_agent(result),
        error_type=result.error_type,
    )
