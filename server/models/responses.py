from typing import Any

from pydantic import BaseModel


class IngestResponse(BaseModel):
    source_id: str
    chunks: int


class IndexStatsResponse(BaseModel):
    location: str
    engine: str
    state: str
    dimension: int | None
    chunk_count: int | None


class ToolDescription(BaseModel):
    id: str
    description: str
    input_schema: dict


class ToolInvocationResponse(BaseModel):
    tool_id: str
    ok: bool
    result: Any
    error_type: str | None = None
