"""Pydantic models for retrieval requests and responses."""

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    """Incoming natural language retrieval query."""

    query: str
    limit: int = Field(default=5, ge=1, le=100)


class SearchResultItem(BaseModel):
    """A single chunk returned from the vector index, with its provenance."""

    source_id: str
    sequence_index: int
    score: float
    chunk_text: str
    start_offset: int
    end_offset: int


class SearchResponse(BaseModel):
    """Response payload returned to the agent runtime after a retrieval."""

    query: str
    results: list[SearchResultItem]
    total: int
