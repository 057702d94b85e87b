"""Metadata stored alongside each chunk vector in an index backend."""

from pydantic import BaseModel, Field

from shared.models.document import Chunk
from shared.models.search import SearchResultItem


class VectorPoint(BaseModel):
    """Payload stored alongside each vector chunk in an index backend.

    Every point carries enough provenance to map a search hit back to the
    exact span of its source note.

    Attributes:
        source_id:      Identifier of the source note.
        sequence_index: Zero-based position of this chunk within the note.
        chunk_text:     Raw text content of this chunk.
        start_offset:   Start offset of the chunk in the source text.
        end_offset:     End offset of the chunk in the source text.
    """

    source_id: str
    sequence_index: int = Field(ge=0)
    chunk_text: str
    start_offset: int = Field(ge=0)
    end_offset: int = Field(ge=0)

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> "VectorPoint":
        return cls(
            source_id=chunk.source_id,
            sequence_index=chunk.sequence_index,
            chunk_text=chunk.text,
            start_offset=chunk.start_offset,
            end_offset=chunk.end_offset,
        )

    def to_result(self, score: float) -> SearchResultItem:
        return SearchResultItem(
            source_id=self.source_id,
            sequence_index=self.sequence_index,
            score=score,
            chunk_text=self.chunk_text,
            start_offset=self.start_offset,
            end_offset=self.end_offset,
        )
