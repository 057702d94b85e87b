"""Pydantic models for documents, chunks and embeddings.

Hierarchy:
  Document         : a unit of corpus text (one note) entering the index.
  Chunk            : an ordered, overlapping slice of one document.
  ChunkRef         : (source_id, sequence_index) key of a chunk in the index.
  EmbeddingVector  : a vector returned by an embedding client.
"""

from pydantic import BaseModel, Field, computed_field


class Document(BaseModel):
    """Generic document representation, backend-independent.

    source_id identifies the document across re-ingests; re-ingesting the
    same source_id replaces its chunks.
    """

    source_id: str
    text: str
    title: str | None = None


class ChunkRef(BaseModel):
    """Index key of a chunk."""

    source_id: str
    sequence_index: int


class Chunk(BaseModel):
    """A bounded slice of a document's text.

    Offsets are character offsets into the document text; text == document.text[start_offset:end_offset].
    sequence_index is strictly increasing per source_id, starting at 0.
    """

    source_id: str
    sequence_index: int = Field(ge=0)
    text: str
    start_offset: int = Field(ge=0)
    end_offset: int = Field(ge=0)

    def ref(self) -> ChunkRef:
        return ChunkRef(source_id=self.source_id, sequence_index=self.sequence_index)


class EmbeddingVector(BaseModel):
    """A single embedding, optionally bound to the chunk it represents."""

    vector: list[float]
    chunk_ref: ChunkRef | None = None

    @computed_field
    @property
    def dimension(self) -> int:
        return len(self.vector)
