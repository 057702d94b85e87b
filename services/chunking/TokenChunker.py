"""Sliding-window chunking over a tokenization of the text. Sizes are measured in tokens."""

from typing import Protocol

import tiktoken

from services.chunking.ChunkerInterface import CHUNK_OVERLAP, CHUNK_SIZE, ChunkerInterface
from shared.models.document import Chunk

DEFAULT_ENCODING = "cl100k_base"


class Encoding(Protocol):
    def encode(self, text: str) -> list[int]: ...

    def decode_with_offsets(self, tokens: list[int]) -> tuple[str, list[int]]: ...


class TokenChunker(ChunkerInterface):
    """
    Fixed-size window of chunk_size tokens moved by chunk_size - chunk_overlap
    tokens, so consecutive chunks share chunk_overlap tokens. Chunk offsets are
    character offsets of the first token of the window.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE, chunk_overlap: int = CHUNK_OVERLAP, encoding: Encoding | None = None):
        super().__init__(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
        self._encoding = encoding

    def get_unit(self) -> str:
        return "tokens"

    def get_encoding(self) -> Encoding:
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(DEFAULT_ENCODING)
        return self._encoding

    def split(self, text: str, source_id: str = "") -> list[Chunk]:
        if not text:
            return []
        encoding = self.get_encoding()
        tokens = encoding.encode(text)
        if not tokens:
            return []
        _, token_offsets = encoding.decode_with_offsets(tokens)

        def char_offset(token_index: int) -> int:
            return token_offsets[token_index] if token_index < len(tokens) else len(text)

        stride = self.chunk_size - self.chunk_overlap
        chunks = []
        window_start = 0
        while True:
            window_end = min(window_start + self.chunk_size, len(tokens))
            start, end = char_offset(window_start), char_offset(window_end)
            chunks.append(Chunk(
                source_id=source_id,
                sequence_index=len(chunks),
                text=text[start:end],
                start_offset=start,
                end_offset=end,
            ))
            if window_end >= len(tokens):
                break
            window_start += stride
        return chunks
