"""Structure-aware chunking for markdown notes. Sizes are measured in characters."""

import re
from collections import deque

from services.chunking.ChunkerInterface import ChunkerInterface
from shared.models.document import Chunk

# Boundaries tried in order, coarsest first. A split happens at the end of each
# match, so separators stay with the preceding piece and no text is dropped.
SEPARATORS: list[re.Pattern] = [
    re.compile(r"\n(?=#{1,6} )"),   # before a heading
    re.compile(r"\n(?=```)"),        # before a code fence
    re.compile(r"\n\s*\n"),          # paragraph break
    re.compile(r"\n"),               # line break
    re.compile(r" +"),               # word break
]


class MarkdownChunker(ChunkerInterface):
    """
    Splits on headings, then code fences, paragraphs, lines and words, and
    hard-splits whatever is still too long. Pieces are packed greedily into
    bodies of at most chunk_size - chunk_overlap characters; each chunk is its
    body preceded by the last chunk_overlap characters of the text before it.
    """

    def get_unit(self) -> str:
        return "characters"

    def _body_size(self) -> int:
        return self.chunk_size - self.chunk_overlap

    def _split_span(self, text: str, start: int, end: int, level: int = 0) -> list[tuple[int, int]]:
        body_size = self._body_size()
        if end - start <= body_size:
            return [(start, end)]
        if level >= len(SEPARATORS):
            return [(pos, min(pos + body_size, end)) for pos in range(start, end, body_size)]

        cuts = [m.end() for m in SEPARATORS[level].finditer(text, start, end) if start < m.end() < end]
        if not cuts:
            return self._split_span(text, start, end, level + 1)

        spans: list[tuple[int, int]] = []
        previous = start
        for cut in cuts + [end]:
            spans.extend(self._split_span(text, previous, cut, level + 1))
            previous = cut
        return spans

    def _merge_spans(self, spans: list[tuple[int, int]]) -> list[tuple[int, int]]:
        body_size = self._body_size()
        # a body shorter than the overlap could not supply the next chunk's head
        min_body = min(self.chunk_overlap, body_size)
        bodies: list[tuple[int, int]] = []
        queue = deque(spans)
        current: tuple[int, int] | None = None
        while queue:
            start, end = queue.popleft()
            if current is None:
                current = (start, end)
                continue
            if end - current[0] <= body_size:
                current = (current[0], end)
                continue
            if current[1] - current[0] < min_body:
                cut = current[0] + body_size
                bodies.append((current[0], cut))
                queue.appendleft((cut, end))
                current = None
                continue
            bodies.append(current)
            current = (start, end)
        if current is not None:
            bodies.append(current)
        return bodies

    def split(self, text: str, source_id: str = "") -> list[Chunk]:
        if not text:
            return []
        bodies = self._merge_spans(self._split_span(text, 0, len(text)))
        chunks = []
        for index, (body_start, body_end) in enumerate(bodies):
            start = body_start if index == 0 else max(0, body_start - self.chunk_overlap)
            chunks.append(Chunk(
                source_id=source_id,
                sequence_index=index,
                text=text[start:body_end],
                start_offset=start,
                end_offset=body_end,
            ))
        return chunks
