from abc import ABC, abstractmethod

from shared.models.document import Chunk

CHUNK_SIZE = 2000
CHUNK_OVERLAP = 200


class ChunkerInterface(ABC):
    """
    Splits a document's text into ordered, overlapping chunks.

    Every chunk after the first repeats the trailing `chunk_overlap` units of
    its predecessor at its head, so removing that head from every chunk but
    the first and concatenating gives back the original text. Splitting is
    deterministic and an empty text yields no chunks.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE, chunk_overlap: int = CHUNK_OVERLAP):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}.")
        # the first body must be long enough to supply the second chunk's head
        if chunk_overlap < 0 or chunk_overlap * 2 > chunk_size:
            raise ValueError(
                f"chunk_overlap must be in [0, chunk_size / 2], got {chunk_overlap} for chunk_size {chunk_size}."
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    @abstractmethod
    def get_unit(self) -> str:
        """
        Returns the unit chunk_size and chunk_overlap are measured in. E.g. "characters"
        """
        pass

    @abstractmethod
    def split(self, text: str, source_id: str = "") -> list[Chunk]:
        """
        Splits a text into chunks.

        Args:
            text (str): The full document text.
            source_id (str): The document the chunks belong to.

        Returns:
            list[Chunk]: Chunks with sequence_index 0..n-1 and offsets into text.
        """
        pass
