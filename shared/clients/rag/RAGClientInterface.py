from abc import ABC, abstractmethod
import math

from shared.clients.rag.models.VectorPoint import VectorPoint
from shared.helper.HelperConfig import HelperConfig
from shared.models.search import SearchResultItem


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of two equally sized vectors, 0.0 if either has zero length."""
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class RAGClientInterface(ABC):
    """
    Storage contract of a vector index backend.

    A client is bound to one location (a file path or a collection name). It
    stores one vector plus a VectorPoint payload per (source_id, sequence_index)
    and answers cosine-similarity searches. Dimension checks are the caller's
    job; the client only persists whatever dimension it was opened with.
    """

    def __init__(self, helper_config: HelperConfig, location: str):
        self.logging = helper_config.get_logger()
        self._location = location

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "index"
        """
        return "index"

    def get_engine_name(self) -> str:
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        """
        Returns the name of the engine used by the client. E.g. "sqlite"
        """
        pass

    def get_location(self) -> str:
        """
        Returns the storage location the client is bound to.
        """
        return self._location

    ##########################################
    ############### REQUESTS #################
    ##########################################

    @abstractmethod
    async def do_open(self, dimension: int | None = None) -> int | None:
        """Prepare the storage location for use. Idempotent.

        Args:
            dimension (int | None): The vector dimension to create the storage with, if known.

        Returns:
            int | None: The dimension already persisted at the location, or None if nothing is stored yet.
        """
        pass

    @abstractmethod
    async def do_replace_source(self, source_id: str, points: list[VectorPoint], vectors: list[list[float]]) -> None:
        """Atomically replace every stored chunk of a source with the given ones.

        Args:
            source_id (str): The source whose previous chunks are dropped.
            points (list[VectorPoint]): Payloads of the new chunks.
            vectors (list[list[float]]): One vector per point, same order.
        """
        pass

    @abstractmethod
    async def do_delete_source(self, source_id: str) -> None:
        """Remove every stored chunk of a source. A no-op for unknown sources."""
        pass

    @abstractmethod
    async def do_clear(self, reset_dimension: bool = False) -> None:
        """Remove every stored chunk, keeping the location usable.

        Args:
            reset_dimension (bool): Also forget the stored dimension, so the next write fixes a new one.
        """
        pass

    @abstractmethod
    async def do_search(self, vector: list[float], limit: int) -> list[SearchResultItem]:
        """Return the nearest chunks by cosine similarity.

        Args:
            vector (list[float]): The query vector.
            limit (int): Maximum number of results.

        Returns:
            list[SearchResultItem]: Hits sorted by descending score.
        """
        pass

    @abstractmethod
    async def do_count(self) -> int:
        """Return the number of stored chunks."""
        pass

    async def close(self) -> None:
        return None
