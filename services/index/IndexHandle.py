from enum import Enum

from shared.clients.rag.RAGClientInterface import RAGClientInterface


class IndexState(str, Enum):
    UNINITIALIZED = "uninitialized"
    REBUILDING = "rebuilding"
    READY = "ready"


class IndexHandle:
    """
    The live vector index at one storage location.

    State only moves forward (uninitialized -> rebuilding -> ready); ready
    re-enters rebuilding only through an explicit rebuild. The dimension is
    fixed once known and never changes for the lifetime of the handle.
    """

    def __init__(self, store: RAGClientInterface, dimension: int | None = None):
        self.store = store
        self.state = IndexState.UNINITIALIZED
        self.dimension = dimension or None

    @property
    def location(self) -> str:
        return self.store.get_location()

    def is_ready(self) -> bool:
        return self.state is IndexState.READY
