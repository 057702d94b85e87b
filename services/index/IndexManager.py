import asyncio
from typing import Protocol

from services.index.IndexHandle import IndexHandle, IndexState
from services.retrieval.DocumentIndexer import DocumentIndexer
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.clients.rag.models.VectorPoint import VectorPoint
from shared.errors import DimensionMismatchError, IndexNotReady
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import Document
from shared.models.search import SearchResultItem

DOC_CONCURRENCY = 5     # max parallel documents embedded during a rebuild


class CorpusSource(Protocol):
    async def do_fetch_documents(self) -> list[Document]: ...


class IndexManager:
    """
    Owns one IndexHandle and guarantees it is rebuilt from the corpus before first use.

    get_index() is single-flight: concurrent first callers share one rebuild
    and all observe its completion. Writers (rebuild, upsert, remove) are
    serialized by one lock; queries never take it and are refused unless the
    handle is ready.
    """

    def __init__(
        self,
        helper_config: HelperConfig,
        store: RAGClientInterface,
        corpus: CorpusSource,
        indexer: DocumentIndexer,
        dimension: int | None = None,
    ):
        self.logging = helper_config.get_logger()
        self._handle = IndexHandle(store=store, dimension=dimension)
        self._configured_dimension = dimension
        self._corpus = corpus
        self._indexer = indexer
        self._write_lock = asyncio.Lock()
        self._rebuild_task: asyncio.Task | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    @property
    def handle(self) -> IndexHandle:
        return self._handle

    @property
    def state(self) -> IndexState:
        return self._handle.state

    @property
    def indexer(self) -> DocumentIndexer:
        return self._indexer

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def _check_dimension(self, vectors: list[list[float]]) -> None:
        """Fix the handle dimension on the first vector seen and reject any other dimension."""
        for vector in vectors:
            if self._handle.dimension is None:
                self._handle.dimension = len(vector)
                self.logging.info("Index dimension fixed to %d", self._handle.dimension)
            elif len(vector) != self._handle.dimension:
                raise DimensionMismatchError(expected=self._handle.dimension, actual=len(vector))

    def _require_ready(self) -> None:
        if not self._handle.is_ready():
            raise IndexNotReady(state=self._handle.state.value)

    ##########################################
    ############### REBUILD ##################
    ##########################################

    async def get_index(self) -> IndexHandle:
        """
        Returns the ready handle, rebuilding it from the corpus on first use.

        Returns:
            IndexHandle: The handle, always in the ready state.

        Raises:
            Exception: Whatever made the rebuild fail (e.g. ProviderError); the next call retries.
        """
        if self._handle.is_ready():
            return self._handle
        # no await between the check and the assignment: one task per trigger
        if self._rebuild_task is None:
            self._rebuild_task = asyncio.ensure_future(self._run_rebuild(reset_dimension=False))
        await asyncio.shield(self._rebuild_task)
        return self._handle

    async def rebuild(self) -> IndexHandle:
        """
        Forces a fresh rebuild, even when the handle is ready.

        A rebuild already in flight is awaited first; this call then runs its own pass.
        Unlike the first-use build, it also replaces a stored dimension that conflicts
        with the configured one, so it is the way to move the index to a new embedding model.
        """
        pending = self._rebuild_task
        if pending is not None and not pending.done():
            await asyncio.wait({pending})
        task = asyncio.ensure_future(self._run_rebuild(reset_dimension=True))
        self._rebuild_task = task
        await asyncio.shield(task)
        return self._handle

    async def _prepare_store(self, reset_dimension: bool) -> None:
        """Open and empty the store, settling which dimension the new pass is checked against."""
        configured = self._configured_dimension
        stored_dimension = await self._handle.store.do_open(configured)
        conflict = stored_dimension is not None and configured is not None and stored_dimension != configured
        if conflict and not reset_dimension:
            raise DimensionMismatchError(expected=configured, actual=stored_dimension)
        # without a configured dimension the first vector of this pass fixes it again
        forget_stored = conflict or configured is None
        if forget_stored and stored_dimension is not None:
            self.logging.info("Dropping stored index dimension %d", stored_dimension)
        await self._handle.store.do_clear(reset_dimension=forget_stored)
        if conflict:
            await self._handle.store.do_open(configured)

    async def _index_documents(self, documents: list[Document]) -> int:
        """
        Embeds and stores every document, DOC_CONCURRENCY at a time.

        After the first failure, documents still in flight are dropped before their
        write, and the error is raised only once every document task has finished.
        """
        sem = asyncio.Semaphore(DOC_CONCURRENCY)
        failed = asyncio.Event()

        async def rebuild_document(document: Document) -> int:
            async with sem:
                if failed.is_set():
                    return 0
                try:
                    points, vectors = await self._indexer.do_prepare(document)
                    if failed.is_set():
                        return 0
                    self._check_dimension(vectors)
                    await self._handle.store.do_replace_source(document.source_id, points, vectors)
                except Exception:
                    failed.set()
                    raise
                return len(points)

        results = await asyncio.gather(*(rebuild_document(doc) for doc in documents), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return sum(results)

    async def _run_rebuild(self, reset_dimension: bool) -> None:
        async with self._write_lock:
            self._handle.state = IndexState.REBUILDING
            self._handle.dimension = self._configured_dimension
            self.logging.info("Rebuilding vector index at '%s'", self._handle.location, color="cyan")
            try:
                documents = await self._corpus.do_fetch_documents()
                await self._prepare_store(reset_dimension)
                chunk_count = await self._index_documents(documents)
            except Exception as e:
                self._handle.state = IndexState.UNINITIALIZED
                if self._rebuild_task is asyncio.current_task():
                    self._rebuild_task = None
                self.logging.error("Index rebuild failed: %s", e)
                raise
            self._handle.state = IndexState.READY
            self.logging.info(
                "Index ready: %d documents, %d chunks, dimension %s",
                len(documents), chunk_count, self._handle.dimension, color="green",
            )

    ##########################################
    ################ WRITES ##################
    ##########################################

    async def upsert(self, source_id: str, points: list[VectorPoint], vectors: list[list[float]]) -> None:
        """
        Replaces every chunk of a source with the given ones.

        Raises:
            IndexNotReady: If the handle has not been built yet.
            DimensionMismatchError: If a vector does not match the handle dimension.
        """
        async with self._write_lock:
            self._require_ready()
            self._check_dimension(vectors)
            await self._handle.store.do_replace_source(source_id, points, vectors)
        self.logging.debug("Upserted %d chunks for '%s'", len(points), source_id)

    async def remove(self, source_id: str) -> bool:
        """
        Drops every chunk of a source.

        Returns:
            bool: False if the index was never built (nothing to remove), True otherwise.
        """
        if self._handle.state is IndexState.UNINITIALIZED and self._rebuild_task is None:
            return False
        async with self._write_lock:
            if self._handle.state is IndexState.UNINITIALIZED:
                return False
            await self._handle.store.do_delete_source(source_id)
        self.logging.debug("Removed chunks of '%s' from the index", source_id)
        return True

    ##########################################
    ################ READS ###################
    ##########################################

    async def query(self, vector: list[float], k: int) -> list[SearchResultItem]:
        """
        Returns the k chunks most similar to a vector.

        Raises:
            IndexNotReady: If the handle is not ready, including before the first rebuild.
            DimensionMismatchError: If the vector does not match the handle dimension.
        """
        self._require_ready()
        if self._handle.dimension is None:
            return []
        if len(vector) != self._handle.dimension:
            raise DimensionMismatchError(expected=self._handle.dimension, actual=len(vector))
        return await self._handle.store.do_search(vector, k)

    async def stats(self) -> dict:
        return {
            "location": self._handle.location,
            "engine": self._handle.store.get_engine_name(),
            "state": self._handle.state.value,
            "dimension": self._handle.dimension,
            "chunk_count": await self._handle.store.do_count() if self._handle.is_ready() else None,
        }

    async def close(self) -> None:
        await self._handle.store.close()
