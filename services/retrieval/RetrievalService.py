"""Retrieval pipeline.

Ingests documents into the vector index (chunk, embed, replace by source id)
and answers natural language queries with the most similar chunks, each
annotated with the note it came from.
"""

from services.index.IndexManager import IndexManager
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import Document
from shared.models.search import SearchResponse


class RetrievalService:
    def __init__(self, helper_config: HelperConfig, index_manager: IndexManager, embed_client: EmbedClientInterface):
        self.logging = helper_config.get_logger()
        self._index_manager = index_manager
        self._embed_client = embed_client

    async def ingest(self, document: Document) -> int:
        """
        Indexes a document, replacing any chunks previously stored for its source_id.

        The index is built first if it has never been. Embedding completes for
        every chunk before anything is written, so a failure leaves the
        previous chunks of the document untouched.

        Args:
            document (Document): The document to index.

        Returns:
            int: The number of chunks stored for the document.

        Raises:
            IngestError: If embedding failed; nothing was written.
            DimensionMismatchError: If the vectors do not match the index dimension.
        """
        await self._index_manager.get_index()
        points, vectors = await self._index_manager.indexer.do_prepare(document)
        await self._index_manager.upsert(document.source_id, points, vectors)
        self.logging.info("Ingested '%s' as %d chunks", document.source_id, len(points))
        return len(points)

    async def remove(self, source_id: str) -> bool:
        return await self._index_manager.remove(source_id)

    async def retrieve(self, query: str, k: int = 5) -> SearchResponse:
        """
        Returns the k chunks most similar to a query.

        Args:
            query (str): Natural language query.
            k (int): Maximum number of chunks.

        Returns:
            SearchResponse: Hits by descending score, each with its source_id and offsets.

        Raises:
            ProviderError: If embedding the query fails.
        """
        await self._index_manager.get_index()
        embedded = await self._embed_client.do_embed([query])
        results = await self._index_manager.query(embedded[0].vector, k)
        self.logging.debug("Retrieved %d chunks for query '%s'", len(results), query[:80])
        return SearchResponse(query=query, results=results, total=len(results))
