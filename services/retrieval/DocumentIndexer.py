from services.chunking.ChunkerInterface import ChunkerInterface
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.rag.models.VectorPoint import VectorPoint
from shared.errors import IngestError
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import Document

EMBED_BATCH_SIZE = 64   # texts per embedding request


class DocumentIndexer:
    """
    Turns a document into index points: chunk it, then embed the chunks batch by batch.

    Batches run one after another so chunk order is preserved. Nothing is
    written here; a failed batch aborts the whole document.
    """

    def __init__(self, helper_config: HelperConfig, chunker: ChunkerInterface, embed_client: EmbedClientInterface):
        self.logging = helper_config.get_logger()
        self.chunker = chunker
        self.embed_client = embed_client
        self.batch_size = max(1, int(helper_config.get_number_val("EMBED_BATCH_SIZE", default=EMBED_BATCH_SIZE)))

    async def do_prepare(self, document: Document) -> tuple[list[VectorPoint], list[list[float]]]:
        """
        Chunks and embeds one document.

        Args:
            document (Document): The document to prepare.

        Returns:
            tuple[list[VectorPoint], list[list[float]]]: One payload and one vector per chunk, in chunk order.

        Raises:
            IngestError: If an embedding batch fails; names the first chunk index of that batch.
        """
        chunks = self.chunker.split(document.text, source_id=document.source_id)
        vectors: list[list[float]] = []
        for batch_start in range(0, len(chunks), self.batch_size):
            batch = chunks[batch_start:batch_start + self.batch_size]
            try:
                embeddings = await self.embed_client.do_embed([chunk.text for chunk in batch])
            except Exception as e:
                self.logging.error(
                    "Embedding chunks %d-%d of '%s' failed: %s",
                    batch[0].sequence_index, batch[-1].sequence_index, document.source_id, e,
                )
                raise IngestError(source_id=document.source_id, chunk_index=batch[0].sequence_index, cause=e) from e
            vectors.extend(embedding.vector for embedding in embeddings)
        self.logging.debug("Prepared %d chunks for '%s'", len(chunks), document.source_id)
        return [VectorPoint.from_chunk(chunk) for chunk in chunks], vectors
