import os

from services.chunking.chunker_factory import create_chunker
from services.index.IndexManager import IndexManager
from services.retrieval.DocumentIndexer import DocumentIndexer
from services.retrieval.RetrievalService import RetrievalService
from services.tools.ToolExecutor import ToolExecutor
from shared.clients.HttpTransport import HttpTransport
from shared.clients.ProviderResolver import ProviderResolver
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.notes.NotesClientInterface import NotesClientInterface
from shared.clients.notes.blinko.NotesClientBlinko import NotesClientBlinko
from shared.clients.rag.RAGClientManager import RAGClientManager
from shared.helper.HelperConfig import HelperConfig


class AssistantContext:
    """
    Process-scoped owner of everything shared: the HTTP transport, the
    provider resolver and the index managers.

    Components receive what they need from here at construction time.
    Opening the same index location twice returns the same IndexManager.
    """

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.transport = HttpTransport(helper_config=helper_config)
        self.resolver = ProviderResolver(helper_config=helper_config, transport=self.transport)
        self.rag_client_manager = RAGClientManager(helper_config=helper_config, transport=self.transport)
        self._embed_client: EmbedClientInterface | None = None
        self._notes_client: NotesClientInterface | None = None
        self._index_managers: dict[str, IndexManager] = {}
        self._retrieval_services: dict[str, RetrievalService] = {}
        self._tool_executor: ToolExecutor | None = None

    ##########################################
    ################ CLIENTS #################
    ##########################################

    def get_embed_client(self) -> EmbedClientInterface:
        """Returns the embedding client configured by EMBED_PROVIDER and EMBED_MODEL."""
        if self._embed_client is None:
            self._embed_client = self.resolver.resolve_embedding(
                self.helper_config.get_provider_config("EMBED"),
                self.helper_config.get_model_descriptor("EMBED"),
            )
        return self._embed_client

    def get_notes_client(self) -> NotesClientInterface:
        if self._notes_client is None:
            self._notes_client = NotesClientBlinko(helper_config=self.helper_config, transport=self.transport)
        return self._notes_client

    ##########################################
    ################ INDEX ###################
    ##########################################

    def _get_location_key(self, location: str) -> str:
        if self.rag_client_manager.engine == "Sqlite" and location != ":memory:":
            return os.path.abspath(location)
        return location

    def get_index_manager(self, location: str | None = None) -> IndexManager:
        """
        Returns the IndexManager of a storage location, creating it on first request.

        Args:
            location (str | None): File path or collection name. Defaults to the configured one.
        """
        if location is None:
            location = self.rag_client_manager.get_default_location()
        key = self._get_location_key(location)
        manager = self._index_managers.get(key)
        if manager is None:
            embed_client = self.get_embed_client()
            manager = IndexManager(
                helper_config=self.helper_config,
                store=self.rag_client_manager.get_client(location),
                corpus=self.get_notes_client(),
                indexer=DocumentIndexer(
                    helper_config=self.helper_config,
                    chunker=create_chunker(self.helper_config),
                    embed_client=embed_client,
                ),
                dimension=embed_client.get_dimensions() or None,
            )
            self._index_managers[key] = manager
        return manager

    def get_retrieval_service(self, location: str | None = None) -> RetrievalService:
        if location is None:
            location = self.rag_client_manager.get_default_location()
        key = self._get_location_key(location)
        service = self._retrieval_services.get(key)
        if service is None:
            service = RetrievalService(
                helper_config=self.helper_config,
                index_manager=self.get_index_manager(location),
                embed_client=self.get_embed_client(),
            )
            self._retrieval_services[key] = service
        return service

    ##########################################
    ################ TOOLS ###################
    ##########################################

    def get_tool_executor(self) -> ToolExecutor:
        if self._tool_executor is None:
            self._tool_executor = ToolExecutor(
                helper_config=self.helper_config,
                notes_client=self.get_notes_client(),
                index_manager=self.get_index_manager(),
            )
        return self._tool_executor

    ##########################################
    ############### LIFECYCLE ################
    ##########################################

    async def boot(self) -> None:
        await self.transport.ensure_started()

    async def close(self) -> None:
        for manager in self._index_managers.values():
            await manager.close()
        await self.transport.close()
        self.logging.info("Assistant context closed.")
