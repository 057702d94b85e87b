"""Tests for the index lifecycle: single-flight build, readiness, writes and dimension checks."""

import asyncio

import pytest

from conftest import FakeCorpus, MockEmbedClient
from services.chunking.MarkdownChunker import MarkdownChunker
from services.index.IndexHandle import IndexState
from services.index.IndexManager import IndexManager
from services.retrieval.DocumentIndexer import DocumentIndexer
from shared.clients.rag.sqlite.RAGClientSqlite import RAGClientSqlite
from shared.errors import DimensionMismatchError, IndexNotReady, IngestError
from shared.models.document import Document

DOCUMENTS = [
    Document(source_id="1", text="Groceries: milk, eggs and bread."),
    Document(source_id="2", text="Meeting notes\n\nDiscussed the roadmap for next quarter."),
    Document(source_id="3", text="# Ideas\n\n" + "Build a bird house. " * 30),
]


class SlowEmbedClient(MockEmbedClient):
    """Mock embedding client that stalls on texts containing slow_marker."""

    def __init__(self, slow_marker: str, delay: float, **kwargs):
        super().__init__(**kwargs)
        self.slow_marker = slow_marker
        self.delay = delay

    async def do_embed(self, texts):
        if any(self.slow_marker in text for text in texts):
            await asyncio.sleep(self.delay)
        return await super().do_embed(texts)


@pytest.fixture
def make_manager(helper_config, tmp_path):
    def factory(corpus, embed_client=None, dimension=None, path="vector.db"):
        store = RAGClientSqlite(helper_config=helper_config, location=str(tmp_path / path))
        indexer = DocumentIndexer(
            helper_config=helper_config,
            chunker=MarkdownChunker(chunk_size=200, chunk_overlap=20),
            embed_client=embed_client or MockEmbedClient(),
        )
        manager = IndexManager(helper_config=helper_config, store=store, corpus=corpus, indexer=indexer, dimension=dimension)
        return manager

    return factory


class TestFirstUse:
    @pytest.mark.asyncio
    async def test_concurrent_first_calls_share_one_rebuild(self, make_manager):
        gate = asyncio.Event()
        corpus = FakeCorpus(DOCUMENTS, gate=gate)
        manager = make_manager(corpus)

        tasks = [asyncio.create_task(manager.get_index()) for _ in range(10)]
        await corpus.started.wait()
        assert manager.state is IndexState.REBUILDING
        with pytest.raises(IndexNotReady) as exc_info:
            await manager.query([0.1] * 8, 3)
        assert exc_info.value.state == "rebuilding"

        gate.set()
        handles = await asyncio.gather(*tasks)

        assert corpus.calls == 1
        assert all(handle is handles[0] for handle in handles)
        assert handles[0].is_ready()
        assert handles[0].dimension == 8
        await manager.close()

    @pytest.mark.asyncio
    async def test_query_before_first_build(self, make_manager):
        manager = make_manager(FakeCorpus(DOCUMENTS))
        with pytest.raises(IndexNotReady) as exc_info:
            await manager.query([0.1] * 8, 3)
        assert exc_info.value.state == "uninitialized"
        await manager.close()

    @pytest.mark.asyncio
    async def test_ready_index_is_not_rebuilt(self, make_manager):
        corpus = FakeCorpus(DOCUMENTS)
        manager = make_manager(corpus)
        await manager.get_index()
        await manager.get_index()
        assert corpus.calls == 1
        await manager.close()

    @pytest.mark.asyncio
    async def test_empty_corpus(self, make_manager):
        manager = make_manager(FakeCorpus([]))
        handle = await manager.get_index()
        assert handle.is_ready()
        assert await manager.query([0.1] * 8, 3) == []
        await manager.close()


class TestRebuild:
    @pytest.mark.asyncio
    async def test_explicit_rebuild_refetches_corpus(self, make_manager):
        corpus = FakeCorpus(DOCUMENTS[:1])
        manager = make_manager(corpus)
        await manager.get_index()
        first_count = (await manager.stats())["chunk_count"]

        corpus.documents = DOCUMENTS
        await manager.rebuild()

        assert corpus.calls == 2
        assert manager.state is IndexState.READY
        assert (await manager.stats())["chunk_count"] > first_count
        await manager.close()

    @pytest.mark.asyncio
    async def test_rebuild_drops_sources_missing_from_corpus(self, make_manager):
        corpus = FakeCorpus(DOCUMENTS)
        embed_client = MockEmbedClient()
        manager = make_manager(corpus, embed_client=embed_client)
        await manager.get_index()

        corpus.documents = DOCUMENTS[1:]
        await manager.rebuild()

        hits = await manager.query(embed_client.vector_for(DOCUMENTS[0].text), 50)
        assert "1" not in {hit.source_id for hit in hits}
        await manager.close()

    @pytest.mark.asyncio
    async def test_queries_refused_during_explicit_rebuild(self, make_manager):
        corpus = FakeCorpus(DOCUMENTS)
        manager = make_manager(corpus)
        await manager.get_index()

        corpus.gate = asyncio.Event()
        corpus.started = asyncio.Event()
        rebuild = asyncio.create_task(manager.rebuild())
        await corpus.started.wait()
        with pytest.raises(IndexNotReady):
            await manager.query([0.1] * 8, 3)

        corpus.gate.set()
        await rebuild
        assert manager.state is IndexState.READY
        await manager.close()

    @pytest.mark.asyncio
    async def test_failed_rebuild_can_be_retried(self, make_manager):
        corpus = FakeCorpus(DOCUMENTS + [Document(source_id="bad", text="this one says BOOM")])
        manager = make_manager(corpus, embed_client=MockEmbedClient(fail_on=("BOOM",)))

        with pytest.raises(IngestError):
            await manager.get_index()
        assert manager.state is IndexState.UNINITIALIZED

        corpus.documents = DOCUMENTS
        handle = await manager.get_index()
        assert handle.is_ready()
        assert corpus.calls == 2
        await manager.close()

    @pytest.mark.asyncio
    async def test_failed_rebuild_writes_nothing_afterwards(self, make_manager):
        embed_client = SlowEmbedClient(slow_marker="late", delay=0.2, fail_on=("BOOM",))
        corpus = FakeCorpus([
            Document(source_id="bad", text="this one says BOOM"),
            Document(source_id="late", text="this one is late"),
        ])
        manager = make_manager(corpus, embed_client=embed_client)

        with pytest.raises(IngestError):
            await manager.get_index()

        assert manager.state is IndexState.UNINITIALIZED
        assert ["this one is late"] in embed_client.calls
        count_at_failure = await manager.handle.store.do_count()
        await asyncio.sleep(0.3)
        assert await manager.handle.store.do_count() == count_at_failure == 0
        await manager.close()


class TestDimensions:
    @pytest.mark.asyncio
    async def test_embedding_dimension_differs_from_configured(self, make_manager):
        manager = make_manager(FakeCorpus(DOCUMENTS), dimension=16)
        with pytest.raises(DimensionMismatchError) as exc_info:
            await manager.get_index()
        assert (exc_info.value.expected, exc_info.value.actual) == (16, 8)
        await manager.close()

    @pytest.mark.asyncio
    async def test_stored_dimension_conflict(self, make_manager):
        first = make_manager(FakeCorpus(DOCUMENTS))
        await first.get_index()
        stored_chunks = await first.handle.store.do_count()
        await first.close()

        second = make_manager(FakeCorpus(DOCUMENTS), embed_client=MockEmbedClient(dimension=16), dimension=16)
        with pytest.raises(DimensionMismatchError) as exc_info:
            await second.get_index()
        assert (exc_info.value.expected, exc_info.value.actual) == (16, 8)
        assert await second.handle.store.do_count() == stored_chunks
        await second.close()

    @pytest.mark.asyncio
    async def test_explicit_rebuild_replaces_conflicting_configured_dimension(self, make_manager):
        first = make_manager(FakeCorpus(DOCUMENTS))
        await first.get_index()
        await first.close()

        embed_client = MockEmbedClient(dimension=16)
        second = make_manager(FakeCorpus(DOCUMENTS), embed_client=embed_client, dimension=16)
        handle = await second.rebuild()

        assert handle.is_ready()
        assert handle.dimension == 16
        hits = await second.query(embed_client.vector_for(DOCUMENTS[0].text), 3)
        assert hits[0].source_id == "1"
        await second.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("explicit", [True, False])
    async def test_model_switch_with_auto_dimension(self, make_manager, explicit):
        first = make_manager(FakeCorpus(DOCUMENTS), path="switch.db")
        await first.get_index()
        await first.close()

        second = make_manager(FakeCorpus(DOCUMENTS), embed_client=MockEmbedClient(dimension=16), path="switch.db")
        handle = await (second.rebuild() if explicit else second.get_index())

        assert handle.is_ready()
        assert handle.dimension == 16
        assert (await second.stats())["chunk_count"] >= len(DOCUMENTS)
        await second.close()

        reopened = make_manager(FakeCorpus([]), path="switch.db")
        assert await reopened.handle.store.do_open() == 16
        await reopened.close()

    @pytest.mark.asyncio
    async def test_auto_dimension_follows_the_corpus(self, make_manager):
        first = make_manager(FakeCorpus(DOCUMENTS))
        await first.get_index()
        await first.close()

        second = make_manager(FakeCorpus([]))
        handle = await second.get_index()
        assert handle.is_ready()
        assert handle.dimension is None
        assert await second.query([0.1] * 8, 3) == []
        await second.close()

    @pytest.mark.asyncio
    async def test_query_vector_dimension_checked(self, make_manager):
        manager = make_manager(FakeCorpus(DOCUMENTS))
        await manager.get_index()
        with pytest.raises(DimensionMismatchError):
            await manager.query([0.1] * 3, 3)
        await manager.close()

    @pytest.mark.asyncio
    async def test_upsert_dimension_checked(self, make_manager):
        manager = make_manager(FakeCorpus(DOCUMENTS))
        await manager.get_index()
        points, _ = await manager.indexer.do_prepare(Document(source_id="9", text="short"))
        with pytest.raises(DimensionMismatchError):
            await manager.upsert("9", points, [[0.1] * 4])
        await manager.close()


class TestWrites:
    @pytest.mark.asyncio
    async def test_upsert_requires_ready_index(self, make_manager):
        manager = make_manager(FakeCorpus(DOCUMENTS))
        with pytest.raises(IndexNotReady):
            await manager.upsert("9", [], [])
        await manager.close()

    @pytest.mark.asyncio
    async def test_remove_before_build(self, make_manager):
        manager = make_manager(FakeCorpus(DOCUMENTS))
        assert await manager.remove("1") is False
        await manager.close()

    @pytest.mark.asyncio
    async def test_remove_source(self, make_manager):
        embed_client = MockEmbedClient()
        manager = make_manager(FakeCorpus(DOCUMENTS), embed_client=embed_client)
        await manager.get_index()

        assert await manager.remove("1") is True

        hits = await manager.query(embed_client.vector_for(DOCUMENTS[0].text), 50)
        assert "1" not in {hit.source_id for hit in hits}
        await manager.close()

    @pytest.mark.asyncio
    async def test_stats(self, make_manager, tmp_path):
        manager = make_manager(FakeCorpus(DOCUMENTS))
        before = await manager.stats()
        assert before["state"] == "uninitialized"
        assert before["chunk_count"] is None

        await manager.get_index()
        after = await manager.stats()
        assert after["state"] == "ready"
        assert after["engine"] == "sqlite"
        assert after["dimension"] == 8
        assert after["chunk_count"] >= len(DOCUMENTS)
        assert after["location"] == str(tmp_path / "vector.db")
        await manager.close()
