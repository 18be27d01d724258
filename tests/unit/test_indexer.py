"""Test document indexing and the JournalRAG lifecycle"""

from typing import List

import pytest

from journal_ai.database.session import database_path
from journal_ai.exceptions import ConfigurationException, StorageException
from journal_ai.rag.store import JournalStore
from journal_ai.rag.config import RAGConfig
from journal_ai.rag.embeddings import EmbeddingProvider, EmbeddingsService
from journal_ai.rag.system import JournalRAG
from journal_ai.schemas.chunk import DocumentMetadata

SCENARIO = "# Morning\nFelt good today.\n# Evening\nTired but productive.\n"


class UnavailableProvider(EmbeddingProvider):
    name = "unavailable"

    def __init__(self):
        super().__init__("remote-model")

    async def embed(self, text: str) -> List[float]:
        raise ConnectionError("no route to host")


@pytest.mark.asyncio
async def test_index_document_stores_all_chunks(rag):
    await rag.index_document("day.md", SCENARIO, DocumentMetadata(date="2024-01-01", title="Day"))

    candidates = await rag.store.fetch_candidates()

    assert await rag.store.count_documents() == 1
    assert sorted(c.id for c in candidates) == ["day.md-0", "day.md-1"]
    assert all(c.model == "keyword-test" for c in candidates)
    assert all(len(c.embedding) == 4 for c in candidates)


@pytest.mark.asyncio
async def test_reindexing_is_idempotent(rag):
    metadata = DocumentMetadata(date="2024-01-01")
    await rag.index_document("day.md", SCENARIO, metadata)
    await rag.index_document("day.md", SCENARIO, metadata)

    results = await rag.search("productive", k=10)

    assert await rag.store.count_documents() == 1
    assert await rag.store.count_chunks() == 2
    assert len(results) == 2


@pytest.mark.asyncio
async def test_reindexing_updates_chunk_text(rag):
    await rag.index_document("day.md", SCENARIO, DocumentMetadata(date="2024-01-01"))
    await rag.index_document("day.md", "# Morning\nSlept badly.\n", DocumentMetadata(date="2024-01-01"))

    candidates = {c.id: c for c in await rag.store.fetch_candidates()}

    assert candidates["day.md-0"].text == "# Morning\nSlept badly."


@pytest.mark.asyncio
async def test_empty_document_has_row_but_no_chunks(rag):
    await rag.index_document("blank.md", "\n\n", DocumentMetadata(date="2024-01-01"))

    assert await rag.store.count_documents() == 1
    assert await rag.store.count_chunks() == 0


@pytest.mark.asyncio
async def test_provider_failure_stores_fallback_model(tmp_path):
    embeddings = EmbeddingsService(provider=UnavailableProvider())
    async with await JournalRAG.open(tmp_path, RAGConfig(), embeddings=embeddings) as rag:
        await rag.index_document("day.md", SCENARIO, DocumentMetadata(date="2024-01-01"))
        candidates = await rag.store.fetch_candidates()

    assert {c.model for c in candidates} == {"simple"}
    assert all(len(c.embedding) == 1536 for c in candidates)


@pytest.mark.asyncio
async def test_open_creates_store_file_and_persists(tmp_path):
    config = RAGConfig(embedding_provider="local")
    async with await JournalRAG.open(tmp_path, config) as rag:
        assert rag.embeddings.model == "simple"
        await rag.index_document("day.md", SCENARIO, DocumentMetadata(date="2024-01-01"))

    assert database_path(tmp_path).exists()

    async with await JournalRAG.open(tmp_path, config) as reopened:
        assert await reopened.store.count_chunks() == 2


@pytest.mark.asyncio
async def test_close_is_idempotent(tmp_path):
    rag = await JournalRAG.open(tmp_path, RAGConfig(embedding_provider="local"))
    await rag.close()
    await rag.close()


@pytest.mark.asyncio
async def test_search_defaults_come_from_config(tmp_path):
    config = RAGConfig(top_k=1)
    embeddings = EmbeddingsService(provider=None)
    async with await JournalRAG.open(tmp_path, config, embeddings=embeddings) as rag:
        await rag.index_document("day.md", SCENARIO, DocumentMetadata(date="2024-01-01"))
        assert len(await rag.search("anything")) == 1


@pytest.mark.asyncio
async def test_document_write_failure_aborts_before_chunks(rag, monkeypatch):
    async def broken_upsert(path, metadata):
        raise StorageException("disk full")

    monkeypatch.setattr(rag.store, "upsert_document", broken_upsert)

    with pytest.raises(StorageException):
        await rag.index_document("day.md", SCENARIO, DocumentMetadata(date="2024-01-01"))

    assert rag.embeddings.provider.calls == 0
    assert await rag.store.count_chunks() == 0


@pytest.mark.asyncio
async def test_open_releases_store_when_provider_is_unknown(tmp_path, monkeypatch):
    closed = []
    original_close = JournalStore.close

    async def recording_close(self):
        closed.append(self)
        await original_close(self)

    monkeypatch.setattr(JournalStore, "close", recording_close)

    with pytest.raises(ConfigurationException):
        await JournalRAG.open(tmp_path, RAGConfig(embedding_provider="word2vec"))

    assert len(closed) == 1


@pytest.mark.asyncio
async def test_close_releases_embeddings_when_store_close_fails(tmp_path, monkeypatch):
    released = []

    async def failing_close():
        raise StorageException("dispose failed")

    async def recording_release():
        released.append(True)

    rag = await JournalRAG.open(tmp_path, RAGConfig(embedding_provider="local"))
    await rag.store.close()
    monkeypatch.setattr(rag.store, "close", failing_close)
    monkeypatch.setattr(rag.embeddings, "close", recording_release)

    with pytest.raises(StorageException):
        await rag.close()

    assert released == [True]
