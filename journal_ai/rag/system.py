"""Retrieval core facade: one storage handle per instance"""

from pathlib import Path
from typing import List, Optional, Union
import logging

from journal_ai.database.session import create_engine_for_path, database_path
from journal_ai.rag.config import RAGConfig
from journal_ai.rag.embeddings import EmbeddingsService
from journal_ai.rag.factory import create_embeddings_service
from journal_ai.rag.indexer import Indexer
from journal_ai.rag.retriever import Retriever
from journal_ai.rag.store import JournalStore
from journal_ai.schemas.chunk import ChunkDocument, DocumentMetadata

logger = logging.getLogger(__name__)


class JournalRAG:
    """
    Index and search a journal vault

    Use as an async context manager so the store is released on every
    exit path::

        async with await JournalRAG.open(vault_path, config) as rag:
            await rag.index_document(path, content, metadata)
    """

    def __init__(
        self,
        store: JournalStore,
        embeddings: EmbeddingsService,
        config: Optional[RAGConfig] = None,
        retriever: Optional[Retriever] = None
    ):
        self.config = config or RAGConfig()
        self.store = store
        self.embeddings = embeddings
        self.retriever = retriever or Retriever(
            embeddings,
            store,
            candidate_limit=self.config.candidate_limit,
            recency_decay=self.config.recency_decay,
            skip_mismatched_dimensions=self.config.skip_mismatched_dimensions
        )
        self.indexer = Indexer(store, embeddings, chunk_word_limit=self.config.chunk_word_limit)
        self._closed = False

    @classmethod
    async def open(
        cls,
        vault_path: Union[str, Path],
        config: Optional[RAGConfig] = None,
        embeddings: Optional[EmbeddingsService] = None
    ) -> "JournalRAG":
        """
        Open the vault's embedding store, creating the schema if missing

        Args:
            vault_path: Vault root; the store lives in indices/embeddings.sqlite
            config: Core configuration (default: environment settings)
            embeddings: Embeddings service override (default: from config)
        """
        config = config or RAGConfig.from_settings()
        store = JournalStore(create_engine_for_path(database_path(vault_path)))
        try:
            await store.initialize()
            embeddings = embeddings or create_embeddings_service(config)
        except Exception:
            await store.close()
            raise

        return cls(store, embeddings, config=config)

    async def index_document(self, path: str, content: str, metadata: DocumentMetadata) -> None:
        """Chunk, embed and store a document"""
        await self.indexer.index_document(path, content, metadata)

    async def search(
        self,
        query: str,
        k: Optional[int] = None,
        recency_boost: Optional[float] = None
    ) -> List[ChunkDocument]:
        """Top-k chunks for a query (defaults from config)"""
        return await self.retriever.search(
            query,
            k=self.config.top_k if k is None else k,
            recency_boost=self.config.recency_boost if recency_boost is None else recency_boost
        )

    async def close(self) -> None:
        """Release the storage handle and embedding cache"""
        if self._closed:
            return
        self._closed = True
        try:
            await self.store.close()
        finally:
            await self.embeddings.close()

    async def __aenter__(self) -> "JournalRAG":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
