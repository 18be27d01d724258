"""Document indexing: chunk, embed, persist"""

from typing import Optional
import logging

from journal_ai.rag.chunker import chunk_document, count_tokens
from journal_ai.rag.embeddings import EmbeddingsService
from journal_ai.rag.store import JournalStore
from journal_ai.schemas.chunk import DocumentMetadata

logger = logging.getLogger(__name__)


class Indexer:
    """Ingests journal documents into the embedding store"""

    def __init__(
        self,
        store: JournalStore,
        embeddings: EmbeddingsService,
        chunk_word_limit: Optional[int] = None
    ):
        self.store = store
        self.embeddings = embeddings
        self.chunk_word_limit = chunk_word_limit

    async def index_document(self, path: str, content: str, metadata: DocumentMetadata) -> None:
        """
        Index a document, replacing any previous version with the same path

        The document row is written first; a storage failure there aborts
        before any chunk is touched. Chunks are embedded and written one at
        a time in document order. Embedding never fails (local fallback),
        so only storage errors propagate.

        Args:
            path: Document path (its id)
            content: Raw document text
            metadata: Date, optional title and hash
        """
        document_id = await self.store.upsert_document(path, metadata)

        chunks = chunk_document(
            content,
            path=document_id,
            date=metadata.date,
            word_limit=self.chunk_word_limit
        )
        logger.info(f"Indexing {path}: {len(chunks)} chunks")

        for chunk in chunks:
            vector, model = await self.embeddings.embed_with_model(chunk.text)
            await self.store.upsert_chunk_with_embedding(
                chunk,
                vector,
                model,
                tokens=count_tokens(chunk.text)
            )

        logger.info(f"Successfully indexed document: {path}")
