"""RAG module - retrieval over the journal archive"""

from journal_ai.rag.chunker import chunk_document
from journal_ai.rag.embeddings import EmbeddingsService, local_embedding
from journal_ai.rag.indexer import Indexer
from journal_ai.rag.retriever import Retriever
from journal_ai.rag.similarity import cosine_similarity, recency_score
from journal_ai.rag.store import JournalStore
from journal_ai.rag.system import JournalRAG

__all__ = [
    'chunk_document',
    'EmbeddingsService',
    'local_embedding',
    'Indexer',
    'Retriever',
    'cosine_similarity',
    'recency_score',
    'JournalStore',
    'JournalRAG',
]
