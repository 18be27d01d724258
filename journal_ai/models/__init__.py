"""Database models package"""

from journal_ai.models.document import Document
from journal_ai.models.chunk import Chunk
from journal_ai.models.embedding import Embedding

__all__ = [
    "Document",
    "Chunk",
    "Embedding",
]
