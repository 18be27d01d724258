"""SQLite-backed store for documents, chunks and embeddings"""

from array import array
from dataclasses import dataclass
from typing import List, Optional, Sequence
import sys
import logging

from sqlalchemy import select, func
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from journal_ai.database.base import Base
from journal_ai.database.session import create_session_factory
from journal_ai.exceptions import StorageException
from journal_ai.models import Chunk, Document, Embedding
from journal_ai.schemas.chunk import ChunkDocument, DocumentMetadata

logger = logging.getLogger(__name__)


def pack_vector(vector: Sequence[float]) -> bytes:
    """Pack a vector as little-endian float32 bytes"""
    packed = array("f", vector)
    if sys.byteorder != "little":
        packed.byteswap()
    return packed.tobytes()


def unpack_vector(data: Optional[bytes]) -> List[float]:
    """Inverse of pack_vector"""
    if not data:
        return []
    unpacked = array("f")
    unpacked.frombytes(data)
    if sys.byteorder != "little":
        unpacked.byteswap()
    return unpacked.tolist()


@dataclass
class Candidate:
    """A stored chunk joined with its embedding and document date"""
    id: str
    document_id: str
    heading: str
    text: str
    date: str
    embedding: List[float]
    model: Optional[str] = None

    def to_chunk_document(self) -> ChunkDocument:
        return ChunkDocument(
            id=self.id,
            path=self.document_id,
            heading=self.heading,
            text=self.text,
            date=self.date
        )


class JournalStore:
    """
    Persistence for the retrieval core

    Single writer, single process. Every write commits immediately; any
    database error is raised as StorageException.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = create_session_factory(engine)

    async def initialize(self) -> None:
        """Create tables and indexes if missing"""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.debug("Embedding store schema created/verified")
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error initializing embedding store: {e}")
            raise StorageException(f"Failed to initialize store: {e}") from e

    async def upsert_document(self, path: str, metadata: DocumentMetadata) -> str:
        """
        Insert or replace a document row keyed by its path

        Args:
            path: Document path (also its id)
            metadata: Title, date and hash

        Returns:
            Document id
        """
        values = {
            "id": path,
            "path": path,
            "title": metadata.title or "",
            "date": metadata.date,
            "hash": metadata.hash or "",
        }
        statement = sqlite_insert(Document).values(**values)
        statement = statement.on_conflict_do_update(
            index_elements=[Document.id],
            set_={key: statement.excluded[key] for key in values if key != "id"}
        )

        try:
            async with self.session_factory() as session:
                await session.execute(statement)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error upserting document {path}: {e}")
            raise StorageException(f"Failed to store document {path}: {e}") from e

        logger.debug(f"Upserted document {path}")
        return path

    async def upsert_chunk_with_embedding(
        self,
        chunk: ChunkDocument,
        embedding: Sequence[float],
        model: str,
        tokens: Optional[int] = None
    ) -> None:
        """
        Insert or replace a chunk row and its embedding row

        Args:
            chunk: Chunk to store (chunk.path is the owning document id)
            embedding: Embedding vector
            model: Name of the model that produced the vector
            tokens: Token count (default: whitespace word count of the text)
        """
        chunk_values = {
            "id": chunk.id,
            "document_id": chunk.path,
            "heading": chunk.heading,
            "text": chunk.text,
            "tokens": tokens if tokens is not None else len(chunk.text.split()),
        }
        chunk_statement = sqlite_insert(Chunk).values(**chunk_values)
        chunk_statement = chunk_statement.on_conflict_do_update(
            index_elements=[Chunk.id],
            set_={key: chunk_statement.excluded[key] for key in chunk_values if key != "id"}
        )

        embedding_statement = sqlite_insert(Embedding).values(
            chunk_id=chunk.id,
            embedding=pack_vector(embedding),
            model=model
        )
        embedding_statement = embedding_statement.on_conflict_do_update(
            index_elements=[Embedding.chunk_id],
            set_={
                "embedding": embedding_statement.excluded.embedding,
                "model": embedding_statement.excluded.model,
            }
        )

        try:
            async with self.session_factory() as session:
                await session.execute(chunk_statement)
                await session.execute(embedding_statement)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error upserting chunk {chunk.id}: {e}")
            raise StorageException(f"Failed to store chunk {chunk.id}: {e}") from e

    async def fetch_candidates(self, limit: int = 100) -> List[Candidate]:
        """
        Chunks with embeddings, most recent documents first

        Args:
            limit: Maximum number of candidates

        Returns:
            Candidates ordered by document date descending
        """
        statement = (
            select(
                Chunk.id,
                Chunk.document_id,
                Chunk.heading,
                Chunk.text,
                Document.date,
                Embedding.embedding,
                Embedding.model,
            )
            .join(Embedding, Embedding.chunk_id == Chunk.id)
            .join(Document, Document.id == Chunk.document_id)
            .order_by(Document.date.desc())
            .limit(limit)
        )

        try:
            async with self.session_factory() as session:
                rows = (await session.execute(statement)).all()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error fetching candidates: {e}")
            raise StorageException(f"Failed to fetch candidates: {e}") from e

        return [
            Candidate(
                id=row.id,
                document_id=row.document_id,
                heading=row.heading or "",
                text=row.text or "",
                date=row.date or "",
                embedding=unpack_vector(row.embedding),
                model=row.model,
            )
            for row in rows
        ]

    async def count_documents(self) -> int:
        return await self._count(Document.id)

    async def count_chunks(self) -> int:
        return await self._count(Chunk.id)

    async def _count(self, column) -> int:
        try:
            async with self.session_factory() as session:
                return (await session.execute(select(func.count(column)))).scalar_one()
        except (SQLAlchemyError, OSError) as e:
            raise StorageException(f"Failed to count rows: {e}") from e

    async def close(self) -> None:
        """Release the storage handle"""
        await self.engine.dispose()
        logger.debug("Embedding store closed")
