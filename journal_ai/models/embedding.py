"""Chunk embedding model"""

from sqlalchemy import Column, Text, LargeBinary, ForeignKey
from sqlalchemy.orm import relationship
from journal_ai.database.base import Base


class Embedding(Base):
    """Embedding vector for one chunk, packed as float32 bytes"""

    __tablename__ = "embeddings"

    chunk_id = Column(Text, ForeignKey("chunks.id"), primary_key=True)
    embedding = Column(LargeBinary, nullable=True)
    model = Column(Text, nullable=True)

    # Relationships
    chunk = relationship("Chunk", back_populates="embedding")

    def __repr__(self):
        return f"<Embedding(chunk_id={self.chunk_id}, model={self.model})>"
