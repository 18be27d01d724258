"""Document chunk model"""

from sqlalchemy import Column, Integer, Text, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from journal_ai.database.base import Base


class Chunk(Base):
    """Heading-aware span of a journal document"""

    __tablename__ = "chunks"

    id = Column(Text, primary_key=True)  # "{path}-{index}"
    document_id = Column(Text, ForeignKey("documents.id"), nullable=True)
    heading = Column(Text, nullable=True)
    text = Column(Text, nullable=True)
    tokens = Column(Integer, nullable=True)  # whitespace word count
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    document = relationship("Document", back_populates="chunks")
    embedding = relationship("Embedding", back_populates="chunk", uselist=False)

    __table_args__ = (
        Index('idx_chunks_document', 'document_id'),
    )

    def __repr__(self):
        return f"<Chunk(id={self.id}, heading={self.heading!r}, tokens={self.tokens})>"
