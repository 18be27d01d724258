"""Journal document model"""

from sqlalchemy import Column, String, Text, Index
from sqlalchemy.orm import relationship
from journal_ai.database.base import Base


class Document(Base):
    """A journal file indexed for retrieval, keyed by its storage path"""

    __tablename__ = "documents"

    id = Column(Text, primary_key=True)
    path = Column(Text, nullable=False)
    title = Column(Text, nullable=True)
    date = Column(String(32), nullable=True)  # ISO date
    hash = Column(Text, nullable=True)  # content hash for change detection

    # Relationships
    chunks = relationship("Chunk", back_populates="document")

    __table_args__ = (
        Index('idx_documents_date', 'date'),
    )

    def __repr__(self):
        return f"<Document(id={self.id}, date={self.date})>"
