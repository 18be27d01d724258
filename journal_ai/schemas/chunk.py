"""Chunk and document metadata schemas"""

from pydantic import BaseModel, ConfigDict
from typing import Optional


class DocumentMetadata(BaseModel):
    """Metadata supplied when indexing a document"""
    date: str
    title: Optional[str] = None
    hash: Optional[str] = None


class ChunkDocument(BaseModel):
    """A chunk as produced by the chunker and returned by search"""
    id: str
    path: str
    heading: str = ""
    text: str
    date: str

    model_config = ConfigDict(from_attributes=True)
