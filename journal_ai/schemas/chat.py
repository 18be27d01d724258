"""Chat schemas"""

from pydantic import BaseModel, Field
from typing import Optional, List, Literal

from journal_ai.schemas.settings import JournalSettings


class ChatMessage(BaseModel):
    """A single chat turn"""
    role: Literal["user", "assistant"]
    content: str
    timestamp: Optional[str] = None


class ChatRequest(BaseModel):
    """Chat request: conversation plus the settings to answer with"""
    messages: List[ChatMessage] = Field(..., min_length=1)
    settings: Optional[JournalSettings] = None


class ChatResponse(BaseModel):
    """Chat response with journal citations"""
    content: str
    citations: Optional[List[str]] = None
