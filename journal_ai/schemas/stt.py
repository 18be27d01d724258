"""Dictation schemas"""

from pydantic import BaseModel
from typing import Optional, Dict, List


class STTStartRequest(BaseModel):
    """Start dictation request"""
    session_id: str
    language: Optional[str] = None


class STTStartResponse(BaseModel):
    """Start dictation response"""
    success: bool = True
    session_id: str
    engine: str


class STTTranscriptResponse(BaseModel):
    """Transcript for buffered audio"""
    transcript: str
    is_final: bool
    confidence: Optional[float] = None


class STTEndResponse(BaseModel):
    """End dictation response"""
    success: bool = True
    final_transcript: str = ""


class STTStatusResponse(BaseModel):
    """Dictation service status"""
    message: str
    active_sessions: int
    actions: List[str]
    endpoints: Dict[str, str]
