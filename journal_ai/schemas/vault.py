"""Vault session schemas"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class EntryMetadata(BaseModel):
    """Typing statistics captured for one timed entry"""
    entry_number: int
    started_at: str
    first_keystroke_at: Optional[str] = None
    finished_at: Optional[str] = None
    duration_seconds: float = 0
    total_keystrokes: int = 0
    backspaces: int = 0
    paste_events: int = 0
    pauses: List[float] = Field(default_factory=list)
    max_pause: float = 0
    time_since_last_entry: float = 0
    word_count: int = 0
    char_count: int = 0
    line_count: int = 0


class Problem(BaseModel):
    """A problem worked through during a session"""
    title: str
    control: List[str] = Field(default_factory=list)
    not_in_control: List[str] = Field(default_factory=list)
    action: str = ""


class Closing(BaseModel):
    """End-of-session reflection"""
    tomorrow: str = ""
    letting_go: str = ""


class SessionSaveRequest(BaseModel):
    """Save session request"""
    content: str
    duration_seconds: float = 0
    tags: List[str] = Field(default_factory=list)
    mood: Optional[int] = None
    problems: List[Problem] = Field(default_factory=list)
    recurring_theme: Optional[str] = None
    closing: Optional[Closing] = None
    phase: Optional[str] = None
    is_append: bool = False
    force_overwrite: bool = False


class SessionSaveResponse(BaseModel):
    """Save session response"""
    success: bool
    filepath: Optional[str] = None
    exists: bool = False
    message: Optional[str] = None
    existing_content: Optional[str] = None
    existing_data: Optional[Dict[str, Any]] = None


class EntrySaveRequest(BaseModel):
    """Save timed entry request"""
    content: str
    metadata: EntryMetadata


class SessionRecord(BaseModel):
    """A loaded session file"""
    date: Optional[str] = None
    content: str
    data: Dict[str, Any] = Field(default_factory=dict)
