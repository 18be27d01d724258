"""Journal session endpoints"""

from datetime import date, datetime, timezone
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from typing import Callable, List, Optional
import logging

from journal_ai.api.deps import get_rag_opener, get_vault
from journal_ai.schemas.vault import EntrySaveRequest, SessionRecord, SessionSaveRequest, SessionSaveResponse
from journal_ai.services.journal_service import index_session_file
from journal_ai.services.vault import SessionFile, VaultManager

router = APIRouter()
logger = logging.getLogger(__name__)


def _record(session: SessionFile) -> SessionRecord:
    return SessionRecord(date=session.date, content=session.content, data=jsonable_encoder(session.data))


@router.post("/vault/sessions", response_model=SessionSaveResponse)
async def save_session(
    request: SessionSaveRequest,
    vault: VaultManager = Depends(get_vault),
    open_rag: Callable = Depends(get_rag_opener)
):
    """
    Save today's session and index it for chat

    Returns 409 with the existing session when one exists for today and
    neither is_append nor force_overwrite is set.
    """
    journal_settings = vault.load_settings()

    front_matter = request.model_dump(
        include={"duration_seconds", "tags", "mood", "problems", "recurring_theme", "closing", "phase"},
        exclude_none=True
    )
    if not front_matter.get("problems"):
        front_matter.pop("problems", None)
    now = datetime.now(timezone.utc)
    front_matter["date"] = now.date().isoformat()

    result = vault.save_session(
        request.content,
        front_matter,
        is_append=request.is_append,
        force_overwrite=request.force_overwrite,
        now=now
    )

    if result.exists:
        body = SessionSaveResponse(
            success=False,
            exists=True,
            filepath=str(result.filepath),
            message="A session already exists for today. Would you like to append to it?",
            existing_content=result.existing_content,
            existing_data=jsonable_encoder(result.existing_data)
        )
        return JSONResponse(status_code=409, content=body.model_dump())

    async with await open_rag(vault, journal_settings) as rag:
        await index_session_file(rag, vault, result.filepath)

    return SessionSaveResponse(success=True, filepath=str(result.filepath))


@router.post("/vault/entries", response_model=SessionSaveResponse)
async def save_entry(
    request: EntrySaveRequest,
    vault: VaultManager = Depends(get_vault),
    open_rag: Callable = Depends(get_rag_opener)
):
    """Append a timed entry to today's session and re-index the session"""
    journal_settings = vault.load_settings()
    filepath = vault.save_entry(request.content, request.metadata)

    async with await open_rag(vault, journal_settings) as rag:
        await index_session_file(rag, vault, filepath)

    return SessionSaveResponse(success=True, filepath=str(filepath))


@router.get("/vault/sessions/recent", response_model=List[SessionRecord])
async def recent_sessions(
    days: int = Query(7, ge=1, le=366),
    vault: VaultManager = Depends(get_vault)
):
    """Sessions from the last N days, newest first"""
    return [_record(session) for session in vault.get_recent_sessions(days)]


@router.get("/vault/sessions/{day}", response_model=Optional[SessionRecord])
async def load_session(day: date, vault: VaultManager = Depends(get_vault)):
    """One day's session, or null"""
    session = vault.load_session(day)
    return _record(session) if session else None
