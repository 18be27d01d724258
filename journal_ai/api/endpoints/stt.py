"""Dictation endpoints"""

from fastapi import APIRouter, Depends, File, UploadFile
import logging

from journal_ai.api.deps import get_stt_service, get_vault
from journal_ai.schemas.stt import (
    STTEndResponse,
    STTStartRequest,
    STTStartResponse,
    STTStatusResponse,
    STTTranscriptResponse,
)
from journal_ai.services.stt_sessions import STTService
from journal_ai.services.vault import VaultManager

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/stt", response_model=STTStatusResponse)
async def stt_status(stt: STTService = Depends(get_stt_service)):
    """Dictation service status"""
    return STTStatusResponse(
        message="STT streaming API is running",
        active_sessions=stt.active_sessions,
        actions=["start", "audio", "process", "end"],
        endpoints={
            "POST /api/stt/sessions": "Start a session",
            "POST /api/stt/sessions/{id}/audio": "Append an audio chunk",
            "POST /api/stt/sessions/{id}/process": "Transcribe buffered audio",
            "DELETE /api/stt/sessions/{id}": "End a session",
        }
    )


@router.post("/stt/sessions", response_model=STTStartResponse)
async def start_session(
    request: STTStartRequest,
    vault: VaultManager = Depends(get_vault),
    stt: STTService = Depends(get_stt_service)
):
    """Start a dictation session using the vault's STT settings"""
    journal_settings = vault.load_settings()
    session = stt.start(request.session_id, journal_settings, request.language)
    return STTStartResponse(session_id=session.id, engine=session.engine)


@router.post("/stt/sessions/{session_id}/audio")
async def add_audio(
    session_id: str,
    audio: UploadFile = File(...),
    stt: STTService = Depends(get_stt_service)
):
    """Buffer an audio chunk for later transcription"""
    chunks = stt.add_audio(session_id, await audio.read())
    return {"success": True, "chunks": chunks}


@router.post("/stt/sessions/{session_id}/process", response_model=STTTranscriptResponse)
async def process_audio(session_id: str, stt: STTService = Depends(get_stt_service)):
    """Transcribe everything buffered so far"""
    transcript = await stt.process(session_id)
    if transcript is None:
        return STTTranscriptResponse(transcript="", is_final=False)
    return STTTranscriptResponse(transcript=transcript, is_final=True, confidence=1.0)


@router.delete("/stt/sessions/{session_id}", response_model=STTEndResponse)
async def end_session(session_id: str, stt: STTService = Depends(get_stt_service)):
    """End a session, transcribing any remaining audio"""
    final_transcript = await stt.end(session_id)
    return STTEndResponse(final_transcript=final_transcript)
