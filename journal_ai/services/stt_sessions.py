"""Dictation session management"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional
import logging

from journal_ai.config import settings
from journal_ai.exceptions import SessionNotFoundException, TranscriptionException
from journal_ai.schemas.settings import JournalSettings
from journal_ai.services.session_cache import SessionCache
from journal_ai.services.transcriber import LocalWhisperTranscriber, OpenAIWhisperTranscriber, Transcriber

logger = logging.getLogger(__name__)


@dataclass
class STTSession:
    """Audio buffered for one dictation session"""
    id: str
    language: str
    engine: str
    settings: JournalSettings
    audio_chunks: List[bytes] = field(default_factory=list)

    def take_audio(self) -> bytes:
        """Concatenate and clear the buffered audio"""
        audio = b"".join(self.audio_chunks)
        self.audio_chunks = []
        return audio


def default_transcriber_factory(journal_settings: JournalSettings) -> Transcriber:
    """Transcriber for the session's engine ('openai' or local Whisper)"""
    if journal_settings.stt_engine == "openai":
        return OpenAIWhisperTranscriber(
            api_key=journal_settings.api_key or settings.OPENAI_API_KEY,
            model=settings.WHISPER_MODEL
        )
    return LocalWhisperTranscriber(model=settings.LOCAL_WHISPER_MODEL)


class STTService:
    """Start, feed, transcribe and end dictation sessions"""

    def __init__(
        self,
        cache: SessionCache[STTSession],
        transcriber_factory: Callable[[JournalSettings], Transcriber] = default_transcriber_factory,
        min_audio_bytes: int = 1000
    ):
        self.cache = cache
        self.transcriber_factory = transcriber_factory
        self.min_audio_bytes = min_audio_bytes

    @property
    def active_sessions(self) -> int:
        return len(self.cache)

    def _get(self, session_id: str) -> STTSession:
        session = self.cache.get(session_id)
        if session is None:
            raise SessionNotFoundException(f"Session not found: {session_id}")
        return session

    def start(self, session_id: str, journal_settings: JournalSettings, language: Optional[str] = None) -> STTSession:
        """Register a new session (replacing any with the same id)"""
        session = STTSession(
            id=session_id,
            language=language or journal_settings.stt_language or "en",
            engine=journal_settings.stt_engine,
            settings=journal_settings
        )
        self.cache.put(session_id, session)
        logger.info(f"Starting STT session: {session_id} ({session.engine})")
        return session

    def add_audio(self, session_id: str, audio: bytes) -> int:
        """
        Buffer an audio chunk

        Returns:
            Number of buffered chunks
        """
        session = self._get(session_id)
        if audio:
            session.audio_chunks.append(audio)
            logger.debug(f"Added audio chunk: {len(audio)} bytes (total: {len(session.audio_chunks)} chunks)")
        return len(session.audio_chunks)

    async def _transcribe(self, session: STTSession) -> str:
        audio = session.take_audio()
        if len(audio) < self.min_audio_bytes:
            return ""
        transcriber = self.transcriber_factory(session.settings)
        return (await transcriber.transcribe(audio, session.language)).strip()

    async def process(self, session_id: str) -> Optional[str]:
        """
        Transcribe and clear buffered audio

        Returns:
            Transcript, or None when nothing was buffered
        """
        session = self._get(session_id)
        if not session.audio_chunks:
            return None
        return await self._transcribe(session)

    async def end(self, session_id: str) -> str:
        """
        Close a session, transcribing any remaining audio

        A failure on the final transcription is logged and yields an empty
        transcript; the session is removed either way.
        """
        session = self._get(session_id)
        logger.info(f"Ending STT session: {session_id}")
        try:
            if session.audio_chunks:
                return await self._transcribe(session)
            return ""
        except TranscriptionException as e:
            logger.error(f"Final processing error for {session_id}: {e}")
            return ""
        finally:
            self.cache.pop(session_id)
