"""Speech-to-text backends"""

from abc import ABC, abstractmethod
from pathlib import Path
from openai import AsyncOpenAI
import asyncio
import json
import shutil
import tempfile
import logging

from journal_ai.exceptions import TranscriptionException

logger = logging.getLogger(__name__)


def whisper_language(language: str) -> str:
    """Whisper wants ISO-639-1 codes: 'en-US' -> 'en'"""
    return (language or "en").split("-")[0].lower()


class Transcriber(ABC):
    """Turns a buffer of recorded audio into text"""

    name: str = "transcriber"

    @abstractmethod
    async def transcribe(self, audio: bytes, language: str) -> str:
        """Transcribe audio; raise TranscriptionException on failure"""


class OpenAIWhisperTranscriber(Transcriber):
    """OpenAI hosted Whisper"""

    name = "openai"

    def __init__(self, api_key: str, model: str = "whisper-1"):
        if not api_key:
            raise TranscriptionException("OpenAI API key not configured")
        self.async_client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def transcribe(self, audio: bytes, language: str) -> str:
        try:
            response = await self.async_client.audio.transcriptions.create(
                file=("audio.webm", audio),
                model=self.model,
                language=whisper_language(language),
                response_format="json"
            )
        except Exception as e:
            logger.error(f"OpenAI transcription error: {e}")
            raise TranscriptionException(str(e)) from e
        return response.text or ""


class LocalWhisperTranscriber(Transcriber):
    """The `whisper` command-line tool from the openai-whisper package"""

    name = "local"

    def __init__(self, model: str = "base", executable: str = "whisper"):
        self.model = model
        self.executable = executable

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    async def transcribe(self, audio: bytes, language: str) -> str:
        if not self.is_available():
            raise TranscriptionException(
                "Whisper CLI not available. Install with: pip install openai-whisper"
            )

        with tempfile.TemporaryDirectory(prefix="stt_") as tmp:
            audio_file = Path(tmp) / "audio.webm"
            audio_file.write_bytes(audio)

            process = await asyncio.create_subprocess_exec(
                self.executable,
                str(audio_file),
                "--model", self.model,
                "--language", whisper_language(language),
                "--output_format", "json",
                "--output_dir", tmp,
                "--no_speech_threshold", "0.6",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
            _, stderr = await process.communicate()

            if process.returncode != 0:
                raise TranscriptionException(
                    f"Whisper failed (code {process.returncode}): {stderr.decode(errors='replace')}"
                )

            json_file = audio_file.with_suffix(".json")
            if not json_file.exists():
                return ""
            try:
                return json.loads(json_file.read_text(encoding="utf-8")).get("text", "")
            except ValueError as e:
                raise TranscriptionException(f"Unreadable Whisper output: {e}") from e
