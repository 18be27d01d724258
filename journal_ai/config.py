"""Application configuration"""

from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field
from functools import lru_cache
from pathlib import Path

# Get the project directory (parent of journal_ai directory)
PROJECT_DIR = Path(__file__).parent.parent
ENV_FILE = PROJECT_DIR / ".env"


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Journal AI"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Vault
    VAULT_PATH: str = "~/JournalAI"

    # Provider credentials (the vault settings api_key overrides OPENAI_API_KEY)
    OPENAI_API_KEY: str = ""
    GOOGLE_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    XAI_API_KEY: str = ""

    # Embeddings
    EMBEDDING_PROVIDER: str = ""  # "openai", "gemini", "local" or blank for auto
    OPENAI_EMBEDDING_MODEL: str = "text-embedding-3-small"
    GEMINI_EMBEDDING_MODEL: str = "models/text-embedding-004"

    # Retrieval
    RAG_CHUNK_WORD_LIMIT: int = 150
    RAG_CANDIDATE_LIMIT: int = 100
    RAG_RECENCY_DECAY: float = 0.1
    RAG_TOP_K: int = 5
    RAG_RECENCY_BOOST: float = 0.2
    RAG_SKIP_MISMATCHED_DIMENSIONS: bool = False

    # Embedding cache
    RAG_ENABLE_CACHE: bool = False
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL: int = 3600

    # Dictation
    STT_SESSION_TTL_SECONDS: int = 300
    STT_SWEEP_INTERVAL_SECONDS: int = 300
    STT_MIN_AUDIO_BYTES: int = 1000
    WHISPER_MODEL: str = "whisper-1"
    LOCAL_WHISPER_MODEL: str = "base"

    # Timing (seconds); bounds keep dictation costs and accidental stops in check
    DICTATION_SILENCE_TIMEOUT: int = Field(default=10, ge=5, le=60)
    PAGE_LEAVE_TIMEOUT: int = Field(default=5, ge=1, le=30)
    TYPING_INACTIVITY_TIMEOUT: int = Field(default=120, ge=30, le=600)

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"  # Ignore extra fields in .env
    )

    @property
    def vault_dir(self) -> Path:
        """Vault path with the home directory expanded"""
        return Path(self.VAULT_PATH).expanduser()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
