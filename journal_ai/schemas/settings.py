"""Per-vault user settings schema"""

from pydantic import BaseModel, Field
from typing import Optional, Literal


class RetrieverSettings(BaseModel):
    """Retrieval knobs exposed to the user"""
    k: int = Field(default=5, ge=0)
    recency_boost: float = Field(default=0.2, ge=0)


class JournalSettings(BaseModel):
    """Settings stored in {vault}/config/settings.json"""
    model: str = "gpt-4o-mini"
    temperature: float = 0.7
    top_p: float = 0.9
    max_tokens: int = 1000
    retriever: RetrieverSettings = Field(default_factory=RetrieverSettings)
    tone: str = "supportive, non-judgmental, specific, action-oriented"
    vault_path: str = "~/JournalAI"
    stt_engine: Literal["local", "browser", "openai"] = "browser"
    stt_language: str = "en-US"
    llm_backend: Literal["openai", "anthropic", "grok", "gemini"] = "openai"
    api_key: Optional[str] = None
    embedding_model: Optional[str] = "text-embedding-3-small"
