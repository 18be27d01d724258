"""RAG system configuration"""

from dataclasses import dataclass
from typing import Optional

from journal_ai.config import Settings, settings as app_settings
from journal_ai.schemas.settings import JournalSettings


@dataclass
class RAGConfig:
    """Configuration for the retrieval core and chat layer"""

    # Embedding provider selection: "openai", "gemini", "local" or "" (auto)
    embedding_provider: str = ""
    openai_api_key: str = ""
    google_api_key: str = ""
    anthropic_api_key: str = ""
    xai_api_key: str = ""
    embedding_model: str = "text-embedding-3-small"
    gemini_embedding_model: str = "models/text-embedding-004"
    # Local fallback and OpenAI text-embedding-3-small: 1536
    vector_size: int = 1536

    # Chunking / retrieval
    chunk_word_limit: int = 150
    candidate_limit: int = 100
    recency_decay: float = 0.1
    top_k: int = 5
    recency_boost: float = 0.2
    skip_mismatched_dimensions: bool = False

    # Chat
    llm_backend: str = "openai"
    llm_model: str = "gpt-4o-mini"
    temperature: float = 0.7
    top_p: float = 0.9
    max_tokens: int = 1000
    tone: str = "supportive, non-judgmental, specific, action-oriented"

    # Redis cache
    enable_cache: bool = False
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # 1 hour

    @classmethod
    def from_settings(
        cls,
        journal_settings: Optional[JournalSettings] = None,
        settings: Optional[Settings] = None
    ) -> "RAGConfig":
        """
        Build config from environment settings, overlaid with vault settings

        The vault's api_key and embedding_model take precedence over the
        environment, and a vault without an embedding model uses the local
        fallback unless EMBEDDING_PROVIDER says otherwise.
        """
        settings = settings or app_settings
        config = cls(
            embedding_provider=settings.EMBEDDING_PROVIDER.lower(),
            openai_api_key=settings.OPENAI_API_KEY,
            google_api_key=settings.GOOGLE_API_KEY,
            anthropic_api_key=settings.ANTHROPIC_API_KEY,
            xai_api_key=settings.XAI_API_KEY,
            embedding_model=settings.OPENAI_EMBEDDING_MODEL,
            gemini_embedding_model=settings.GEMINI_EMBEDDING_MODEL,
            chunk_word_limit=settings.RAG_CHUNK_WORD_LIMIT,
            candidate_limit=settings.RAG_CANDIDATE_LIMIT,
            recency_decay=settings.RAG_RECENCY_DECAY,
            top_k=settings.RAG_TOP_K,
            recency_boost=settings.RAG_RECENCY_BOOST,
            skip_mismatched_dimensions=settings.RAG_SKIP_MISMATCHED_DIMENSIONS,
            enable_cache=settings.RAG_ENABLE_CACHE,
            redis_url=settings.REDIS_URL,
            cache_ttl=settings.CACHE_TTL,
        )

        if journal_settings is None:
            return config

        config.llm_backend = journal_settings.llm_backend
        config.llm_model = journal_settings.model
        config.temperature = journal_settings.temperature
        config.top_p = journal_settings.top_p
        config.max_tokens = journal_settings.max_tokens
        config.tone = journal_settings.tone
        config.top_k = journal_settings.retriever.k
        config.recency_boost = journal_settings.retriever.recency_boost

        if journal_settings.api_key:
            # One key per vault, interpreted by the selected backend
            if journal_settings.llm_backend == "anthropic":
                config.anthropic_api_key = journal_settings.api_key
            elif journal_settings.llm_backend == "grok":
                config.xai_api_key = journal_settings.api_key
            elif journal_settings.llm_backend == "gemini":
                config.google_api_key = journal_settings.api_key
            else:
                config.openai_api_key = journal_settings.api_key

        if journal_settings.embedding_model:
            config.embedding_model = journal_settings.embedding_model
        elif not config.embedding_provider:
            config.embedding_provider = "local"

        return config
