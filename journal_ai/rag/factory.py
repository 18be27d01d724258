"""Factory for embedding providers and LLM generators"""

from typing import Callable, Dict, Optional
import logging

from journal_ai.exceptions import ConfigurationException
from journal_ai.rag.config import RAGConfig
from journal_ai.rag.embeddings import EmbeddingCache, EmbeddingProvider, EmbeddingsService, OpenAIEmbeddingProvider
from journal_ai.rag.generator import BaseGenerator, GrokGenerator, OpenAIGenerator

logger = logging.getLogger(__name__)


def _openai_embeddings(config: RAGConfig) -> Optional[EmbeddingProvider]:
    if not config.openai_api_key:
        return None
    return OpenAIEmbeddingProvider(api_key=config.openai_api_key, model=config.embedding_model)


def _gemini_embeddings(config: RAGConfig) -> Optional[EmbeddingProvider]:
    if not config.google_api_key:
        return None
    from journal_ai.rag.embeddings_gemini import GeminiEmbeddingProvider
    return GeminiEmbeddingProvider(api_key=config.google_api_key, model=config.gemini_embedding_model)


EMBEDDING_PROVIDERS: Dict[str, Callable[[RAGConfig], Optional[EmbeddingProvider]]] = {
    "openai": _openai_embeddings,
    "gemini": _gemini_embeddings,
    "local": lambda config: None,
}


def _openai_generator(config: RAGConfig, **kwargs) -> BaseGenerator:
    return OpenAIGenerator(api_key=config.openai_api_key, **kwargs)


def _grok_generator(config: RAGConfig, **kwargs) -> BaseGenerator:
    return GrokGenerator(api_key=config.xai_api_key, **kwargs)


def _anthropic_generator(config: RAGConfig, **kwargs) -> BaseGenerator:
    from journal_ai.rag.generator_anthropic import AnthropicGenerator
    return AnthropicGenerator(api_key=config.anthropic_api_key, **kwargs)


def _gemini_generator(config: RAGConfig, **kwargs) -> BaseGenerator:
    from journal_ai.rag.generator_gemini import GeminiGenerator
    return GeminiGenerator(api_key=config.google_api_key, **kwargs)


GENERATORS: Dict[str, Callable[..., BaseGenerator]] = {
    "openai": _openai_generator,
    "anthropic": _anthropic_generator,
    "grok": _grok_generator,
    "gemini": _gemini_generator,
}


def create_embedding_provider(config: RAGConfig) -> Optional[EmbeddingProvider]:
    """
    Build the embedding provider named by the config

    An empty provider name means OpenAI when a key is configured. Returns
    None when embeddings should come from the local fallback only.
    """
    provider = (config.embedding_provider or "openai").lower()
    builder = EMBEDDING_PROVIDERS.get(provider)
    if builder is None:
        raise ConfigurationException(f"Unknown embedding provider: {provider}")

    instance = builder(config)
    if instance is None:
        logger.info("Using local fallback embeddings")
    else:
        logger.info(f"Using {instance.name} embeddings ({instance.model})")
    return instance


def create_embeddings_service(config: RAGConfig) -> EmbeddingsService:
    """Embeddings service with the configured provider and optional cache"""
    provider = create_embedding_provider(config)

    cache = None
    if config.enable_cache and provider is not None:
        cache = EmbeddingCache(config.redis_url, ttl=config.cache_ttl)
        logger.info("Redis cache enabled for embeddings")

    return EmbeddingsService(provider=provider, cache=cache, dimensions=config.vector_size)


def create_generator(config: RAGConfig) -> BaseGenerator:
    """Build the chat generator for config.llm_backend"""
    backend = config.llm_backend.lower()
    builder = GENERATORS.get(backend)
    if builder is None:
        raise ConfigurationException(f"Invalid LLM backend configuration: {backend}")

    logger.info(f"Loading {backend} generator ({config.llm_model})")
    return builder(
        config,
        model=config.llm_model,
        temperature=config.temperature,
        top_p=config.top_p,
        max_tokens=config.max_tokens
    )
