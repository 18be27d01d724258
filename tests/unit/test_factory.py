"""Test provider selection and configuration"""

import pytest

from journal_ai.config import Settings
from journal_ai.exceptions import ConfigurationException
from journal_ai.rag.config import RAGConfig
from journal_ai.rag.embeddings import OpenAIEmbeddingProvider
from journal_ai.rag.factory import create_embedding_provider, create_embeddings_service, create_generator
from journal_ai.rag.generator import GROK_BASE_URL, GrokGenerator, OpenAIGenerator
from journal_ai.rag.generator_anthropic import AnthropicGenerator
from journal_ai.schemas.settings import JournalSettings, RetrieverSettings


def test_unknown_llm_backend_raises():
    with pytest.raises(ConfigurationException):
        create_generator(RAGConfig(llm_backend="eliza"))


def test_unknown_embedding_provider_raises():
    with pytest.raises(ConfigurationException):
        create_embedding_provider(RAGConfig(embedding_provider="word2vec"))


def test_local_provider_means_fallback_only():
    assert create_embedding_provider(RAGConfig(embedding_provider="local")) is None
    assert create_embeddings_service(RAGConfig(embedding_provider="local")).model == "simple"


def test_openai_provider_without_key_falls_back():
    assert create_embedding_provider(RAGConfig(embedding_provider="openai", openai_api_key="")) is None


def test_blank_provider_uses_openai_when_keyed():
    provider = create_embedding_provider(RAGConfig(openai_api_key="sk-test", embedding_model="text-embedding-3-large"))

    assert isinstance(provider, OpenAIEmbeddingProvider)
    assert provider.model == "text-embedding-3-large"


def test_cache_only_wraps_real_providers():
    service = create_embeddings_service(RAGConfig(embedding_provider="local", enable_cache=True))
    assert service.cache is None


def test_generators_by_backend():
    openai = create_generator(RAGConfig(llm_backend="openai", openai_api_key="sk-test", llm_model="gpt-4o"))
    grok = create_generator(RAGConfig(llm_backend="grok", xai_api_key="xai-test", llm_model="grok-2"))
    claude = create_generator(RAGConfig(llm_backend="anthropic", anthropic_api_key="sk-ant", llm_model="claude-3-haiku-20240307"))

    assert type(openai) is OpenAIGenerator
    assert openai.model == "gpt-4o"
    assert isinstance(grok, GrokGenerator)
    assert str(grok.async_client.base_url).startswith(GROK_BASE_URL)
    assert isinstance(claude, AnthropicGenerator)
    assert claude.max_tokens == 1000


def test_anthropic_system_prompt_is_split_out():
    system, conversation = AnthropicGenerator._split_system([
        {"role": "system", "content": "be kind"},
        {"role": "user", "content": "hi"},
    ])

    assert system == "be kind"
    assert conversation == [{"role": "user", "content": "hi"}]


def test_config_from_environment_settings():
    env = Settings(RAG_TOP_K=7, RAG_CHUNK_WORD_LIMIT=80, EMBEDDING_PROVIDER="Gemini", GOOGLE_API_KEY="g")

    config = RAGConfig.from_settings(settings=env)

    assert config.top_k == 7
    assert config.chunk_word_limit == 80
    assert config.embedding_provider == "gemini"
    assert config.google_api_key == "g"


def test_vault_settings_override_environment():
    env = Settings(OPENAI_API_KEY="env-key", EMBEDDING_PROVIDER="")
    journal_settings = JournalSettings(
        llm_backend="anthropic",
        api_key="vault-key",
        model="claude-3-haiku-20240307",
        retriever=RetrieverSettings(k=3, recency_boost=0.5),
    )

    config = RAGConfig.from_settings(journal_settings, settings=env)

    assert config.anthropic_api_key == "vault-key"
    assert config.openai_api_key == "env-key"
    assert config.llm_model == "claude-3-haiku-20240307"
    assert config.top_k == 3
    assert config.recency_boost == 0.5
    assert config.embedding_provider == ""


def test_vault_without_embedding_model_uses_local():
    env = Settings(OPENAI_API_KEY="env-key", EMBEDDING_PROVIDER="")

    config = RAGConfig.from_settings(JournalSettings(embedding_model=None), settings=env)

    assert config.embedding_provider == "local"
    assert create_embedding_provider(config) is None


def test_timing_settings_are_bounded():
    with pytest.raises(ValueError):
        Settings(DICTATION_SILENCE_TIMEOUT=2)


def test_gemini_contents_use_model_role():
    from journal_ai.rag.generator_gemini import to_gemini_contents

    system, contents = to_gemini_contents([
        {"role": "system", "content": "context"},
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello"},
    ])

    assert system == "context"
    assert contents == [
        {"role": "user", "parts": ["hi"]},
        {"role": "model", "parts": ["hello"]},
    ]
