"""Pytest configuration and fixtures"""

from typing import Dict, List

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from journal_ai.api.deps import get_generator_factory, get_rag_opener, get_vault
from journal_ai.main import app
from journal_ai.rag.config import RAGConfig
from journal_ai.rag.embeddings import EmbeddingProvider, EmbeddingsService
from journal_ai.rag.generator import BaseGenerator, GenerationResult
from journal_ai.rag.system import JournalRAG
from journal_ai.services.vault import VaultManager

KEYWORDS = ["productive", "tired", "sleep", "work"]


class KeywordEmbeddingProvider(EmbeddingProvider):
    """One slot per keyword; 1.0 when the keyword appears in the text"""

    name = "keyword"

    def __init__(self, keywords: List[str] = None):
        super().__init__("keyword-test")
        self.keywords = keywords or KEYWORDS
        self.calls = 0

    async def embed(self, text: str) -> List[float]:
        self.calls += 1
        lowered = text.lower()
        return [1.0 if keyword in lowered else 0.0 for keyword in self.keywords]


class FailingEmbeddingProvider(EmbeddingProvider):
    name = "failing"

    def __init__(self):
        super().__init__("failing-test")

    async def embed(self, text: str) -> List[float]:
        raise RuntimeError("provider unavailable")


class FakeGenerator(BaseGenerator):
    """Records prompts and answers with a fixed reply"""

    name = "fake"

    def __init__(self, reply: str = "Sounds like a productive evening.", **kwargs):
        super().__init__(**kwargs)
        self.reply = reply
        self.calls: List[List[Dict[str, str]]] = []

    async def generate_async(self, messages: List[Dict[str, str]]) -> GenerationResult:
        self.calls.append(messages)
        return GenerationResult(text=self.reply, tokens=42)


def keyword_embeddings() -> EmbeddingsService:
    return EmbeddingsService(provider=KeywordEmbeddingProvider())


@pytest.fixture(scope="function")
def vault(tmp_path):
    """Empty vault in a temporary directory"""
    manager = VaultManager(tmp_path / "vault")
    manager.initialize()
    return manager


@pytest_asyncio.fixture
async def rag(tmp_path):
    """JournalRAG over a temporary store with keyword embeddings"""
    instance = await JournalRAG.open(tmp_path / "rag", RAGConfig(), embeddings=keyword_embeddings())
    async with instance:
        yield instance


@pytest.fixture(scope="function")
def generator():
    return FakeGenerator()


@pytest.fixture(scope="function")
def client(vault, generator):
    """Test client fixture"""
    async def open_test_rag(vault_manager, journal_settings=None):
        return await JournalRAG.open(
            vault_manager.vault_path,
            RAGConfig.from_settings(journal_settings),
            embeddings=keyword_embeddings()
        )

    app.dependency_overrides[get_vault] = lambda: vault
    app.dependency_overrides[get_rag_opener] = lambda: open_test_rag
    app.dependency_overrides[get_generator_factory] = lambda: (lambda config: generator)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
