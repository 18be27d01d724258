"""Shared FastAPI dependencies"""

from typing import Callable, Optional
from fastapi import Query, Request

from journal_ai.config import settings
from journal_ai.rag.factory import create_generator
from journal_ai.services.journal_service import open_rag
from journal_ai.services.stt_sessions import STTService
from journal_ai.services.vault import VaultManager


def get_vault(vault: Optional[str] = Query(None, description="Vault path override")) -> VaultManager:
    """Vault for this request (VAULT_PATH unless overridden)"""
    manager = VaultManager(vault or settings.vault_dir)
    manager.initialize()
    return manager


def get_rag_opener() -> Callable:
    """Coroutine function opening a JournalRAG for (vault, settings)"""
    return open_rag


def get_generator_factory() -> Callable:
    """Callable building a generator from a RAGConfig"""
    return create_generator


def get_stt_service(request: Request) -> STTService:
    return request.app.state.stt_service
