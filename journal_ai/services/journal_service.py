"""Glue between the vault and the retrieval core"""

from pathlib import Path
from typing import Optional
import hashlib
import logging

from journal_ai.rag.config import RAGConfig
from journal_ai.rag.system import JournalRAG
from journal_ai.schemas.chunk import DocumentMetadata
from journal_ai.schemas.settings import JournalSettings
from journal_ai.services.vault import VaultManager

logger = logging.getLogger(__name__)


def content_hash(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


async def open_rag(vault: VaultManager, journal_settings: Optional[JournalSettings] = None) -> JournalRAG:
    """Open the vault's retrieval core configured from its settings"""
    return await JournalRAG.open(vault.vault_path, RAGConfig.from_settings(journal_settings))


async def index_session_file(rag: JournalRAG, vault: VaultManager, filepath: Path) -> bool:
    """
    Index a session file's full body

    Returns:
        False when the file has disappeared
    """
    session = vault.read_session_file(filepath)
    if session is None:
        logger.warning(f"Session file vanished before indexing: {filepath}")
        return False

    title = session.data.get("title")
    await rag.index_document(
        str(filepath),
        session.content,
        DocumentMetadata(
            date=session.date,
            title=str(title) if title else None,
            hash=content_hash(session.content)
        )
    )
    return True
