"""Journal chat endpoint"""

from fastapi import APIRouter, Depends
from typing import Callable
import logging

from journal_ai.api.deps import get_generator_factory, get_rag_opener, get_vault
from journal_ai.rag.chain import JournalChat
from journal_ai.rag.config import RAGConfig
from journal_ai.schemas.chat import ChatRequest, ChatResponse
from journal_ai.services.vault import VaultManager

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/llm", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(
    request: ChatRequest,
    vault: VaultManager = Depends(get_vault),
    open_rag: Callable = Depends(get_rag_opener),
    generator_factory: Callable = Depends(get_generator_factory)
):
    """
    Answer the latest message using context retrieved from the journal

    Uses the settings sent with the request, or the vault's saved settings.
    """
    journal_settings = request.settings or vault.load_settings()
    config = RAGConfig.from_settings(journal_settings)
    generator = generator_factory(config)

    messages = [{"role": m.role, "content": m.content} for m in request.messages]

    async with await open_rag(vault, journal_settings) as rag:
        result = await JournalChat(rag, generator, config).respond(messages)

    return ChatResponse(
        content=result.content,
        citations=result.citations or None
    )
