"""Chat pipeline: retrieve journal context, then generate"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional
import time
import logging

from journal_ai.exceptions import LLMException
from journal_ai.rag.config import RAGConfig
from journal_ai.rag.generator import BaseGenerator
from journal_ai.rag.prompt_templates import build_messages, format_context
from journal_ai.rag.system import JournalRAG

logger = logging.getLogger(__name__)


@dataclass
class ChatResult:
    """Assistant reply with journal citations"""
    content: str
    citations: List[str] = field(default_factory=list)
    tokens: int = 0
    retrieval_time_ms: int = 0
    generation_time_ms: int = 0


class JournalChat:
    """Retrieval-augmented chat over a journal"""

    def __init__(self, rag: JournalRAG, generator: BaseGenerator, config: Optional[RAGConfig] = None):
        self.rag = rag
        self.generator = generator
        self.config = config or rag.config

    @staticmethod
    def _latest_user_message(messages: List[Dict[str, str]]) -> str:
        for message in reversed(messages):
            if message["role"] == "user":
                return " ".join(message["content"].split())
        return ""

    async def respond(self, messages: List[Dict[str, str]]) -> ChatResult:
        """
        Answer the latest user message

        Args:
            messages: Conversation as role/content dicts, oldest first

        Returns:
            ChatResult

        Raises:
            LLMException: generation failed
            StorageException: journal search failed
        """
        start_time = time.time()
        query = self._latest_user_message(messages)
        if not query:
            raise LLMException("No user message to respond to")

        # Step 1: Retrieve journal context
        chunks = await self.rag.search(query, self.config.top_k, self.config.recency_boost)
        retrieval_time = time.time() - start_time
        logger.info(f"Retrieved {len(chunks)} journal chunks in {retrieval_time:.2f}s")

        # Step 2: Build messages
        context, citations = format_context(chunks)
        llm_messages = build_messages(messages, self.config.tone, context)

        # Step 3: Generate
        generation_start = time.time()
        result = await self.generator.generate_async(llm_messages)
        generation_time = time.time() - generation_start

        logger.info(
            f"Chat complete: {int((time.time() - start_time) * 1000)}ms, "
            f"{result.tokens} tokens, {len(citations)} citations"
        )

        return ChatResult(
            content=result.text,
            citations=citations,
            tokens=result.tokens,
            retrieval_time_ms=int(retrieval_time * 1000),
            generation_time_ms=int(generation_time * 1000)
        )
