"""Anthropic Claude generator"""

from typing import List, Dict, Optional, Tuple
from anthropic import AsyncAnthropic
import logging

from journal_ai.exceptions import LLMException
from journal_ai.rag.generator import BaseGenerator, GenerationResult

logger = logging.getLogger(__name__)


class AnthropicGenerator(BaseGenerator):
    """Claude messages API"""

    name = "anthropic"
    default_model = "claude-3-5-sonnet-20241022"

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        self.async_client = AsyncAnthropic(api_key=api_key)

    @staticmethod
    def _split_system(messages: List[Dict[str, str]]) -> Tuple[Optional[str], List[Dict[str, str]]]:
        """The system prompt is a separate parameter, not a message"""
        system = None
        conversation = []
        for msg in messages:
            if msg.get("role") == "system":
                system = msg.get("content", "")
            else:
                conversation.append({"role": msg["role"], "content": msg["content"]})
        return system, conversation

    async def generate_async(self, messages: List[Dict[str, str]]) -> GenerationResult:
        system, conversation = self._split_system(messages)
        logger.info(f"Generating anthropic response for {len(conversation)} messages")

        request = {
            "model": self.model,
            "messages": conversation,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "max_tokens": self.max_tokens or 1000,
        }
        if system:
            request["system"] = system

        try:
            response = await self.async_client.messages.create(**request)
        except Exception as e:
            logger.error(f"Error generating anthropic response: {e}")
            raise LLMException(str(e)) from e

        text = ""
        if response.content and response.content[0].type == "text":
            text = response.content[0].text

        usage = response.usage
        tokens = (usage.input_tokens + usage.output_tokens) if usage else 0
        logger.info(f"Generated response: {len(text)} chars, {tokens} total tokens")
        return GenerationResult(text=text, tokens=tokens)
