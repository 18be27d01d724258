"""LLM response generators"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Dict, Optional
from openai import AsyncOpenAI
import tiktoken
import logging

from journal_ai.exceptions import LLMException

logger = logging.getLogger(__name__)

GROK_BASE_URL = "https://api.x.ai/v1"


@dataclass
class GenerationResult:
    """Text returned by a backend plus total token usage"""
    text: str
    tokens: int = 0


class BaseGenerator(ABC):
    """Chat completion backend"""

    name: str = "generator"
    default_model: str = ""

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: float = 0.7,
        top_p: float = 0.9,
        max_tokens: int = 1000
    ):
        self.model = model or self.default_model
        self.temperature = temperature
        self.top_p = top_p
        self.max_tokens = max_tokens

    @abstractmethod
    async def generate_async(self, messages: List[Dict[str, str]]) -> GenerationResult:
        """
        Generate a reply

        Args:
            messages: OpenAI-style messages; the first may be the system prompt

        Returns:
            GenerationResult
        """


class OpenAIGenerator(BaseGenerator):
    """OpenAI chat completions"""

    name = "openai"
    default_model = "gpt-4o-mini"

    def __init__(self, api_key: str, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.async_client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._encoding = None

    @property
    def encoding(self):
        """Token encoder, loaded on first use"""
        if self._encoding is None:
            try:
                self._encoding = tiktoken.encoding_for_model(self.model)
            except KeyError:
                self._encoding = tiktoken.get_encoding("cl100k_base")
        return self._encoding

    def count_tokens(self, text: str) -> int:
        """Count tokens in text"""
        try:
            return len(self.encoding.encode(text))
        except Exception as e:
            logger.warning(f"Error counting tokens: {e}")
            # Rough estimate: 1 token ≈ 4 characters
            return len(text) // 4

    def count_messages_tokens(self, messages: List[Dict[str, str]]) -> int:
        """Count tokens in message list"""
        total = 0
        for message in messages:
            # Each message has overhead (role, content, etc.)
            total += 4
            for value in message.values():
                total += self.count_tokens(str(value))
        total += 2  # Overhead for entire request
        return total

    async def generate_async(self, messages: List[Dict[str, str]]) -> GenerationResult:
        input_tokens = self.count_messages_tokens(messages)
        logger.info(f"Generating {self.name} response with {input_tokens} input tokens")

        try:
            response = await self.async_client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                top_p=self.top_p,
                max_tokens=self.max_tokens
            )
        except Exception as e:
            logger.error(f"Error generating {self.name} response: {e}")
            raise LLMException(str(e)) from e

        text = response.choices[0].message.content or ""
        usage = response.usage
        total_tokens = usage.total_tokens if usage else input_tokens + self.count_tokens(text)

        logger.info(f"Generated response: {len(text)} chars, {total_tokens} total tokens")
        return GenerationResult(text=text, tokens=total_tokens)


class GrokGenerator(OpenAIGenerator):
    """xAI Grok through its OpenAI-compatible API"""

    name = "grok"
    default_model = "grok-beta"

    def __init__(self, api_key: str, **kwargs):
        super().__init__(api_key=api_key, base_url=GROK_BASE_URL, **kwargs)
