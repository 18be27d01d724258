"""Google Gemini chat generator"""

from typing import List, Dict, Optional, Tuple
import google.generativeai as genai
import logging

from journal_ai.exceptions import LLMException
from journal_ai.rag.generator import BaseGenerator, GenerationResult

logger = logging.getLogger(__name__)

# Gemini calls the assistant "model"
GEMINI_ROLES = {"user": "user", "assistant": "model"}


def to_gemini_contents(messages: List[Dict[str, str]]) -> Tuple[Optional[str], List[dict]]:
    """
    Split OpenAI-style messages into (system instruction, Gemini contents)

    The system prompt is passed to the model constructor rather than sent as a turn.
    """
    system_prompt = None
    contents = []
    for message in messages:
        role = message.get("role", "user")
        if role == "system":
            system_prompt = message.get("content", "")
        elif role in GEMINI_ROLES:
            contents.append({"role": GEMINI_ROLES[role], "parts": [message.get("content", "")]})
    return system_prompt, contents


class GeminiGenerator(BaseGenerator):
    """Gemini generate_content backend"""

    name = "gemini"
    default_model = "gemini-1.5-flash"

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        genai.configure(api_key=api_key)

    async def generate_async(self, messages: List[Dict[str, str]]) -> GenerationResult:
        system_prompt, contents = to_gemini_contents(messages)
        logger.info(f"Generating gemini response for {len(contents)} turns")

        gemini_model = genai.GenerativeModel(
            model_name=self.model,
            system_instruction=system_prompt,
            generation_config=genai.GenerationConfig(
                temperature=self.temperature,
                top_p=self.top_p,
                max_output_tokens=self.max_tokens,
            ),
        )

        try:
            response = await gemini_model.generate_content_async(contents)
            text = response.text
        except Exception as e:
            logger.error(f"Error generating gemini response: {e}")
            raise LLMException(str(e)) from e

        usage = getattr(response, "usage_metadata", None)
        tokens = usage.total_token_count if usage else 0
        logger.info(f"Generated response: {len(text)} chars, {tokens} total tokens")
        return GenerationResult(text=text, tokens=tokens)
