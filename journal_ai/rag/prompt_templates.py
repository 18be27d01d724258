"""Prompt templates for the journal assistant"""

from typing import List, Dict, Tuple

from journal_ai.schemas.chunk import ChunkDocument


SYSTEM_PROMPT = """You are a thoughtful journaling companion. You help the user reflect on what they have written, notice patterns across entries, and turn problems into small, concrete next steps.

Tone: {tone}.

Guidelines:
- Ground observations in the user's own journal when context is provided, and mention the date you are drawing on
- Never invent entries, dates, or events that are not in the context
- Separate what the user can control from what they cannot
- Keep responses focused; end with at most one question or one suggested action
- If nothing relevant was found in the journal, say so briefly and respond to the message itself"""


CONTEXT_HEADER = "\n\nRelevant context from your journal:\n"


def citation_label(chunk: ChunkDocument) -> str:
    """'{date} - {heading}' label used in prompts and citations"""
    return f"{chunk.date} - {chunk.heading}"


def format_context(chunks: List[ChunkDocument]) -> Tuple[str, List[str]]:
    """
    Format retrieved chunks into a context block and citation list

    Args:
        chunks: Retrieved chunks, best first

    Returns:
        (context string, citations); both empty when nothing was retrieved
    """
    if not chunks:
        return "", []

    context = CONTEXT_HEADER
    citations = []
    for chunk in chunks:
        label = citation_label(chunk)
        context += f"\n[{label}]:\n{chunk.text}\n"
        citations.append(label)

    return context, citations


def build_system_message(tone: str, context: str) -> str:
    """Build system message with tone and journal context"""
    return SYSTEM_PROMPT.format(tone=tone) + context


def build_messages(
    conversation: List[Dict[str, str]],
    tone: str,
    context: str
) -> List[Dict[str, str]]:
    """
    Build message list for LLM

    Args:
        conversation: Prior turns plus the latest user message
        tone: Tone description from settings
        context: Formatted journal context (may be empty)

    Returns:
        List of message dicts for LLM API
    """
    messages = [{"role": "system", "content": build_system_message(tone, context)}]
    messages.extend(
        {"role": message["role"], "content": message["content"]}
        for message in conversation
    )
    return messages
