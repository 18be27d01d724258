"""Heading-aware chunking of journal documents"""

from typing import List, Optional
import re
import logging

from journal_ai.schemas.chunk import ChunkDocument

logger = logging.getLogger(__name__)

DEFAULT_WORD_LIMIT = 150
HEADING_PREFIX = "#"
_HEADING_MARKER = re.compile(r"^#+\s*")


def heading_text(line: str) -> str:
    """Strip the leading '#' run and the whitespace after it"""
    return _HEADING_MARKER.sub("", line, count=1)


def count_words(text: str) -> int:
    """Word count used for the chunk size threshold (split on single spaces)"""
    return len(text.split(" "))


def count_tokens(text: str) -> int:
    """Approximate token count: whitespace-delimited words"""
    return len(text.split())


def chunk_document(
    content: str,
    path: str,
    date: str,
    word_limit: Optional[int] = None
) -> List[ChunkDocument]:
    """
    Split a document into heading-aware chunks

    Lines are scanned in order and accumulated into a buffer. A heading line
    closes the current chunk and opens the next one, and a buffer whose word
    count passes ``word_limit`` is closed regardless of headings. Every input
    line ends up in exactly one chunk, in document order.

    Args:
        content: Raw document text
        path: Document path, used as the chunk id prefix
        date: ISO date of the document
        word_limit: Words per chunk before a forced split (default 150)

    Returns:
        Chunks in document order
    """
    word_limit = word_limit or DEFAULT_WORD_LIMIT

    chunks: List[ChunkDocument] = []
    buffer = ""
    heading = ""

    def flush() -> None:
        chunks.append(ChunkDocument(
            id=f"{path}-{len(chunks)}",
            path=path,
            heading=heading,
            text=buffer.strip(),
            date=date
        ))

    for line in content.split("\n"):
        if line.startswith(HEADING_PREFIX):
            # Whitespace-only buffers roll over into the next chunk
            if buffer.strip():
                flush()
                buffer = ""
            heading = heading_text(line)

        buffer += line + "\n"

        if count_words(buffer) > word_limit and buffer.strip():
            flush()
            buffer = ""

    if buffer.strip():
        flush()

    logger.debug(f"Split {path} into {len(chunks)} chunks (word limit: {word_limit})")
    return chunks
