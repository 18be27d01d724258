"""Scoring functions for retrieval"""

from datetime import date, datetime, timezone
from typing import Optional, Sequence
import math

SECONDS_PER_DAY = 60 * 60 * 24
DEFAULT_RECENCY_DECAY = 0.1


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors

    Vectors of different lengths (embeddings from different models) are
    both truncated to the shorter length. A zero-norm or empty vector
    scores 0.0 so that NaN never reaches a sort.
    """
    length = min(len(a), len(b))

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for i in range(length):
        x = a[i]
        y = b[i]
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    denominator = math.sqrt(norm_a) * math.sqrt(norm_b)
    if denominator == 0 or not math.isfinite(denominator):
        return 0.0

    similarity = dot / denominator
    return similarity if math.isfinite(similarity) else 0.0


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO date or datetime string as UTC, or None if unparseable"""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(value[:10]), datetime.min.time())
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_since(value: Optional[str], now: datetime) -> Optional[int]:
    """Whole days elapsed between a date string and now (never negative)"""
    parsed = parse_date(value)
    if parsed is None:
        return None
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed = (now - parsed).total_seconds() / SECONDS_PER_DAY
    return max(0, math.floor(elapsed))


def recency_score(
    chunk_date: Optional[str],
    now: datetime,
    recency_boost: float,
    decay: float = DEFAULT_RECENCY_DECAY
) -> float:
    """exp(-days * decay) * recency_boost; 0.0 when the date is unknown"""
    days = days_since(chunk_date, now)
    if days is None:
        return 0.0
    return math.exp(-days * decay) * recency_boost
