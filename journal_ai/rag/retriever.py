"""Similarity + recency retriever"""

from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple
import logging

from journal_ai.rag.embeddings import EmbeddingsService
from journal_ai.rag.similarity import DEFAULT_RECENCY_DECAY, cosine_similarity, recency_score
from journal_ai.rag.store import Candidate, JournalStore
from journal_ai.schemas.chunk import ChunkDocument

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATE_LIMIT = 100


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Retriever:
    """Ranks stored chunks by cosine similarity plus a recency bonus"""

    def __init__(
        self,
        embeddings: EmbeddingsService,
        store: JournalStore,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
        recency_decay: float = DEFAULT_RECENCY_DECAY,
        skip_mismatched_dimensions: bool = False,
        clock: Callable[[], datetime] = utcnow
    ):
        self.embeddings = embeddings
        self.store = store
        self.candidate_limit = candidate_limit
        self.recency_decay = recency_decay
        self.skip_mismatched_dimensions = skip_mismatched_dimensions
        self.clock = clock

    def score_candidates(
        self,
        query_vector: List[float],
        candidates: List[Candidate],
        recency_boost: float,
        now: Optional[datetime] = None
    ) -> List[Tuple[float, Candidate]]:
        """
        Score candidates and sort them best first

        Args:
            query_vector: Embedded query
            candidates: Stored chunks to rank
            recency_boost: Weight of the recency term
            now: Reference time for recency (default: clock)

        Returns:
            (score, candidate) pairs sorted by score descending
        """
        now = now or self.clock()
        scored = []

        for candidate in candidates:
            if self.skip_mismatched_dimensions and len(candidate.embedding) != len(query_vector):
                logger.debug(
                    f"Skipping {candidate.id}: {len(candidate.embedding)} dims "
                    f"({candidate.model}) vs query {len(query_vector)}"
                )
                continue

            similarity = cosine_similarity(query_vector, candidate.embedding)
            recency = recency_score(candidate.date, now, recency_boost, self.recency_decay)
            scored.append((similarity + recency, candidate))

        # sorted() is stable, so equal scores keep the date-descending order
        return sorted(scored, key=lambda item: item[0], reverse=True)

    async def search(
        self,
        query: str,
        k: int = 5,
        recency_boost: float = 0.2
    ) -> List[ChunkDocument]:
        """
        Retrieve the top-k chunks for a query

        Args:
            query: User query text
            k: Number of chunks to return
            recency_boost: Weight of the recency term

        Returns:
            At most k chunks, best first (scores are not exposed)
        """
        if k <= 0:
            return []

        logger.info(f"Searching journal for: {query[:50]}...")
        query_vector = await self.embeddings.embed(query)

        candidates = await self.store.fetch_candidates(self.candidate_limit)
        ranked = self.score_candidates(query_vector, candidates, recency_boost)

        results = [candidate.to_chunk_document() for _, candidate in ranked[:k]]

        logger.info(f"Retrieved {len(results)} of {len(candidates)} candidate chunks")
        for i, (score, candidate) in enumerate(ranked[:k], 1):
            logger.debug(f"  {i}. Score: {score:.3f} - {candidate.date} {candidate.heading or 'Untitled'}")

        return results
