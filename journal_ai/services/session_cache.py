"""Time-indexed in-memory cache with idle eviction"""

from dataclasses import dataclass
from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar
import time
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    value: T
    last_activity: float


class SessionCache(Generic[T]):
    """
    Map of session id -> value that forgets idle sessions

    Owned by whoever creates it; eviction happens only when sweep() runs,
    normally from a scheduled job.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def put(self, session_id: str, value: T) -> None:
        self._entries[session_id] = CacheEntry(value=value, last_activity=self.clock())

    def get(self, session_id: str, touch: bool = True) -> Optional[T]:
        """Value for a session, marking it active unless touch is False"""
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if touch:
            entry.last_activity = self.clock()
        return entry.value

    def pop(self, session_id: str) -> Optional[T]:
        entry = self._entries.pop(session_id, None)
        return entry.value if entry else None

    def sweep(self, now: Optional[float] = None) -> List[str]:
        """
        Evict sessions idle for longer than the TTL

        Returns:
            Ids of evicted sessions
        """
        now = self.clock() if now is None else now
        expired = [
            session_id
            for session_id, entry in self._entries.items()
            if now - entry.last_activity > self.ttl_seconds
        ]
        for session_id in expired:
            del self._entries[session_id]
            logger.info(f"Cleaning up inactive session: {session_id}")
        return expired
