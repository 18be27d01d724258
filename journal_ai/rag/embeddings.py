"""Embeddings service with provider delegation and local fallback"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from openai import AsyncOpenAI
import redis.asyncio as redis
import json
import hashlib
import math
import logging

from journal_ai.exceptions import EmbeddingProviderException

logger = logging.getLogger(__name__)

LOCAL_EMBEDDING_DIMENSIONS = 1536
LOCAL_EMBEDDING_MODEL = "simple"


def utf16_code_units(text: str) -> List[int]:
    """UTF-16 code units of text (surrogate pairs for astral characters)"""
    data = text.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2)]


def local_embedding(text: str, dimensions: int = LOCAL_EMBEDDING_DIMENSIONS) -> List[float]:
    """
    Deterministic character-code embedding used when no provider is available

    Each UTF-16 code unit adds unit / 1000 to slot i % dimensions and the
    result is L2-normalised. Characters outside the BMP contribute their two
    surrogate units, as JavaScript's charCodeAt counts them. Not
    semantic, but stable: the same text always yields the same vector. Empty
    input gives the zero vector.
    """
    vector = [0.0] * dimensions
    for i, unit in enumerate(utf16_code_units(text)):
        vector[i % dimensions] += unit / 1000

    magnitude = math.sqrt(sum(value * value for value in vector))
    if magnitude == 0 or not math.isfinite(magnitude):
        return [0.0] * dimensions

    return [value / magnitude for value in vector]


class EmbeddingProvider(ABC):
    """External text-embedding backend"""

    name: str = "provider"

    def __init__(self, model: str):
        self.model = model

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Embed a single text; raise EmbeddingProviderException on failure"""


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """OpenAI embeddings API"""

    name = "openai"

    def __init__(self, api_key: str, model: str = "text-embedding-3-small"):
        super().__init__(model)
        self.async_client = AsyncOpenAI(api_key=api_key)

    async def embed(self, text: str) -> List[float]:
        try:
            response = await self.async_client.embeddings.create(
                model=self.model,
                input=text
            )
            return list(response.data[0].embedding)
        except Exception as e:
            raise EmbeddingProviderException(f"OpenAI embedding error: {e}") from e


class EmbeddingCache:
    """Redis cache for provider embeddings"""

    def __init__(self, redis_url: str, ttl: int = 3600):
        self.ttl = ttl
        self.redis_client = redis.from_url(
            redis_url,
            decode_responses=False  # Store bytes for embeddings
        )

    def _get_cache_key(self, provider: str, model: str, text: str) -> str:
        """Generate cache key for text"""
        return f"emb:{provider}:{model}:{hashlib.md5(text.encode()).hexdigest()}"

    async def get(self, provider: str, model: str, text: str) -> Optional[List[float]]:
        """Get embedding from cache; errors count as a miss"""
        try:
            cached = await self.redis_client.get(self._get_cache_key(provider, model, text))
            if cached:
                logger.debug("Cache hit for embedding")
                return json.loads(cached)
        except Exception as e:
            logger.warning(f"Cache retrieval error: {e}")
        return None

    async def set(self, provider: str, model: str, text: str, embedding: List[float]) -> None:
        """Save embedding to cache"""
        try:
            await self.redis_client.setex(
                self._get_cache_key(provider, model, text),
                self.ttl,
                json.dumps(embedding)
            )
            logger.debug("Cached embedding")
        except Exception as e:
            logger.warning(f"Cache save error: {e}")

    async def close(self) -> None:
        try:
            await self.redis_client.aclose()
        except Exception as e:
            logger.warning(f"Cache close error: {e}")


class EmbeddingsService:
    """Embeds text with the configured provider, falling back to local vectors"""

    def __init__(
        self,
        provider: Optional[EmbeddingProvider] = None,
        cache: Optional[EmbeddingCache] = None,
        dimensions: int = LOCAL_EMBEDDING_DIMENSIONS
    ):
        self.provider = provider
        self.cache = cache
        self.dimensions = dimensions

    @property
    def model(self) -> str:
        """Model name recorded for embeddings from the primary path"""
        return self.provider.model if self.provider else LOCAL_EMBEDDING_MODEL

    async def embed(self, text: str) -> List[float]:
        """
        Generate embedding for a single text

        Args:
            text: Text to embed

        Returns:
            Embedding vector (never raises; degraded vectors on provider failure)
        """
        vector, _ = await self.embed_with_model(text)
        return vector

    async def embed_with_model(self, text: str) -> Tuple[List[float], str]:
        """
        Generate embedding and report which model actually produced it

        Returns:
            (vector, model name); the model is "simple" for local fallback
        """
        if self.provider is None:
            return local_embedding(text, self.dimensions), LOCAL_EMBEDDING_MODEL

        if self.cache is not None:
            cached = await self.cache.get(self.provider.name, self.provider.model, text)
            if cached:
                return cached, self.provider.model

        try:
            vector = await self.provider.embed(text)
        except Exception as e:
            logger.error(f"Embedding provider {self.provider.name} failed, using local fallback: {e}")
            return local_embedding(text, self.dimensions), LOCAL_EMBEDDING_MODEL

        if self.cache is not None:
            await self.cache.set(self.provider.name, self.provider.model, text, vector)

        logger.debug(f"Generated {self.provider.name} embedding for text of length {len(text)}")
        return vector, self.provider.model

    async def close(self) -> None:
        if self.cache is not None:
            await self.cache.close()
