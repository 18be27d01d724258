"""Health check endpoint"""

from fastapi import APIRouter, Depends, Response, status
from redis.asyncio import Redis
from typing import Callable
import logging

from journal_ai.api.deps import get_rag_opener, get_vault
from journal_ai.config import settings
from journal_ai.schemas.response import HealthResponse
from journal_ai.services.vault import VaultManager

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health_check(
    response: Response,
    vault: VaultManager = Depends(get_vault),
    open_rag: Callable = Depends(get_rag_opener)
):
    """
    Health check endpoint
    Checks:
    - Vault directory and embedding store
    - Embedding provider configuration
    - Redis (only when the embedding cache is enabled)
    """
    health_status = {
        "status": "healthy",
        "dependencies": {}
    }

    # Check vault + store
    try:
        journal_settings = vault.load_settings()
        async with await open_rag(vault, journal_settings) as rag:
            health_status["documents"] = await rag.store.count_documents()
            health_status["chunks"] = await rag.store.count_chunks()
            health_status["dependencies"]["embeddings"] = rag.embeddings.model
        health_status["dependencies"]["store"] = "connected"
    except Exception as e:
        health_status["dependencies"]["store"] = f"error: {str(e)}"
        health_status["status"] = "unhealthy"
        logger.error(f"Store health check failed: {str(e)}")

    # Check Redis (optional - don't fail if not available)
    if settings.RAG_ENABLE_CACHE:
        try:
            redis_client = Redis.from_url(settings.REDIS_URL, socket_connect_timeout=2)
            await redis_client.ping()
            await redis_client.aclose()
            health_status["dependencies"]["redis"] = "connected"
        except Exception as e:
            health_status["dependencies"]["redis"] = f"not available: {str(e)}"
            logger.warning(f"Redis health check failed: {str(e)}")

    if health_status["status"] == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(**health_status)
