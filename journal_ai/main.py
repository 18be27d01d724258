"""FastAPI application entry point"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from journal_ai.api.endpoints import chat, health, stt, vault
from journal_ai.api.endpoints import settings as settings_router
from journal_ai.config import settings
from journal_ai.exceptions import (
    ConfigurationException,
    JournalException,
    LLMException,
    SessionNotFoundException,
    TranscriptionException,
)
from journal_ai.jobs.session_cleanup import schedule_session_cleanup
from journal_ai.services.session_cache import SessionCache
from journal_ai.services.stt_sessions import STTService
from journal_ai.utils.logger import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    - Startup: dictation session cache and its cleanup job
    - Shutdown: stop the scheduler
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Vault: {settings.vault_dir}")

    cache = SessionCache(ttl_seconds=settings.STT_SESSION_TTL_SECONDS)
    app.state.stt_service = STTService(cache, min_audio_bytes=settings.STT_MIN_AUDIO_BYTES)

    scheduler = AsyncIOScheduler()
    try:
        schedule_session_cleanup(scheduler, cache, settings.STT_SWEEP_INTERVAL_SECONDS)
        scheduler.start()
        logger.info("Background scheduler started with STT session cleanup job")
    except Exception as e:
        logger.error(f"Scheduler initialization error: {str(e)}")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}")
    try:
        if scheduler.running:
            scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")
    except Exception as e:
        logger.error(f"Scheduler shutdown error: {str(e)}")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Journaling backend with dictation and retrieval-augmented chat over your journal",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)

# CORS middleware (local single-user app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:4321",  # Astro dev server
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(settings_router.router, prefix="/api", tags=["settings"])
app.include_router(vault.router, prefix="/api", tags=["vault"])
app.include_router(chat.router, prefix="/api", tags=["chat"])
app.include_router(stt.router, prefix="/api", tags=["stt"])


# Exception handlers
@app.exception_handler(SessionNotFoundException)
async def session_not_found_handler(request: Request, exc: SessionNotFoundException):
    return JSONResponse(
        status_code=404,
        content={"error": "Session not found", "detail": str(exc)}
    )


@app.exception_handler(ConfigurationException)
async def configuration_exception_handler(request: Request, exc: ConfigurationException):
    logger.error(f"Configuration error: {str(exc)}")
    return JSONResponse(
        status_code=400,
        content={"error": exc.__class__.__name__, "detail": str(exc)}
    )


@app.exception_handler(LLMException)
async def llm_exception_handler(request: Request, exc: LLMException):
    logger.error(f"LLM error: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to generate response", "detail": str(exc)}
    )


@app.exception_handler(TranscriptionException)
async def transcription_exception_handler(request: Request, exc: TranscriptionException):
    logger.error(f"Audio processing error: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"error": "Processing failed", "detail": str(exc)}
    )


@app.exception_handler(JournalException)
async def journal_exception_handler(request: Request, exc: JournalException):
    """Storage and vault failures"""
    logger.error(f"{exc.__class__.__name__}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"error": "Operation failed", "detail": str(exc)}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions"""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "InternalServerError",
            "detail": "An unexpected error occurred"
        }
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
        "docs": "/docs" if settings.DEBUG else "disabled"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "journal_ai.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.DEBUG
    )
