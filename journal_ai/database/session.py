"""Database engine management for the embedding store"""

from pathlib import Path
from typing import Union

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from journal_ai.config import settings
import logging

logger = logging.getLogger(__name__)

INDEX_DIR = "indices"
DATABASE_FILENAME = "embeddings.sqlite"


def database_path(vault_path: Union[str, Path]) -> Path:
    """Location of the embedding store inside a vault"""
    return Path(vault_path).expanduser() / INDEX_DIR / DATABASE_FILENAME


def create_engine_for_path(db_path: Union[str, Path]) -> AsyncEngine:
    """
    Create an async SQLite engine for the given database file

    Each engine belongs to exactly one store instance and is disposed
    when that store is closed.

    Args:
        db_path: Path to the SQLite file (parent directory is created)

    Returns:
        AsyncEngine bound to the file
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        poolclass=NullPool,
        echo=settings.DEBUG,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def receive_connect(dbapi_conn, connection_record):
        """Enable foreign keys on every new connection"""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        logger.debug("New database connection established")

    logger.debug(f"Created engine for {db_path}")
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to an engine"""
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
