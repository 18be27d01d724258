"""Logging setup"""

import logging
from typing import Optional

from journal_ai.config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the application

    Args:
        level: Log level name (default: LOG_LEVEL setting)
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )

    # Third-party clients are chatty at INFO
    for noisy in ("httpx", "openai", "apscheduler", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
