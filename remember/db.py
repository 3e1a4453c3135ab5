import asyncio
import copy
import logging
from typing import Optional

from tortoise import Tortoise

from remember.config import settings, TORTOISE_ORM

_logger = logging.getLogger("db")


def _tortoise_url(db_url: Optional[str] = None) -> str:
    """Normalize database URL for Tortoise ORM."""
    url = (db_url or settings.DATABASE_URL).strip().strip('"').strip("'")
    # Normalize to tortoise "postgres://" style
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgres://", 1)
    return url


def _build_tortoise_config(db_url: Optional[str] = None) -> dict:
    config = copy.deepcopy(TORTOISE_ORM)
    config["connections"]["default"] = _tortoise_url(db_url)
    return config


async def init_db(db_url: Optional[str] = None, max_retries: int = 3, delay_seconds: float = 0.5) -> None:
    """Initialize the database and create missing tables.

    Retries a few times so the API can start while the database container is
    still coming up. The last failure is re-raised.
    """
    config = _build_tortoise_config(db_url)
    for attempt in range(1, max_retries + 1):
        try:
            await Tortoise.init(config=config)
            await Tortoise.generate_schemas(safe=True)
            _logger.info("Database initialized successfully")
            return
        except OSError as exc:
            if attempt == max_retries:
                _logger.error("Database unavailable after %s attempts: %s", attempt, exc)
                raise
            _logger.info(
                "DB init failed (attempt %s/%s): %s; retrying in %.1fs",
                attempt,
                max_retries,
                exc,
                delay_seconds,
            )
            await asyncio.sleep(delay_seconds)


async def close_db() -> None:
    """Close database connections in the current event loop."""
    await Tortoise.close_connections()
