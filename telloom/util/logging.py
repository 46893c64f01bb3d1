"""Stdlib logging configuration for third-party libraries.

Application code logs through logfire; this only sets levels and format for
libraries that use the standard logging module (uvicorn, SQLAlchemy, asyncpg).
"""

import logging
import sys

from telloom.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure stdlib logging.

    Args:
        settings: Application settings
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    # Configure root logger
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    # SQL echo is controlled by the engine's echo flag, not by this level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)

    logging.getLogger("telloom").setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured: environment=%s, level=%s",
        settings.environment,
        logging.getLevelName(level),
    )
