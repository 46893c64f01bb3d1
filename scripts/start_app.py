#!/usr/bin/env python3
"""Serve the access API with uvicorn."""

import sys

import logfire
import uvicorn

from telloom.config import Settings
from telloom.util.logging import setup_logging
from telloom.util.observability import configure_logfire


def main() -> int:
    """Configure observability, then hand over to uvicorn.

    Startup failures (bad settings, unreachable database on first request
    scope) are reported to Logfire before the process exits.
    """
    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    try:
        logfire.info(
            "Starting Telloom access API",
            environment=settings.environment,
            git_sha=settings.git_sha,
        )
        uvicorn.run(
            "telloom.interface.api.app:create_app",
            factory=True,
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
        return 0
    except Exception as e:
        logfire.error(
            "Access API failed to start",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
