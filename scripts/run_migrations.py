#!/usr/bin/env python3
"""Apply the authority schema migrations."""

import sys

import logfire
from alembic import command
from alembic.config import Config

from telloom.config import Settings
from telloom.util.logging import setup_logging
from telloom.util.observability import configure_logfire


def main(revision: str = "head") -> int:
    """Upgrade the database to a revision.

    Migrations run over the privileged connection, since they create the
    SECURITY DEFINER functions the bypass path relies on.

    Args:
        revision: Alembic revision to upgrade to
    """
    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    with logfire.span("run_migrations", revision=revision):
        try:
            command.upgrade(Config("alembic.ini"), revision)
        except Exception as e:
            logfire.error(
                "Authority schema migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # The app must not start against a half-migrated schema
            raise

    logfire.info("Authority schema is at revision", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
