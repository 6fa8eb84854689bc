#!/usr/bin/env python3
"""Bring the accounts, linked identities and refresh token tables up to date.

Usage:
    python scripts/run_migrations.py [revision]

The revision defaults to "head". Failures are reported to Logfire and
re-raised so a deployment never starts against a half-migrated schema.
"""

import sys
import logfire
from alembic import command
from alembic.config import Config
from sqlalchemy.engine import make_url

from gatekeep.config import Settings
from gatekeep.util.observability import configure_logfire


def main(argv: list[str]) -> int:
    """Upgrade the gatekeep schema and log the outcome."""
    settings = Settings()
    configure_logfire(settings)

    revision = argv[1] if len(argv) > 1 else "head"
    # Never log the database password
    database = make_url(settings.database.url).render_as_string(hide_password=True)

    try:
        logfire.info(
            "Upgrading gatekeep schema", revision=revision, database=database
        )

        alembic_cfg = Config("alembic.ini")
        command.upgrade(alembic_cfg, revision)

        logfire.info("Gatekeep schema is up to date", revision=revision)
        return 0

    except Exception as e:
        logfire.error(
            "Gatekeep schema upgrade failed",
            revision=revision,
            database=database,
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main(sys.argv))
