# src/campus_connect/scripts/migrate.py
"""Apply Alembic migrations to the configured database."""
from __future__ import annotations

import argparse
import os
import sys

from alembic import command
from alembic.config import Config

from campus_connect.core.settings import settings

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def alembic_config(url: str | None = None) -> Config:
    """Build an Alembic config pointing at the project's migrations folder."""
    cfg = Config()
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    cfg.set_main_option("sqlalchemy.url", url or settings.database_url_sync)
    return cfg


def run_upgrade_head(url: str | None = None) -> None:
    command.upgrade(alembic_config(url), "head")


def run_downgrade_base(url: str | None = None) -> None:
    command.downgrade(alembic_config(url), "base")


def main() -> None:
    parser = argparse.ArgumentParser(description="Migrate the configured database")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Downgrade to an empty schema before upgrading to head.",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args()

    try:
        if args.reset:
            run_downgrade_base(args.url)
        run_upgrade_head(args.url)
    except Exception as exc:
        print(f"[migrate] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    print("[migrate] database is at head")


if __name__ == "__main__":
    main()
