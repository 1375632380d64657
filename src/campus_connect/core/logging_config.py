"""Root logger configuration."""

from __future__ import annotations

import logging

from campus_connect.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    global _configured
    resolved = (level or settings.log_level).upper()
    if not _configured:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
        _configured = True
    logging.getLogger().setLevel(resolved)
    # SQL echo is controlled by SQL_DEBUG, keep the engine logger quiet otherwise.
    if not settings.sql_debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
