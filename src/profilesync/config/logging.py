"""Logging setup for the profilesync CLI."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "PROFILESYNC_LOG_LEVEL"

# Chatty per-request loggers; only useful when debugging.
_NOISY_LOGGERS = ("httpx", "httpcore", "alembic.runtime.migration")


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Set up the root logger with a terse format suitable for CLI output.

    Without an explicit ``level`` the ``PROFILESYNC_LOG_LEVEL`` variable is
    consulted, falling back to INFO. HTTP and migration chatter stays at WARNING
    unless the effective level is DEBUG. Pass ``force=True`` to reconfigure
    during tests.
    """

    resolved = level if level is not None else os.getenv(LOG_LEVEL_ENV, "").strip() or "INFO"
    if isinstance(resolved, str):
        resolved = logging.getLevelNamesMapping().get(resolved.upper(), logging.INFO)

    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    quiet = logging.NOTSET if resolved <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)
