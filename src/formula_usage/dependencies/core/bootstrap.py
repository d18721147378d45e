# src/formula_usage/dependencies/core/bootstrap.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Core bootstrap for infrastructure (DB engine and connection pool).

This module owns the lifecycle of the shared infrastructure used by an audit
run. It is intentionally thin: configuration comes from Settings and all heavy
lifting is delegated to the infrastructure modules.

The single public surface is :func:`bootstrap`, an async context manager that
yields a simple state object with the resolved Settings.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from formula_usage.config.settings import Settings, get_settings
from formula_usage.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings


@asynccontextmanager
async def bootstrap(settings: Settings | None = None) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and tear down shared infrastructure.

    Responsibilities:
        * Resolve settings (explicit argument or `get_settings()`).
        * Initialize the DB engine/sessionmaker (acquires the pool).
        * Dispose the engine exactly once on exit, whether the body succeeded
          or raised. Errors from the body propagate after disposal.

    Args:
        settings: Settings to use; defaults to the cached process settings.

    Yields:
        BootstrapState: Resolved settings.
    """
    resolved = settings if settings is not None else get_settings()
    logger.info("bootstrap.start")

    # Imported here so tests can monkeypatch the module functions.
    import formula_usage.infrastructure.database.session as db_session

    db_session.init_engine_and_sessionmaker(resolved)

    try:
        yield BootstrapState(settings=resolved)
    finally:
        try:
            await db_session.dispose_engine()
        except Exception:
            logger.exception("bootstrap.db_dispose_failed")

        logger.info("bootstrap.stop")
