# src/formula_usage/infrastructure/database/session.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Content store connection pool.

One async engine (and its pool) exists per process, created by
`init_engine_and_sessionmaker()` and released by `dispose_engine()`.
`formula_usage.dependencies.core.bootstrap` pairs the two so the pool is
released on every exit path of a run.

Notes:
    * `pool_pre_ping=True` surfaces dead connections before use.
    * The models are declared against ``sm_access``. Any other ``DB_SCHEMA``
      is applied through the engine's ``schema_translate_map``.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress
from typing import Any

from sqlalchemy.exc import IllegalStateChangeError, InvalidRequestError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from formula_usage.config.settings import Settings
from formula_usage.infrastructure.database.models.content import CONTENT_SCHEMA

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def _execution_options(settings: Settings) -> dict[str, Any]:
    if settings.db_schema == CONTENT_SCHEMA:
        return {}
    return {"schema_translate_map": {CONTENT_SCHEMA: settings.db_schema}}


def init_engine_and_sessionmaker(settings: Settings) -> None:
    """Create the process engine and session factory unless they exist.

    Args:
        settings: Source of `database_url`, `db_schema` and `db_echo`.

    Raises:
        ValueError: If `database_url` is empty.
    """
    global _engine, _sessionmaker

    if not settings.database_url:
        raise ValueError("database_url must be configured")
    if _engine is not None:
        return

    _engine = create_async_engine(
        url=settings.database_url,
        pool_pre_ping=True,
        echo=settings.db_echo,
        execution_options=_execution_options(settings),
    )
    _sessionmaker = async_sessionmaker(bind=_engine, expire_on_commit=False, class_=AsyncSession)


async def dispose_engine() -> None:
    """Close every pooled connection and forget the engine. Safe to repeat."""
    global _engine, _sessionmaker
    engine, _engine, _sessionmaker = _engine, None, None
    if engine is not None:
        await engine.dispose()


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Return the session factory.

    Raises:
        RuntimeError: If `init_engine_and_sessionmaker()` has not run.
    """
    if _sessionmaker is None:
        raise RuntimeError("DB sessionmaker not initialized (call init_engine_and_sessionmaker)")
    return _sessionmaker


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a session for the duration of the block.

    The audit only reads, so an open transaction is rolled back (never
    committed) before the session is closed.
    """
    session = get_sessionmaker()()
    try:
        yield session
    finally:
        # The session may still be provisioning its connection.
        with suppress(InvalidRequestError):
            tx = session.get_transaction()
            if tx is not None and tx.is_active:
                await session.rollback()

        with suppress(InvalidRequestError, IllegalStateChangeError):
            await session.close()
