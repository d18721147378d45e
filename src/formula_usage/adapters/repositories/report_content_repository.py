# src/formula_usage/adapters/repositories/report_content_repository.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""SQLAlchemy repository reading saved report content.

Layer: adapters / repositories

Notes:
    * Read-only. The run owns the session and nothing here commits.
    * Rows come back ordered by ``content_id`` so repeated runs print the same
      table.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from formula_usage.domain.entities.content_record import ContentRecord
from formula_usage.domain.exceptions.reports import SourceFetchError
from formula_usage.infrastructure.database.models.content import Content

__all__ = ["SqlAlchemyReportContentRepository"]

logger = logging.getLogger(__name__)


class SqlAlchemyReportContentRepository:
    """Read saved report definitions from the ``content`` table."""

    def __init__(self, session: AsyncSession) -> None:
        """Bind the repository to an open session.

        Args:
            session: Async SQLAlchemy session on the content store.
        """
        self._session = session

    async def list_report_contents(
        self,
        content_type: int,
        report_type: int,
    ) -> Sequence[ContentRecord]:
        """Return every content row matching the type filter, ordered by id.

        Raises:
            SourceFetchError: If the query fails for any driver or DB reason.
        """
        stmt = (
            select(Content)
            .where(
                Content.content_type == content_type,
                Content.report_type == report_type,
            )
            .order_by(Content.content_id.asc())
        )

        try:
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "report_content.fetch_failed",
                extra={"content_type": content_type, "report_type": report_type},
            )
            raise SourceFetchError(
                "Failed to read report content from the source store.",
                details={
                    "content_type": content_type,
                    "report_type": report_type,
                    "reason": exc.__class__.__name__,
                },
            ) from exc

        return [_to_record(row) for row in rows]


def _to_record(row: Content) -> ContentRecord:
    return ContentRecord(
        content_id=str(row.content_id),
        name=row.name,
        created_date=row.created_date,
        modified_date=row.modified_date,
        text_content=row.text_content,
    )
