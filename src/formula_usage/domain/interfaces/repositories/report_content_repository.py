# src/formula_usage/domain/interfaces/repositories/report_content_repository.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Report content repository interface.

Purpose:
    Define the read operation an audit run needs from the content store: one
    bulk read of every saved item matching a content-type and report-type
    filter.

Layer:
    domain

Notes:
    Implementations live in the adapters layer (e.g., SQLAlchemy repositories)
    and must translate DB/driver errors into `SourceFetchError`. Streaming and
    pagination are not part of this contract.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from formula_usage.domain.entities.content_record import ContentRecord


class ReportContentRepository(Protocol):
    """Protocol for repositories reading saved report content."""

    async def list_report_contents(
        self,
        content_type: int,
        report_type: int,
    ) -> Sequence[ContentRecord]:
        """Return every content record matching the filter.

        Args:
            content_type: `content.content_type` discriminator.
            report_type: `content.report_type` discriminator.

        Returns:
            The full result set, in a deterministic order.

        Raises:
            SourceFetchError: If the read fails.
        """
        ...
