# src/formula_usage/application/use_cases/reports/audit_function_usage.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Use case: Audit formula function usage across saved reports.

Scope:
    * Fetch every saved report matching a content/report type filter (one
      bulk read).
    * For each record, in fetch order:
        - Parse the XML definition into a raw node tree.
        - Normalize it into the canonical report model.
        - Scan cell texts for catalog functions.
        - Fold the result into the usage ledger keyed by report name.
    * Return the accumulated `FunctionUsageTable`.

Notes:
    * Processing is sequential and all-or-nothing: any failure aborts the run
      and no table is returned.
    * Malformed report policy is chosen per run. By default a
      `MalformedReportError` propagates (the whole run aborts). With
      ``skip_malformed=True`` the record is skipped and a warning is logged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from formula_usage.domain.entities.content_record import ContentRecord
from formula_usage.domain.entities.usage import FunctionUsageTable
from formula_usage.domain.enums.content import ContentType, ReportType
from formula_usage.domain.exceptions.reports import MalformedReportError
from formula_usage.domain.interfaces.repositories.report_content_repository import (
    ReportContentRepository,
)
from formula_usage.domain.services.function_usage_scanner import scan_usage
from formula_usage.domain.services.report_normalizer import normalize
from formula_usage.domain.services.usage_ledger import merge_usage

logger = logging.getLogger(__name__)


class ReportParser(Protocol):
    """Anything that turns a report text blob into a raw report node."""

    def parse(self, content: str | bytes | None) -> Mapping[str, Any]: ...


@dataclass(frozen=True)
class AuditFunctionUsageRequest:
    """Request parameters for a usage audit run."""

    content_type: int = int(ContentType.REPORT)
    report_type: int = int(ReportType.ADVANCED_REPORT)


class AuditFunctionUsageUseCase:
    """Build the function usage table for all matching saved reports.

    Args:
        repository: Source of saved report content.
        parser: XML parser producing raw report nodes.
        catalog: Ordered function names to detect.
        skip_malformed: Skip (and log) malformed reports instead of aborting.

    Raises:
        SourceFetchError: If the bulk read fails.
        MalformedReportError: If a report is malformed and ``skip_malformed``
            is false.
    """

    def __init__(
        self,
        *,
        repository: ReportContentRepository,
        parser: ReportParser,
        catalog: Iterable[str],
        skip_malformed: bool = False,
    ) -> None:
        self._repository = repository
        self._parser = parser
        self._catalog = tuple(catalog)
        self._skip_malformed = skip_malformed

    async def execute(self, req: AuditFunctionUsageRequest) -> FunctionUsageTable:
        """Execute the audit.

        Returns:
            The usage table in first-seen report order.
        """
        logger.info(
            "report_usage.start",
            extra={
                "content_type": req.content_type,
                "report_type": req.report_type,
                "function_count": len(self._catalog),
                "skip_malformed": self._skip_malformed,
            },
        )

        records = await self._repository.list_report_contents(
            content_type=req.content_type,
            report_type=req.report_type,
        )

        ledger: dict[str, tuple[str, ...]] = {}
        skipped: list[str] = []
        for record in records:
            try:
                report_name, functions = self._audit_record(record)
            except MalformedReportError as exc:
                if not self._skip_malformed:
                    logger.error(
                        "report_usage.malformed",
                        extra={"content_id": record.content_id, "content_name": record.name},
                    )
                    raise
                logger.warning(
                    "report_usage.malformed_skipped",
                    extra={
                        "content_id": record.content_id,
                        "content_name": record.name,
                        "reason": str(exc),
                    },
                )
                skipped.append(record.content_id)
                continue
            ledger = merge_usage(ledger, report_name, functions)

        table = FunctionUsageTable(usage=ledger, skipped=tuple(skipped))

        logger.info(
            "report_usage.success",
            extra={
                "records_fetched": len(records),
                "reports": table.report_count,
                "usage_pairs": sum(len(f) for f in ledger.values()),
                "skipped": len(skipped),
            },
        )
        return table

    def _audit_record(self, record: ContentRecord) -> tuple[str, tuple[str, ...]]:
        raw = self._parser.parse(record.text_content)
        report = normalize(raw)
        return report.name, scan_usage(report, self._catalog)
