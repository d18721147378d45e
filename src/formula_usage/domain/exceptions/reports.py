# src/formula_usage/domain/exceptions/reports.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Report audit domain exceptions.

Purpose:
    Provide report-specific error types for fetching saved report content and
    for turning raw report XML into the canonical report model.

Layer:
    domain

Notes:
    - Adapters are responsible for translating driver and parser errors into
      these types.
    - Every error is fatal to an audit run unless the caller explicitly opts
      into skipping malformed reports.
"""

from __future__ import annotations

from formula_usage.domain.exceptions.base import DomainError


class ReportError(DomainError):
    """Base class for report audit errors."""

    code = "REPORT_ERROR"


class SourceFetchError(ReportError):
    """Raised when the bulk read of report content from the source store fails."""

    code = "SOURCE_FETCH_ERROR"


class MalformedReportError(ReportError):
    """Raised when report XML cannot be parsed or lacks its `main` section."""

    code = "MALFORMED_REPORT"


__all__ = ["MalformedReportError", "ReportError", "SourceFetchError"]
