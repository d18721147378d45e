# src/formula_usage/domain/services/function_usage_scanner.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Function usage scanner.

Purpose:
    Detect which catalog functions a canonical report uses in its cell texts.

Layer:
    domain/services

Notes:
    Detection is a case-insensitive substring test for ``<name>(``. It does not
    parse the formula language: a match inside a string literal counts, and no
    word boundary is required before the name, so ``XSUM(`` also matches
    ``SUM``.
"""

from __future__ import annotations

from collections.abc import Iterable

from formula_usage.domain.entities.report import Report

__all__ = ["scan_usage"]


def _lowered_cell_texts(report: Report) -> list[str]:
    texts: list[str] = []
    for cell in report.cells:
        text = cell.cell_text
        # Absent, empty or non-text content never matches.
        if not isinstance(text, str) or not text:
            continue
        texts.append(text.lower())
    return texts


def scan_usage(report: Report, catalog: Iterable[str]) -> tuple[str, ...]:
    """Return the catalog functions referenced anywhere in the report's cells.

    Args:
        report: Canonical report to scan.
        catalog: Function names to look for, in catalog order.

    Returns:
        Each detected name once, with its catalog casing, in catalog order.
        Empty when the report has no cells or only empty cell texts.
    """
    texts = _lowered_cell_texts(report)
    if not texts:
        return ()

    found: dict[str, None] = {}
    for name in catalog:
        if name in found:
            continue
        needle = f"{name.lower()}("
        if any(needle in text for text in texts):
            found[name] = None
    return tuple(found)
