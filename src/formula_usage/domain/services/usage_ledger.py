# src/formula_usage/domain/services/usage_ledger.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Usage ledger fold.

Purpose:
    Merge per-report usage into the ordered accumulation keyed by report name.

Layer:
    domain/services

Notes:
    Report names are expected to be unique. When one repeats, the later
    report's functions replace the earlier entry, which keeps its original
    position in the table. Nothing is unioned.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

__all__ = ["merge_usage"]

logger = logging.getLogger(__name__)


def merge_usage(
    ledger: Mapping[str, tuple[str, ...]],
    report_name: str,
    functions: tuple[str, ...],
) -> dict[str, tuple[str, ...]]:
    """Return a new ledger with ``report_name`` bound to ``functions``.

    Args:
        ledger: Accumulated usage so far; not mutated.
        report_name: Name of the report just scanned.
        functions: Functions detected in that report.

    Returns:
        The merged ledger.
    """
    if report_name in ledger:
        logger.warning(
            "report_usage.duplicate_name",
            extra={
                "report_name": report_name,
                "previous_functions": list(ledger[report_name]),
                "functions": list(functions),
            },
        )
    merged = dict(ledger)
    merged[report_name] = functions
    return merged
