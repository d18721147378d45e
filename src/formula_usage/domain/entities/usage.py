# src/formula_usage/domain/entities/usage.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Function usage entities.

Purpose:
    Represent the result of an audit run: which catalog functions each report
    uses, in a deterministic order suitable for tabular output.

Layer:
    domain
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

#: Location label for detections made inside a cell's text. Locations are not
#: tracked per occurrence.
CELL_TEXT_LOCATION = "cell_text"


@dataclass(frozen=True)
class UsageRecord:
    """An observed (report, function) pairing."""

    report_name: str
    function_name: str
    location: str = CELL_TEXT_LOCATION


@dataclass(frozen=True)
class FunctionUsageTable:
    """Accumulated usage keyed by report name.

    Args:
        usage: Ordered mapping of report name to the functions detected in it.
            Iteration order is the order reports were first seen.
        skipped: Content ids of records skipped as malformed (only populated
            when the run opts into skipping).
    """

    usage: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    skipped: tuple[str, ...] = ()

    def records(self) -> Iterator[UsageRecord]:
        """Yield one record per (report, function) pair in table order."""
        for report_name, functions in self.usage.items():
            for function_name in functions:
                yield UsageRecord(report_name=report_name, function_name=function_name)

    @property
    def report_count(self) -> int:
        return len(self.usage)


__all__ = ["CELL_TEXT_LOCATION", "FunctionUsageTable", "UsageRecord"]
