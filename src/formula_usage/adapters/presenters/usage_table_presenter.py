# src/formula_usage/adapters/presenters/usage_table_presenter.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Usage table presenter.

Purpose:
    Render a `FunctionUsageTable` as delimited text lines for standard output.

Layer:
    adapters/presenters

Notes:
    The output format is kept exactly as downstream consumers already parse it:
        * The header is space separated, not comma delimited.
        * Field escaping is narrow: a field containing a comma loses its first
          double quote and is wrapped in double quotes. Other quotes are left
          as-is and are not doubled.
"""

from __future__ import annotations

from formula_usage.domain.entities.usage import FunctionUsageTable

__all__ = ["HEADER", "csv_escape", "render_usage_table"]

HEADER = "report_name function location"


def csv_escape(text: str) -> str:
    """Escape a single field.

    Args:
        text: Raw field value.

    Returns:
        ``text`` unchanged when it has no comma; otherwise ``text`` with its
        first ``"`` removed, wrapped in double quotes.
    """
    if "," not in text:
        return text
    stripped = text.replace('"', "", 1)
    return f'"{stripped}"'


def render_usage_table(table: FunctionUsageTable) -> list[str]:
    """Render the header followed by one line per (report, function) pair.

    Reports appear in table order and functions in detection order. A report
    without detected functions contributes no line.
    """
    lines = [HEADER]
    for record in table.records():
        lines.append(
            f"{csv_escape(record.report_name)},{csv_escape(record.function_name)},{record.location}"
        )
    return lines
