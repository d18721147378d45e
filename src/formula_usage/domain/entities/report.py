# src/formula_usage/domain/entities/report.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Canonical report entities.

Purpose:
    Represent a saved report definition after normalization: a required
    `main` configuration section, repeatable sections that are always
    sequences, and opaque substructures that are carried but not interpreted.

Layer:
    domain

Notes:
    - Values are kept exactly as parsed. Numeric and boolean strings such as
      ``"12"`` or ``"true"`` are NOT converted to native types.
    - A repeatable section is either ``None`` (absent from the source XML) or a
      tuple. Consumers treat ``None`` as an empty sequence.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from formula_usage.domain.exceptions.reports import MalformedReportError


@dataclass(frozen=True)
class ReportMain:
    """Identity and configuration section of a report (`<main>`).

    Args:
        report_name: Report display name; the key of the usage table.
        id: Report identifier as stored in the XML.
        folder_name: Containing folder name.
        folder_id: Containing folder identifier.
        version: Definition version.
        type: Report type label.
        sql_stmt: SQL statement backing the report.
        description: Free-text description.
        fields: The complete raw section, including the layout and export
            flags that are not promoted to attributes.
    """

    report_name: str
    id: Any = None
    folder_name: Any = None
    folder_id: Any = None
    version: Any = None
    type: Any = None
    sql_stmt: Any = None
    description: Any = None
    fields: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_node(cls, node: Any) -> ReportMain:
        """Build the section from its raw parsed node.

        Raises:
            MalformedReportError: If the node is not a mapping or has no
                ``report_name``.
        """
        if not isinstance(node, Mapping):
            raise MalformedReportError(
                "Report definition is missing its <main> section.",
                details={"main_type": type(node).__name__},
            )
        report_name = node.get("report_name")
        if report_name is None:
            raise MalformedReportError("Report <main> section has no <report_name>.")
        return cls(
            report_name=str(report_name),
            id=node.get("id"),
            folder_name=node.get("folder_name"),
            folder_id=node.get("folder_id"),
            version=node.get("version"),
            type=node.get("type"),
            sql_stmt=node.get("sql_stmt"),
            description=node.get("description"),
            fields=dict(node),
        )


@dataclass(frozen=True)
class ReportCell:
    """A rendered cell, optionally carrying a formula in ``cell_text``.

    ``cell_text`` is whatever the parser produced: usually a string or
    ``None``, but possibly a nested mapping for odd markup. ``source`` keeps the
    raw node the cell was built from.
    """

    cell_text: Any = None
    id: Any = None
    widget_id: Any = None
    cell_type: Any = None
    cell_row: Any = None
    cell_col: Any = None
    cell_colspan: Any = None
    cell_rowspan: Any = None
    wrap_text_flag: Any = None
    font_name: Any = None
    font_size: Any = None
    source: Any = None

    @classmethod
    def from_node(cls, node: Any) -> ReportCell:
        """Build a cell from its raw node; non-mapping nodes carry no fields."""
        if not isinstance(node, Mapping):
            return cls(source=node)
        return cls(
            cell_text=node.get("cell_text"),
            id=node.get("id"),
            widget_id=node.get("widget_id"),
            cell_type=node.get("cell_type"),
            cell_row=node.get("cell_row"),
            cell_col=node.get("cell_col"),
            cell_colspan=node.get("cell_colspan"),
            cell_rowspan=node.get("cell_rowspan"),
            wrap_text_flag=node.get("wrap_text_flag"),
            font_name=node.get("font_name"),
            font_size=node.get("font_size"),
            source=node,
        )


@dataclass(frozen=True)
class Report:
    """Canonical, normalized report definition."""

    main: ReportMain
    entity: tuple[Any, ...] | None = None
    cell: tuple[ReportCell, ...] | None = None
    row: tuple[Any, ...] | None = None
    column: tuple[Any, ...] | None = None
    sort: tuple[Any, ...] | None = None
    filter: tuple[Any, ...] | None = None
    join: Any = None
    topn: Any = None
    widget: Any = None
    dynamicfilters: Any = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        """Report display name (shortcut for ``main.report_name``)."""
        return self.main.report_name

    @property
    def cells(self) -> tuple[ReportCell, ...]:
        """Cells as a sequence, empty when the report has none."""
        return self.cell or ()


__all__ = ["Report", "ReportCell", "ReportMain"]
