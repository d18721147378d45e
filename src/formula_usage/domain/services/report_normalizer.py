# src/formula_usage/domain/services/report_normalizer.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Report normalization service.

Purpose:
    Turn a raw parsed report tree into the canonical `Report` model.

    A generic XML-to-mapping conversion collapses an element that has exactly
    one repeatable child into that bare child instead of a one-element list.
    This service restores the cardinality of the known repeatable sections so
    that consumers can always iterate them.

Layer:
    domain/services

Notes:
    - The coercion is an explicit allow-list pass and does not depend on the
      XML library that produced the tree.
    - Strings are treated as scalar values, not as sequences.
    - No type coercion of leaf values happens here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from formula_usage.domain.entities.report import Report, ReportCell, ReportMain
from formula_usage.domain.exceptions.reports import MalformedReportError

__all__ = ["MAINTAIN_AS_ARRAY", "coerce_arrays", "normalize"]

#: Report sections that must always be sequences after normalization.
MAINTAIN_AS_ARRAY: tuple[str, ...] = (
    "entity",
    "cell",
    "row",
    "column",
    "sort",
    "filter",
)

_OPAQUE_SECTIONS: tuple[str, ...] = ("join", "topn", "widget", "dynamicfilters")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def coerce_arrays(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Return a shallow copy of ``raw`` with repeatable sections as sequences.

    For each name in `MAINTAIN_AS_ARRAY`:
        * absent or ``None``: left absent;
        * already a list/tuple: left unchanged (same elements, same order);
        * anything else: wrapped in a one-element list.

    All other keys pass through untouched.

    Args:
        raw: Raw report node.

    Returns:
        A new mapping; ``raw`` is not mutated.
    """
    coerced = dict(raw)
    for section in MAINTAIN_AS_ARRAY:
        value = coerced.get(section)
        if value is None or _is_sequence(value):
            continue
        coerced[section] = [value]
    return coerced


def _as_tuple(value: Any) -> tuple[Any, ...] | None:
    if value is None:
        return None
    return tuple(value)


def normalize(raw: Any) -> Report:
    """Build a canonical `Report` from a raw report node.

    Args:
        raw: Raw report node (the mapping under the ``<report>`` root).

    Returns:
        The canonical report.

    Raises:
        MalformedReportError: If ``raw`` is not a mapping or its ``main``
            section is absent or unusable.
    """
    if not isinstance(raw, Mapping):
        raise MalformedReportError(
            "Report definition is not an element tree.",
            details={"raw_type": type(raw).__name__},
        )

    coerced = coerce_arrays(raw)
    main = ReportMain.from_node(coerced.get("main"))

    cells = coerced.get("cell")
    known = {"main", *MAINTAIN_AS_ARRAY, *_OPAQUE_SECTIONS}

    return Report(
        main=main,
        entity=_as_tuple(coerced.get("entity")),
        cell=tuple(ReportCell.from_node(c) for c in cells) if cells is not None else None,
        row=_as_tuple(coerced.get("row")),
        column=_as_tuple(coerced.get("column")),
        sort=_as_tuple(coerced.get("sort")),
        filter=_as_tuple(coerced.get("filter")),
        join=coerced.get("join"),
        topn=coerced.get("topn"),
        widget=coerced.get("widget"),
        dynamicfilters=coerced.get("dynamicfilters"),
        extra={k: v for k, v in coerced.items() if k not in known},
    )
