# src/formula_usage/domain/entities/function_catalog.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Function catalog entity.

Purpose:
    Hold the ordered list of formula function names an audit run searches for.

Layer:
    domain

Notes:
    - Names are kept exactly as supplied; matching is case-insensitive
      downstream.
    - The catalog is neither validated nor deduplicated. An empty catalog is
      valid and yields empty usage for every report.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class FunctionCatalog:
    """Immutable, ordered set of function names to detect."""

    names: tuple[str, ...] = ()

    @classmethod
    def of(cls, names: Iterable[str]) -> FunctionCatalog:
        """Build a catalog from any iterable of names, preserving order."""
        return cls(names=tuple(names))

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)
