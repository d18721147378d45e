# src/formula_usage/infrastructure/catalog/function_catalog_loader.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Function catalog loader.

Reads the ordered list of function names from a JSON document shaped as a
plain array of strings, e.g. ``["SUM", "AVG", "DATEADD"]``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import TypeAdapter

from formula_usage.domain.entities.function_catalog import FunctionCatalog

__all__ = ["load_function_catalog", "parse_function_catalog"]

logger = logging.getLogger(__name__)

_NAMES_ADAPTER: TypeAdapter[list[str]] = TypeAdapter(list[str])


def parse_function_catalog(document: str | bytes) -> FunctionCatalog:
    """Parse a JSON array of function names.

    Raises:
        pydantic.ValidationError: If the document is not a JSON array of
            strings (``ValidationError`` is a ``ValueError``).
    """
    names = _NAMES_ADAPTER.validate_json(document)
    return FunctionCatalog.of(names)


def load_function_catalog(path: Path) -> FunctionCatalog:
    """Load the catalog file at ``path``.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the file content has the wrong shape.
    """
    catalog = parse_function_catalog(path.read_bytes())
    logger.info(
        "function_catalog.loaded",
        extra={"path": str(path), "function_count": len(catalog)},
    )
    return catalog
