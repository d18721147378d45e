# src/formula_usage/adapters/mappers/report_xml_parser.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Report XML parsing adapter.

Purpose:
    Parse a saved report's XML text blob into the raw node tree consumed by the
    report normalizer, without leaking XML parsing details into the domain.

Layer:
    adapters/mappers

Notes:
    - Attributes are ignored; only element structure and text are kept.
    - An element with several same-named children becomes a list, while an
      element with a single such child becomes that child directly. The
      normalizer restores list cardinality for the repeatable sections.
    - Text-only elements become their text exactly as written, surrounding
      whitespace included. Empty elements become ``None``. No numeric or
      boolean conversion is applied.
    - Whitespace-only text between child elements (indentation) is dropped.
      Text mixed with child elements is kept under ``#text``.
    - Entity expansion is disabled.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from xml.parsers.expat import ExpatError

import xmltodict

from formula_usage.domain.exceptions.reports import MalformedReportError

_ROOT_ELEMENT = "report"
_TEXT_KEY = "#text"


def _drop_layout_text(path: Any, key: str, value: Any) -> tuple[str, Any] | None:
    if key == _TEXT_KEY and isinstance(value, str) and not value.strip():
        return None
    return key, value


class ReportXmlParser:
    """Parse raw report XML into a raw report node."""

    def parse(self, content: str | bytes | None) -> Mapping[str, Any]:
        """Parse the provided report XML.

        Args:
            content:
                Raw XML content as text or bytes.

        Returns:
            The mapping found under the ``<report>`` root element.

        Raises:
            MalformedReportError:
                If the content is empty, is not well-formed XML, or its root is
                not a populated ``<report>`` element.
        """
        if content is None or not content.strip():
            raise MalformedReportError("Report definition is empty.")

        try:
            document = xmltodict.parse(
                content,
                xml_attribs=False,
                disable_entities=True,
                strip_whitespace=False,
                cdata_key=_TEXT_KEY,
                postprocessor=_drop_layout_text,
            )
        except (ExpatError, ValueError) as exc:
            raise MalformedReportError(
                "Report definition is not well-formed XML.",
                details={"reason": str(exc)},
            ) from exc

        if _ROOT_ELEMENT not in document:
            raise MalformedReportError(
                "Report definition has an unexpected root element.",
                details={"root": next(iter(document), None)},
            )

        root = document[_ROOT_ELEMENT]
        if not isinstance(root, Mapping):
            raise MalformedReportError("Report definition has an empty <report> element.")
        return root


__all__ = ["ReportXmlParser"]
