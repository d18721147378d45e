# src/formula_usage/domain/enums/content.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Content store enumerations.

Purpose:
    Name the integer discriminators used by the content store to classify
    saved items, so that callers do not pass magic numbers around.

Layer:
    domain
"""

from __future__ import annotations

from enum import IntEnum


class ContentType(IntEnum):
    """Kind of saved content item (`content.content_type`)."""

    REPORT = 0


class ReportType(IntEnum):
    """Kind of saved report (`content.report_type`)."""

    ADVANCED_REPORT = 0


__all__ = ["ContentType", "ReportType"]
