# src/formula_usage/domain/entities/content_record.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Saved content record entity.

Purpose:
    Represent one row fetched from the content store: a saved item's identity,
    audit timestamps and the raw text blob holding its XML definition.

Layer:
    domain
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ContentRecord:
    """A saved content item as read from the source store.

    Args:
        content_id: Unique identifier of the content item.
        name: Display name stored alongside the item.
        created_date: Creation timestamp, if recorded.
        modified_date: Last modification timestamp, if recorded.
        text_content: Raw XML report definition. May be empty or malformed;
            parsing happens downstream.
    """

    content_id: str
    name: str
    created_date: datetime | None
    modified_date: datetime | None
    text_content: str | None
