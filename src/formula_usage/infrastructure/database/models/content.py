# src/formula_usage/infrastructure/database/models/content.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Content store model for saved items (reports, dashboards, ...).

The table lives in the ``sm_access`` schema. Deployments using a different
schema name remap it through the engine's ``schema_translate_map`` (see
`formula_usage.infrastructure.database.session`).
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

#: Schema name the model is declared against.
CONTENT_SCHEMA = "sm_access"


class Base(DeclarativeBase):
    """Declarative base for content store models."""

    pass


class Content(Base):
    """A saved content item and its serialized definition.

    Attributes:
        content_type: Kind of item (0 = report).
        report_type: Kind of report (0 = advanced report).
        text_content: Serialized definition; XML for reports.
    """

    __tablename__ = "content"
    __table_args__ = {"schema": CONTENT_SCHEMA}

    content_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    created_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    modified_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    content_type: Mapped[int] = mapped_column(Integer)
    report_type: Mapped[int | None] = mapped_column(Integer)
    text_content: Mapped[str | None] = mapped_column(Text)
