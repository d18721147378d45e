# src/formula_usage/domain/exceptions/base.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Domain error root.

Every failure an audit run reports on purpose derives from `DomainError`. The
CLI maps it to exit code 1 and logs its ``code`` and ``details``.

Layer:
    domain/exceptions
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Root of the audit's expected failures.

    Attributes:
        code:
            Stable identifier, overridden per subclass.
        message:
            Operator-facing text; also what ``str(exc)`` returns.
        details:
            Structured context for log records (ids, filter values, reasons).
    """

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details) if details else {}

    def __str__(self) -> str:
        return self.message
