# src/formula_usage/tasks/cli.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Formula usage CLI: audit which formula functions saved reports use.

Commands:
    usage        Read every advanced report from the content store and print
                 the (report, function, location) table.
    scan-file    Print the same table for a single report XML file on disk.

Output:
    The table goes to standard output; JSON logs go to standard error.

Environment:
    DATABASE_URL              Async SQLAlchemy URL of the content store.
    DB_SCHEMA                 Schema owning the ``content`` table (sm_access).
    FUNCTION_CATALOG_PATH     JSON array of function names.
    SKIP_MALFORMED_REPORTS    Skip unparseable reports instead of aborting.
    LOG_LEVEL                 Root log level (INFO).

Exit codes:
    0 on success, 1 when the run fails (source fetch or malformed report),
    2 on invalid configuration (settings, log level, function catalog) or an
    unreadable report file.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from formula_usage.adapters.mappers.report_xml_parser import ReportXmlParser
from formula_usage.adapters.presenters.usage_table_presenter import render_usage_table
from formula_usage.adapters.repositories.report_content_repository import (
    SqlAlchemyReportContentRepository,
)
from formula_usage.application.use_cases.reports.audit_function_usage import (
    AuditFunctionUsageRequest,
    AuditFunctionUsageUseCase,
)
from formula_usage.config.settings import Settings
from formula_usage.dependencies.core.bootstrap import bootstrap
from formula_usage.domain.entities.function_catalog import FunctionCatalog
from formula_usage.domain.entities.usage import FunctionUsageTable
from formula_usage.domain.exceptions.base import DomainError
from formula_usage.domain.services.function_usage_scanner import scan_usage
from formula_usage.domain.services.report_normalizer import normalize
from formula_usage.infrastructure.catalog.function_catalog_loader import load_function_catalog
from formula_usage.infrastructure.database.session import get_db_session
from formula_usage.infrastructure.logging.logger import configure_root_logging, get_json_logger

log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _setup_logging(level: str | None = None) -> None:
    """Configure JSON logging or exit with a configuration error."""
    try:
        configure_root_logging(level)
    except ValueError as exc:
        typer.echo(f"error: invalid log level: {exc}", err=True)
        raise typer.Exit(code=2) from exc


def _load_catalog(path: Path) -> FunctionCatalog:
    """Load the function catalog or exit with a configuration error."""
    try:
        return load_function_catalog(path)
    except (OSError, ValueError) as exc:
        log.error("function_catalog.invalid", extra={"path": str(path)})
        typer.echo(f"error: cannot load function catalog {path}: {exc}", err=True)
        raise typer.Exit(code=2) from exc


def _fail(exc: DomainError) -> typer.Exit:
    log.error("report_usage.failed", extra={"code": exc.code, "details": exc.details})
    typer.echo(f"error: {exc}", err=True)
    return typer.Exit(code=1)


def _emit(table: FunctionUsageTable) -> None:
    for line in render_usage_table(table):
        typer.echo(line)


async def _audit(settings: Settings, catalog: FunctionCatalog) -> FunctionUsageTable:
    """Run one audit inside the bootstrap scope (engine disposed on every path)."""
    async with bootstrap(settings) as state:
        async with get_db_session() as session:
            uc = AuditFunctionUsageUseCase(
                repository=SqlAlchemyReportContentRepository(session),
                parser=ReportXmlParser(),
                catalog=catalog,
                skip_malformed=state.settings.skip_malformed_reports,
            )
            return await uc.execute(
                AuditFunctionUsageRequest(
                    content_type=state.settings.content_type,
                    report_type=state.settings.report_type,
                )
            )


@app.command("usage")
def usage(
    database_url: str | None = typer.Option(
        None, envvar="DATABASE_URL", help="Async SQLAlchemy URL."
    ),  # noqa: B008
    catalog_path: Path | None = typer.Option(
        None, "--catalog", help="JSON array of function names to detect."
    ),  # noqa: B008
    content_type: int | None = typer.Option(
        None, min=0, help="content.content_type filter (0 = report)."
    ),  # noqa: B008
    report_type: int | None = typer.Option(
        None, min=0, help="content.report_type filter (0 = advanced report)."
    ),  # noqa: B008
    skip_malformed: bool = typer.Option(
        False,
        "--skip-malformed",
        help="Skip reports whose XML is unusable instead of aborting the run.",
    ),  # noqa: B008
) -> None:
    """Print the function usage table for every saved advanced report.

    Command-line options override the matching environment settings. The
    database pool is released before the process exits, also on failure.
    """
    _setup_logging()

    overrides: dict[str, Any] = {
        "database_url": database_url,
        "function_catalog_path": catalog_path,
        "content_type": content_type,
        "report_type": report_type,
        "skip_malformed_reports": True if skip_malformed else None,
    }
    try:
        settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        log.error("settings.invalid", extra={"errors": exc.error_count()})
        typer.echo(f"error: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    _setup_logging(settings.log_level)
    catalog = _load_catalog(settings.function_catalog_path)

    try:
        table = asyncio.run(_audit(settings, catalog))
    except DomainError as exc:
        raise _fail(exc) from exc

    _emit(table)


@app.command("scan-file")
def scan_file(
    report_path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Report XML file."
    ),  # noqa: B008
    catalog_path: Path = typer.Option(
        Path("function-names.json"), "--catalog", help="JSON array of function names."
    ),  # noqa: B008
) -> None:
    """Print the function usage table for one report XML file (no database)."""
    _setup_logging()
    catalog = _load_catalog(catalog_path)

    try:
        content = report_path.read_bytes()
    except OSError as exc:
        log.error("report_file.unreadable", extra={"path": str(report_path)})
        typer.echo(f"error: cannot read report file {report_path}: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    try:
        raw = ReportXmlParser().parse(content)
        report = normalize(raw)
    except DomainError as exc:
        raise _fail(exc) from exc

    _emit(FunctionUsageTable(usage={report.name: scan_usage(report, catalog)}))


if __name__ == "__main__":
    app()
