# tests/unit/tasks/test_cli.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""CLI tests for the formula usage commands (no real database)."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

import formula_usage.infrastructure.database.session as db_session
from formula_usage.domain.entities.content_record import ContentRecord
from formula_usage.domain.exceptions.reports import SourceFetchError
from formula_usage.tasks import cli

_DB_URL = "postgresql+asyncpg://u:p@localhost:5432/db"

runner = CliRunner()


class _FakeRepo:
    def __init__(self, records: Sequence[ContentRecord], error: Exception | None) -> None:
        self._records = records
        self._error = error
        self.calls: list[tuple[int, int]] = []

    async def list_report_contents(
        self, content_type: int, report_type: int
    ) -> Sequence[ContentRecord]:
        self.calls.append((content_type, report_type))
        if self._error is not None:
            raise self._error
        return self._records


class _Harness:
    """Wires fake infrastructure into the CLI module and records lifecycle calls."""

    def __init__(self) -> None:
        self.records: list[ContentRecord] = []
        self.error: Exception | None = None
        self.events: list[str] = []
        self.repo: _FakeRepo | None = None

    def make_repo(self, session: Any) -> _FakeRepo:
        self.repo = _FakeRepo(self.records, self.error)
        return self.repo


@pytest.fixture()
def harness(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> _Harness:
    h = _Harness()
    monkeypatch.chdir(tmp_path)
    for key in ("DATABASE_URL", "SKIP_MALFORMED_REPORTS", "CONTENT_TYPE", "REPORT_TYPE"):
        monkeypatch.delenv(key, raising=False)

    # Handlers bound to the runner's captured stream would outlive the test.
    monkeypatch.setattr(cli, "configure_root_logging", lambda level=None: None)

    def _fake_init(settings: Any) -> None:
        h.events.append("init")

    async def _fake_dispose() -> None:
        h.events.append("dispose")

    @asynccontextmanager
    async def _fake_session() -> AsyncGenerator[object, None]:
        yield object()

    monkeypatch.setattr(db_session, "init_engine_and_sessionmaker", _fake_init)
    monkeypatch.setattr(db_session, "dispose_engine", _fake_dispose)
    monkeypatch.setattr(cli, "get_db_session", _fake_session)
    monkeypatch.setattr(cli, "SqlAlchemyReportContentRepository", h.make_repo)
    return h


@pytest.fixture()
def catalog_file(tmp_path: Path) -> Path:
    path = tmp_path / "functions.json"
    path.write_text(json.dumps(["SUM", "AVG"]))
    return path


def _record(content_id: str, xml: str | None) -> ContentRecord:
    return ContentRecord(
        content_id=content_id,
        name="stored",
        created_date=None,
        modified_date=None,
        text_content=xml,
    )


def test_usage_prints_table(harness: _Harness, catalog_file: Path, report_a_xml: str) -> None:
    harness.records = [_record("101", report_a_xml)]

    result = runner.invoke(
        cli.app, ["usage", "--database-url", _DB_URL, "--catalog", str(catalog_file)]
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == [
        "report_name function location",
        "Report A,SUM,cell_text",
    ]
    assert harness.events == ["init", "dispose"]
    assert harness.repo is not None and harness.repo.calls == [(0, 0)]


def test_usage_reads_database_url_and_filters_from_env(
    harness: _Harness, catalog_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DATABASE_URL", _DB_URL)

    result = runner.invoke(
        cli.app,
        ["usage", "--catalog", str(catalog_file), "--content-type", "2", "--report-type", "5"],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ["report_name function location"]
    assert harness.repo is not None and harness.repo.calls == [(2, 5)]


def test_usage_fetch_failure_exits_1_and_releases_pool(
    harness: _Harness, catalog_file: Path
) -> None:
    harness.error = SourceFetchError("Failed to read report content from the source store.")

    result = runner.invoke(
        cli.app, ["usage", "--database-url", _DB_URL, "--catalog", str(catalog_file)]
    )

    assert result.exit_code == 1
    assert "report_name function location" not in result.output
    assert "Failed to read report content" in result.output
    assert harness.events == ["init", "dispose"]


def test_usage_malformed_report_aborts_by_default(
    harness: _Harness, catalog_file: Path, report_a_xml: str
) -> None:
    harness.records = [_record("101", report_a_xml), _record("102", "<report><main>")]

    result = runner.invoke(
        cli.app, ["usage", "--database-url", _DB_URL, "--catalog", str(catalog_file)]
    )

    assert result.exit_code == 1
    assert "report_name function location" not in result.output
    assert harness.events == ["init", "dispose"]


def test_usage_skip_malformed_flag(
    harness: _Harness, catalog_file: Path, report_a_xml: str
) -> None:
    harness.records = [_record("102", "<report><main>"), _record("101", report_a_xml)]

    result = runner.invoke(
        cli.app,
        [
            "usage",
            "--database-url",
            _DB_URL,
            "--catalog",
            str(catalog_file),
            "--skip-malformed",
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == [
        "report_name function location",
        "Report A,SUM,cell_text",
    ]


def test_usage_missing_database_url_exits_2(harness: _Harness, catalog_file: Path) -> None:
    result = runner.invoke(cli.app, ["usage", "--catalog", str(catalog_file)])

    assert result.exit_code == 2
    assert harness.events == []


def test_usage_bad_catalog_exits_2(harness: _Harness, tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text('{"SUM": true}')

    result = runner.invoke(cli.app, ["usage", "--database-url", _DB_URL, "--catalog", str(bad)])

    assert result.exit_code == 2
    assert harness.events == []


def test_scan_file_prints_single_report_table(
    tmp_path: Path, catalog_file: Path, report_a_xml: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(cli, "configure_root_logging", lambda level=None: None)
    report = tmp_path / "report.xml"
    report.write_text(report_a_xml)

    result = runner.invoke(cli.app, ["scan-file", str(report), "--catalog", str(catalog_file)])

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == [
        "report_name function location",
        "Report A,SUM,cell_text",
    ]


def test_scan_file_malformed_report_exits_1(
    tmp_path: Path, catalog_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(cli, "configure_root_logging", lambda level=None: None)
    report = tmp_path / "report.xml"
    report.write_text("<report><entity/></report>")

    result = runner.invoke(cli.app, ["scan-file", str(report), "--catalog", str(catalog_file)])

    assert result.exit_code == 1
    assert "report_name function location" not in result.output


def test_usage_sync_database_url_exits_2(harness: _Harness, catalog_file: Path) -> None:
    result = runner.invoke(
        cli.app,
        [
            "usage",
            "--database-url",
            "postgresql://u:p@localhost/db",
            "--catalog",
            str(catalog_file),
        ],
    )

    assert result.exit_code == 2
    assert "async driver" in result.output
    assert harness.events == []


def test_usage_unknown_log_level_exits_2(
    harness: _Harness, catalog_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "loud")

    result = runner.invoke(
        cli.app, ["usage", "--database-url", _DB_URL, "--catalog", str(catalog_file)]
    )

    assert result.exit_code == 2
    assert harness.events == []


def test_scan_file_unknown_log_level_exits_2(
    tmp_path: Path, catalog_file: Path, report_a_xml: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "loud")
    report = tmp_path / "report.xml"
    report.write_text(report_a_xml)

    result = runner.invoke(cli.app, ["scan-file", str(report), "--catalog", str(catalog_file)])

    assert result.exit_code == 2
    assert "invalid log level" in result.output
    assert "report_name function location" not in result.output


def test_scan_file_unreadable_report_exits_2(
    tmp_path: Path, catalog_file: Path, report_a_xml: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(cli, "configure_root_logging", lambda level=None: None)
    report = tmp_path / "report.xml"
    report.write_text(report_a_xml)
    read_bytes = Path.read_bytes

    def _read_bytes(self: Path) -> bytes:
        if self.name == "report.xml":
            raise PermissionError(13, "Permission denied", str(self))
        return read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", _read_bytes)

    result = runner.invoke(cli.app, ["scan-file", str(report), "--catalog", str(catalog_file)])

    assert result.exit_code == 2
    assert "cannot read report file" in result.output
    assert "report_name function location" not in result.output
