# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator

import pytest

from formula_usage.config.settings import get_settings

REPORT_A_XML = """
<report>
  <main>
    <id>101</id>
    <report_name>Report A</report_name>
    <folder_name>Finance</folder_name>
    <version>3</version>
    <show_grid>true</show_grid>
  </main>
  <entity>
    <entity_name>Sales</entity_name>
    <group_by_flag>false</group_by_flag>
  </entity>
  <cell>
    <id>1</id>
    <cell_text>=SUM(Revenue)</cell_text>
    <cell_row>0</cell_row>
    <cell_col>0</cell_col>
  </cell>
  <cell>
    <id>2</id>
    <cell_text>=Count(X)</cell_text>
    <cell_row>0</cell_row>
    <cell_col>1</cell_col>
  </cell>
</report>
""".strip()


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Force pytest-anyio to use asyncio (not trio)."""
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    """Keep the cached Settings singleton from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def report_a_xml() -> str:
    """Report with one SUM cell and one Count cell."""
    return REPORT_A_XML
