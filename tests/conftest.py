"""Shared fixtures for harvester tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from mlscraper.common.lxml_page_element import LxmlPageElement
from mlscraper.config import RunConfig
from tests.pages import BASE_URL


@pytest.fixture
def page_from_html() -> Callable[[str, str], LxmlPageElement]:
    """Build a snapshot from HTML, as the page accessor does."""

    def build(content: str, url: str = f"{BASE_URL}/") -> LxmlPageElement:
        return LxmlPageElement.from_html(content, url)

    return build


@pytest.fixture
def output_path(tmp_path: Path) -> Path:
    return tmp_path / "musicleague-submissions.csv"


@pytest.fixture
def make_config(output_path: Path) -> Callable[..., RunConfig]:
    def build(**overrides) -> RunConfig:
        overrides.setdefault("output_path", output_path)
        return RunConfig(**overrides)

    return build


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()
