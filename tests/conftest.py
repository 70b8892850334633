"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

from swagger_scan.core.diagnostics import DiagnosticLog
from swagger_scan.core.parser import SwaggerParser


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


def php(body: str) -> str:
    """Dedent ``body`` and prefix it with the PHP open tag."""
    return "<?php\n" + dedent(body).strip("\n") + "\n"


@pytest.fixture
def diagnostics() -> DiagnosticLog:
    return DiagnosticLog()


@pytest.fixture
def parse_php(diagnostics: DiagnosticLog) -> Callable[[str], SwaggerParser]:
    """Parse an inline PHP snippet; diagnostics land in the ``diagnostics`` fixture."""

    def _parse(body: str) -> SwaggerParser:
        return SwaggerParser.from_source(php(body), path="Example.php", diagnostics=diagnostics)

    return _parse


@pytest.fixture
def write_php(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an inline PHP snippet below ``tmp_path`` and return its path."""

    def _write(relative: str, body: str) -> Path:
        target = tmp_path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(php(body))
        return target

    return _write
