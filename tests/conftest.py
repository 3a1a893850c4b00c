"""Shared test fixtures for sdkgen.

Provides the raw documents under ``tests/fixtures``, a diagnostics sink that
does not log, an isolated working directory for config tests, output
managers, and the Typer CLI runner.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from sdkgen.diagnostics import Diagnostics
from sdkgen.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches sys.stdout/sys.stderr at creation time. Once
    CliRunner has restored the real streams those references are closed,
    so a fresh manager is created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw documents
# ---------------------------------------------------------------------------


def load_fixture(name: str) -> dict[str, Any]:
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def minimal_raw() -> dict[str, Any]:
    """One resource (``foo``), one operation, one type (``Foo``)."""
    return load_fixture("minimal.json")


@pytest.fixture
def billing_raw() -> dict[str, Any]:
    """A realistic document mixing supported and skipped operations."""
    return load_fixture("billing.json")


@pytest.fixture
def make_document():
    """Build a document around a ``paths`` table and optional component schemas."""

    def _make(paths: dict[str, Any], schemas: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
        document: dict[str, Any] = {
            "openapi": "3.1.0",
            "info": {"title": "Test", "version": "1.0.0"},
            "paths": paths,
        }
        if schemas is not None:
            document["components"] = {"schemas": schemas}
        document.update(extra)
        return document

    return _make


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


@pytest.fixture
def diagnostics() -> Diagnostics:
    """A sink that keeps records without forwarding them to logging."""
    return Diagnostics(log=None)


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty working directory with no SDKGEN_* variables set.

    Also points XDG_DATA_HOME into tmp_path so crash logs never land in the
    real home directory.
    """
    for var in ["SDKGEN_STRICT_TYPES", "SDKGEN_STRICT_REFS", "SDKGEN_TEMPLATES_DIR"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
