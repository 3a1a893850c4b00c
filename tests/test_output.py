"""Tests for sdkgen.output."""

from __future__ import annotations

import json
import logging

import pytest

from sdkgen.output import (
    OutputFormat,
    OutputLogHandler,
    OutputManager,
    get_output,
    reset_output,
    set_output,
)


class TestFormatResolution:
    def test_auto_is_plain_when_not_a_tty(self) -> None:
        assert OutputManager().format == OutputFormat.PLAIN

    def test_explicit_format(self) -> None:
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        OutputManager().warning("careful")
        assert capsys.readouterr().err == "Warning: careful\n"


class TestDataOutput:
    def test_plain_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_table(["A", "B"], [["1", "2"]])
        assert capsys.readouterr().out == "A\tB\n1\t2\n"

    def test_json_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.JSON).print_table(["Type", "Kind"], [["Foo", "struct"]])
        assert json.loads(capsys.readouterr().out) == [{"Type": "Foo", "Kind": "struct"}]

    def test_print_json_plain(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_json({"a": [1, 2]})
        assert json.loads(capsys.readouterr().out) == {"a": [1, 2]}


class TestDiagnosticStreams:
    def test_quiet_suppresses_info_not_warnings(self, capsys: pytest.CaptureFixture[str]) -> None:
        output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        output.info("hidden")
        output.success("hidden too")
        output.warning("shown")
        output.error("also shown")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Warning: shown\nError: also shown\n"

    def test_debug_requires_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).debug("hidden")
        OutputManager(no_color=True, verbose=True).debug("shown")
        assert capsys.readouterr().err == "[debug] shown\n"

    def test_markup_in_messages_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).info("schema not found [schema_name=Foo]")
        assert "[schema_name=Foo]" in capsys.readouterr().err


class TestGlobalOutput:
    def test_set_and_reset(self) -> None:
        manager = OutputManager(format=OutputFormat.JSON)
        set_output(manager)
        assert get_output() is manager
        reset_output()
        assert get_output() is not manager

    def test_only_helpers_the_commands_use(self) -> None:
        import sdkgen.output as module

        for name in ("suggest", "warning", "print_data"):
            assert not hasattr(module, name)
        assert not hasattr(OutputManager, "suggest")
        assert callable(OutputManager.print_data)


class TestOutputLogHandler:
    @pytest.fixture
    def logger(self) -> logging.Logger:
        log = logging.getLogger("sdkgen.test_output")
        handler = OutputLogHandler()
        log.addHandler(handler)
        log.setLevel(logging.DEBUG)
        log.propagate = False
        yield log
        log.removeHandler(handler)

    def test_routes_by_level(self, logger: logging.Logger, capsys: pytest.CaptureFixture[str]) -> None:
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        logger.debug("d")
        logger.info("i")
        logger.warning("w")
        logger.error("e")
        assert capsys.readouterr().err == "i\nWarning: w\nError: e\n"

    def test_respects_quiet_and_verbose(self, logger: logging.Logger, capsys: pytest.CaptureFixture[str]) -> None:
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True, verbose=True))
        logger.debug("d")
        logger.info("i")
        assert capsys.readouterr().err == "[debug] d\n"
