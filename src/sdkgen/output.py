"""Output formatting with strict stdout/stderr discipline.

* **stdout** -- data only (``inspect`` tables and JSON). This is what
  downstream tools pipe and parse.
* **stderr** -- everything else: compiler diagnostics, progress, the
  summary line, warnings and errors.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb`` and
  ``--no-color``.

Two layers are exposed:

1. :class:`OutputManager` -- holds the format, the two Rich consoles and the
   quiet/verbose flags. Created once in :func:`~sdkgen.app.main_callback`
   and installed with :func:`set_output`.
2. Module-level helpers (:func:`info`, :func:`error`, ...) that delegate to
   the installed manager.

:class:`OutputLogHandler` bridges the standard :mod:`logging` module into the
manager, which is how compiler diagnostics reach the terminal.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Supported output formats.

    ``AUTO`` resolves to ``RICH`` on an interactive TTY with colour enabled,
    to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes every piece of CLI output to the right stream and format.

    Args:
        format: Desired output format. ``AUTO`` resolves by TTY detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational messages on stderr.
        verbose: Show debug messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any) -> None:
        """Print *data* as JSON: highlighted in Rich mode, raw otherwise."""
        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print tabular data to stdout in the active format.

        * **Rich** -- a styled :class:`~rich.table.Table`.
        * **JSON** -- an array of objects keyed by header.
        * **Plain** -- tab-separated values with a header line.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for h in headers:
                table.add_column(h)
            for row in rows:
                table.add_row(*(escape(cell) for cell in row))
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Informational message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._err(message, "{}")

    def success(self, message: str) -> None:
        """Green success message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._err(message, "[green]{}[/green]")

    def warning(self, message: str) -> None:
        """Yellow warning. Shown even with ``--quiet``."""
        self._err(message, "[yellow]Warning:[/yellow] {}", plain_prefix="Warning: ")

    def error(self, message: str) -> None:
        """Bold red error. Never suppressed."""
        self._err(message, "[bold red]Error:[/bold red] {}", plain_prefix="Error: ")

    def debug(self, message: str) -> None:
        """Debug message. Only shown with ``--verbose``."""
        if self._verbose:
            self._err(message, "[dim]\\[debug] {}[/dim]", plain_prefix="[debug] ")

    def _err(self, message: str, markup: str, plain_prefix: str = "") -> None:
        if self._no_color:
            print(f"{plain_prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup.format(escape(message)))


class OutputLogHandler(logging.Handler):
    """Logging handler that writes records through the global :class:`OutputManager`.

    ``DEBUG`` goes to :meth:`~OutputManager.debug`, ``INFO`` to
    :meth:`~OutputManager.info`, ``WARNING`` to :meth:`~OutputManager.warning`,
    and ``ERROR`` and above to :meth:`~OutputManager.error`, so the
    ``--quiet``/``--verbose`` flags apply to log records too.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            output = get_output()
            if record.levelno >= logging.ERROR:
                output.error(message)
            elif record.levelno >= logging.WARNING:
                output.warning(message)
            elif record.levelno >= logging.INFO:
                output.info(message)
            else:
                output.debug(message)
        except Exception:
            self.handleError(record)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager`."""
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global :class:`OutputManager` (used between tests)."""
    global _output
    _output = None


def print_json(data: Any) -> None:
    get_output().print_json(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def debug(message: str) -> None:
    get_output().debug(message)
