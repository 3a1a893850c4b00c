"""Typer application and CLI entry point for sdkgen.

The root callback installs the global :class:`~sdkgen.output.OutputManager`
and routes the ``sdkgen`` loggers through it; sub-commands (``generate``,
``inspect``) are registered at import time.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. :class:`~sdkgen.exceptions.SdkgenError` failures exit
with the error's code; anything else writes a crash log under the data
directory and exits with :data:`~sdkgen.exit_codes.EXIT_GENERIC_FAILURE`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from sdkgen import __version__
from sdkgen.commands.generate import generate_command
from sdkgen.commands.inspect import inspect_app
from sdkgen.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="sdkgen",
    help="Compile OpenAPI 3 documents into client SDKs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("generate")(generate_command)
app.add_typer(inspect_app, name="inspect", help="Print the compiled intermediate representation.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sdkgen {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send records of the ``sdkgen`` logger tree to the output manager.

    Replaces any handler installed by an earlier call, so running several
    commands in one process (as the tests do) never duplicates output.
    """
    from sdkgen.output import OutputLogHandler

    root = logging.getLogger("sdkgen")
    for handler in list(root.handlers):
        if isinstance(handler, OutputLogHandler):
            root.removeHandler(handler)
    root.addHandler(OutputLogHandler())
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Config file (default: ./sdkgen.json if present)."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global output manager from the format flags, hooks the
    compiler's diagnostics into it, and stores ``--config`` in ``ctx.obj``
    for the sub-commands.
    """
    from sdkgen.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback to a crash log and return its path."""
    from sdkgen.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now().strftime('%Y%m%d-%H%M%S')}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``sdkgen`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from sdkgen.exceptions import SdkgenError
        from sdkgen.output import error

        if isinstance(exc, SdkgenError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
