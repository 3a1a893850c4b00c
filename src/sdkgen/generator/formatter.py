"""Run a language's source formatter over freshly generated files.

The templates aim for readable output but do not try to get indentation and
line wrapping exactly right; the formatter of each ecosystem does that.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from sdkgen.exceptions import FormatterError
from sdkgen.models import TargetLanguage

DEFAULT_FORMATTERS: dict[TargetLanguage, tuple[str, ...]] = {
    TargetLanguage.CSHARP: ("dotnet", "csharpier"),
    TargetLanguage.GO: ("gofmt", "-w"),
    TargetLanguage.JAVASCRIPT: ("npx", "prettier", "--write"),
    TargetLanguage.KOTLIN: ("ktfmt",),
    TargetLanguage.RUST: ("rustfmt", "--edition", "2021"),
}


def formatter_command(
    language: TargetLanguage,
    paths: Sequence[Path],
    command: Optional[Sequence[str]] = None,
) -> list[str]:
    """Build the formatter invocation: the command followed by every path."""
    base = list(command) if command else list(DEFAULT_FORMATTERS[language])
    return base + [str(p) for p in paths]


def format_files(
    language: TargetLanguage,
    paths: Sequence[Path],
    command: Optional[Sequence[str]] = None,
) -> None:
    """Format *paths* in place.

    Args:
        language: Selects the default formatter.
        paths: Files to format. Nothing is run when empty.
        command: Formatter command overriding the language default.

    Raises:
        FormatterError: If the formatter is not installed or exits non-zero.
    """
    if not paths:
        return

    argv = formatter_command(language, paths, command)
    if shutil.which(argv[0]) is None:
        raise FormatterError(f"Formatter '{argv[0]}' not found on PATH (use --no-format to skip)")

    try:
        result = subprocess.run(argv, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise FormatterError(f"Failed to run formatter '{argv[0]}': {exc}") from exc

    if result.returncode != 0:
        detail = (result.stderr or result.stdout).strip()
        raise FormatterError(
            f"Formatter '{argv[0]}' exited with code {result.returncode}"
            + (f": {detail}" if detail else "")
        )
