"""Built-in CLI sub-commands for sdkgen.

* :mod:`~sdkgen.commands.generate` -- compile a document and render SDKs.
* :mod:`~sdkgen.commands.inspect` -- print the compiled IR.

Both load and compile the document the same way, through
:func:`load_and_compile`, and report :class:`~sdkgen.exceptions.SdkgenError`
failures through :func:`handle_errors`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from sdkgen.compiler import compile_spec
from sdkgen.diagnostics import Diagnostics, Severity
from sdkgen.exceptions import SdkgenError
from sdkgen.models import CompiledSpec, GeneratorConfig
from sdkgen.output import debug, error, info
from sdkgen.parser import load_spec, validate_openapi_version


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn an :class:`SdkgenError` into an error line and its exit code."""
    try:
        yield
    except SdkgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def load_and_compile(
    source: str,
    config: GeneratorConfig,
) -> tuple[CompiledSpec, Diagnostics]:
    """Load *source*, check it is OpenAPI 3.x, and compile it.

    Prints a one-line summary of the result on stderr.

    Raises:
        SpecParseError: If the document cannot be loaded.
        SpecCompileError: If compilation fails.
    """
    document = load_spec(source)
    version = validate_openapi_version(document)
    debug(f"Loaded OpenAPI {version} document from {source}")

    diagnostics = Diagnostics()
    compiled = compile_spec(document, config, diagnostics)
    info(summarize(compiled, diagnostics))
    return compiled, diagnostics


def summarize(compiled: CompiledSpec, diagnostics: Diagnostics) -> str:
    """One line such as ``Compiled 5 operation(s) in 2 resource(s) and 5 type(s),
    skipped 3 operation(s), with 2 warning(s) and 0 error(s)``.
    """
    operations = sum(1 for _ in compiled.api.operations())
    summary = (
        f"Compiled {operations} operation(s) in {len(compiled.api.resources)} "
        f"resource(s) and {len(compiled.types)} type(s)"
    )
    skipped = len(diagnostics.skipped())
    if skipped:
        summary += f", skipped {skipped} operation(s)"
    warnings = diagnostics.count(Severity.WARNING)
    errors = diagnostics.count(Severity.ERROR)
    if warnings or errors:
        summary += f", with {warnings} warning(s) and {errors} error(s)"
    return summary
