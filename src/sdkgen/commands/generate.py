"""``sdkgen generate`` -- compile a document and render client SDKs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from sdkgen.commands import handle_errors, load_and_compile
from sdkgen.config import resolve_config
from sdkgen.exceptions import InvalidUsageError
from sdkgen.generator import format_files, write_target
from sdkgen.models import TargetConfig, TargetLanguage
from sdkgen.output import debug, success


def generate_command(
    ctx: typer.Context,
    spec: str = typer.Argument(..., help="OpenAPI document: file path, URL, or '-' for stdin."),
    targets: Optional[list[TargetLanguage]] = typer.Option(
        None, "--target", "-t", help="Language to generate (repeatable)."
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Output directory for the --target languages."
    ),
    package: str = typer.Option(
        "client", "--package", help="Package / namespace name for C#, Go and Kotlin."
    ),
    no_format: bool = typer.Option(
        False, "--no-format", help="Do not run the language formatters."
    ),
    strict_types: Optional[bool] = typer.Option(
        None,
        "--strict-types/--no-strict-types",
        help="Fail when a referenced type cannot be built.",
    ),
    strict_refs: Optional[bool] = typer.Option(
        None,
        "--strict-refs/--no-strict-refs",
        help="Fail when a body references a missing schema.",
    ),
    templates_dir: Optional[Path] = typer.Option(
        None, "--templates-dir", help="Directory with <language>/*.j2 template overrides."
    ),
) -> None:
    """Generate client code for one or more languages.

    With a single ``--target`` the files go straight into ``--output-dir``;
    with several, each language gets its own ``<output-dir>/<language>``
    sub-directory. Without ``--target`` the targets of the config file are
    used.

    Example::

        sdkgen generate openapi.json -t rust -o clients/rust/src
        sdkgen generate openapi.json -t go -t kotlin -o clients
    """
    config_path = (ctx.obj or {}).get("config")

    with handle_errors():
        cli_targets = _cli_targets(targets or [], output_dir, package)
        config = resolve_config(
            config_path=config_path,
            cli_strict_types=strict_types,
            cli_strict_refs=strict_refs,
            cli_templates_dir=str(templates_dir) if templates_dir else None,
            cli_targets=cli_targets,
        )
        if not config.targets:
            raise InvalidUsageError(
                "No target languages: pass --target/-t or list targets in sdkgen.json"
            )

        compiled, _ = load_and_compile(spec, config)

        for target in config.targets:
            paths = write_target(compiled, target, config.templates_dir)
            if target.format and not no_format:
                debug(f"Formatting {len(paths)} {target.language.value} file(s)")
                format_files(target.language, paths, target.formatter)
            success(f"Wrote {len(paths)} {target.language.value} file(s) to {target.output_dir}")


def _cli_targets(
    languages: list[TargetLanguage],
    output_dir: Optional[Path],
    package: str,
) -> list[TargetConfig]:
    if not languages:
        if output_dir is not None:
            raise InvalidUsageError("--output-dir needs at least one --target")
        return []
    if output_dir is None:
        raise InvalidUsageError("--target needs --output-dir/-o")

    unique = list(dict.fromkeys(languages))
    if len(unique) == 1:
        return [TargetConfig(language=unique[0], output_dir=str(output_dir), package=package)]
    return [
        TargetConfig(language=lang, output_dir=str(output_dir / lang.value), package=package)
        for lang in unique
    ]
