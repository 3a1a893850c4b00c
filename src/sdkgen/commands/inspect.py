"""Inspect commands -- look at what the compiler makes of a document.

Read-only: the document is loaded and compiled exactly as ``generate``
would, and the resulting IR is printed instead of rendered. Tables follow
the global ``--json``/``--plain`` flags; ``inspect ir`` always prints JSON.
"""

from __future__ import annotations

from typing import Optional

import typer

from sdkgen.commands import handle_errors, load_and_compile
from sdkgen.config import resolve_config
from sdkgen.models import CompiledSpec, FieldType, StructData
from sdkgen.output import info, print_json, print_table


inspect_app = typer.Typer(no_args_is_help=True)

_SPEC_ARGUMENT_HELP = "OpenAPI document: file path, URL, or '-' for stdin."


def _compile(ctx: typer.Context, spec: str, strict: Optional[bool]) -> CompiledSpec:
    config = resolve_config(
        config_path=(ctx.obj or {}).get("config"),
        cli_strict_types=strict,
        cli_strict_refs=strict,
    )
    compiled, _ = load_and_compile(spec, config)
    return compiled


def describe_field_type(field_type: FieldType) -> str:
    """Language-neutral spelling of a field type, e.g. ``list<map<Foo>>``."""
    if field_type.item_type is not None:
        return f"{field_type.kind.value}<{describe_field_type(field_type.item_type)}>"
    if field_type.value_type is not None:
        return f"{field_type.kind.value}<{describe_field_type(field_type.value_type)}>"
    if field_type.name is not None:
        return field_type.name
    return field_type.kind.value


@inspect_app.command("resources")
def inspect_resources(
    ctx: typer.Context,
    spec: str = typer.Argument(..., help=_SPEC_ARGUMENT_HELP),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--no-strict", help="Treat unbuildable types and missing schemas as errors."
    ),
) -> None:
    """List the compiled operations, grouped by resource.

    Example::

        sdkgen inspect resources openapi.json
    """
    with handle_errors():
        compiled = _compile(ctx, spec, strict)

    headers = ["Resource", "Operation", "Method", "Path", "Request", "Response"]
    rows: list[list[str]] = []
    for resource in compiled.api.resources.values():
        for op in resource.operations:
            rows.append([
                resource.name,
                op.name,
                op.method.value.upper(),
                op.path,
                op.request_body_schema_name or "-",
                op.response_body_schema_name or "-",
            ])

    if not rows:
        info("No supported operations in this document.")
        return
    print_table(headers, rows, title=f"Resources ({len(compiled.api.resources)})")


@inspect_app.command("types")
def inspect_types(
    ctx: typer.Context,
    spec: str = typer.Argument(..., help=_SPEC_ARGUMENT_HELP),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--no-strict", help="Treat unbuildable types and missing schemas as errors."
    ),
) -> None:
    """List the named types reachable from the operations.

    Example::

        sdkgen inspect types openapi.json
    """
    with handle_errors():
        compiled = _compile(ctx, spec, strict)

    headers = ["Type", "Kind", "Fields"]
    rows: list[list[str]] = []
    for name, named_type in compiled.types.types.items():
        if isinstance(named_type.data, StructData):
            fields = ", ".join(
                f"{f.name}: {describe_field_type(f.type)}" for f in named_type.data.fields
            )
        else:
            fields = f"{len(named_type.data.variants)} variant(s)"
        rows.append([name, named_type.data.kind, fields or "-"])

    if not rows:
        info("No named types referenced by the operations.")
        return
    print_table(headers, rows, title=f"Types ({len(rows)})")


@inspect_app.command("ir")
def inspect_ir(
    ctx: typer.Context,
    spec: str = typer.Argument(..., help=_SPEC_ARGUMENT_HELP),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--no-strict", help="Treat unbuildable types and missing schemas as errors."
    ),
) -> None:
    """Dump the whole intermediate representation as JSON.

    Example::

        sdkgen inspect ir openapi.json > ir.json
    """
    with handle_errors():
        compiled = _compile(ctx, spec, strict)
    print_json(compiled.model_dump(mode="json"))
