"""Render a :class:`~sdkgen.models.CompiledSpec` into source files with Jinja2.

Every target language ships two templates under ``generator/templates/<language>/``:

* ``resource.j2`` -- rendered once per resource, with ``resource`` in context.
* ``type.j2`` -- rendered once per named type, with ``type`` in context.

Both also get ``api``, ``types``, ``language`` and ``package``. A
``templates_dir`` override is searched first, so a project can replace one
template and keep the bundled other.

Template helpers:

* filter ``typename`` -- the language's
  :class:`~sdkgen.generator.typenames.TypeNameProjector`;
* filters ``snake_case``, ``kebab_case``, ``camel_case``, ``pascal_case``;
* filter ``comment(prefix)`` -- prefix every line of a description;
* filter ``referenced_names`` -- sorted names of the types a type or
  operation refers to (for imports);
* filter ``uses_datetime`` -- whether a type has a date-time anywhere;
* test ``datetime`` -- ``{% if field.type is datetime %}``;
* global ``api_extra(resource, operation)`` -- hand-written code from
  ``<language>/api_extra/<resource>_<operation>.<ext>`` in the search path,
  added verbatim after that operation in the resource file (empty when the
  file does not exist).

Output layout is ``<output_dir>/api/<resource>.<ext>`` and
``<output_dir>/models/<type>.<ext>``, with file stems in the language's
usual case.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

import jinja2
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from sdkgen.exceptions import TemplateError
from sdkgen.generator.naming import camel_case, kebab_case, pascal_case, snake_case
from sdkgen.generator.typenames import PROJECTORS
from sdkgen.models import (
    CompiledSpec,
    FieldKind,
    FieldType,
    Operation,
    StructData,
    TargetConfig,
    TargetLanguage,
    Type,
)


TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the bundled template directory (``generator/templates/``)."""


@dataclass(frozen=True)
class TargetLayout:
    """File naming for one target language."""

    extension: str
    file_stem: Callable[[str], str]


LAYOUTS: dict[TargetLanguage, TargetLayout] = {
    TargetLanguage.CSHARP: TargetLayout("cs", pascal_case),
    TargetLanguage.GO: TargetLayout("go", snake_case),
    TargetLanguage.JAVASCRIPT: TargetLayout("ts", camel_case),
    TargetLanguage.KOTLIN: TargetLayout("kt", pascal_case),
    TargetLanguage.RUST: TargetLayout("rs", snake_case),
}


def create_environment(
    language: TargetLanguage,
    templates_dir: Optional[Union[str, Path]] = None,
) -> Environment:
    """Create the Jinja2 environment for *language*.

    Undefined variables are errors, and block tags do not leave blank lines
    behind. Generated code is not HTML, so autoescaping is off.
    """
    search_path = []
    if templates_dir is not None:
        search_path.append(str(Path(templates_dir) / language.value))
    search_path.append(str(TEMPLATE_DIR / language.value))

    env = Environment(
        loader=FileSystemLoader(search_path),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters.update(
        typename=PROJECTORS[language],
        snake_case=snake_case,
        kebab_case=kebab_case,
        camel_case=camel_case,
        pascal_case=pascal_case,
        comment=_comment,
        referenced_names=_referenced_names,
        uses_datetime=_uses_datetime,
    )
    env.tests["datetime"] = lambda field_type: field_type.is_datetime
    env.globals["api_extra"] = _api_extra_lookup(env, LAYOUTS[language].extension)
    return env


def render_target(
    compiled: CompiledSpec,
    language: TargetLanguage,
    templates_dir: Optional[Union[str, Path]] = None,
    package: str = "client",
) -> dict[Path, str]:
    """Render every resource and type for *language*.

    Returns:
        Rendered source text keyed by path relative to the output directory.

    Raises:
        TemplateError: If a template is missing or fails to render.
        ProjectionError: If a field type has no name in *language* yet.
    """
    env = create_environment(language, templates_dir)
    layout = LAYOUTS[language]
    resource_template = _get_template(env, "resource.j2")
    type_template = _get_template(env, "type.j2")
    shared = {
        "api": compiled.api,
        "types": compiled.types,
        "language": language.value,
        "package": package,
    }

    files: dict[Path, str] = {}
    for name, resource in compiled.api.resources.items():
        rel = Path("api") / f"{layout.file_stem(name)}.{layout.extension}"
        files[rel] = _render(resource_template, resource=resource, **shared)
    for name, named_type in compiled.types.types.items():
        rel = Path("models") / f"{layout.file_stem(name)}.{layout.extension}"
        files[rel] = _render(type_template, type=named_type, **shared)
    return files


def write_target(
    compiled: CompiledSpec,
    target: TargetConfig,
    templates_dir: Optional[Union[str, Path]] = None,
) -> list[Path]:
    """Render *target* and write the files under ``target.output_dir``.

    Nothing is written unless every file rendered, so a projection error
    never leaves a half-generated SDK behind.

    Returns:
        The written paths, sorted.
    """
    files = render_target(compiled, target.language, templates_dir, target.package)
    output_dir = Path(target.output_dir)
    written = []
    for rel in sorted(files):
        path = output_dir / rel
        _atomic_write(path, files[rel])
        written.append(path)
    return written


def _api_extra_lookup(env: Environment, extension: str) -> Callable[[str, str], str]:
    """Build the ``api_extra(resource, operation)`` template global.

    It returns the verbatim text of ``api_extra/<resource>_<operation>.<ext>``
    (snake_case names) from the template search path, or ``""`` when there
    is no such file. The text is spliced into the resource after the
    operation's generated method, without being rendered.
    """

    def api_extra(resource_name: str, operation_name: str) -> str:
        name = f"api_extra/{snake_case(resource_name)}_{snake_case(operation_name)}.{extension}"
        try:
            source, _, _ = env.loader.get_source(env, name)
        except jinja2.TemplateNotFound:
            return ""
        return source.rstrip("\n")

    return api_extra


def _get_template(env: Environment, name: str) -> jinja2.Template:
    try:
        return env.get_template(name)
    except jinja2.TemplateNotFound as exc:
        raise TemplateError(f"Template '{name}' not found in {', '.join(env.loader.searchpath)}") from exc
    except jinja2.TemplateSyntaxError as exc:
        raise TemplateError(f"Syntax error in template '{exc.name}' line {exc.lineno}: {exc.message}") from exc


def _render(template: jinja2.Template, **context: Any) -> str:
    try:
        return template.render(**context)
    except jinja2.TemplateError as exc:
        raise TemplateError(f"Failed to render '{template.name}': {exc}") from exc


def _comment(text: Optional[str], prefix: str) -> str:
    if not text:
        return ""
    return "\n".join(f"{prefix}{line}".rstrip() for line in text.strip().splitlines())


def _referenced_names(item: Union[Type, Operation]) -> list[str]:
    if isinstance(item, Type):
        names = set(item.referenced_names())
        names.discard(item.name)
    else:
        names = {item.request_body_schema_name, item.response_body_schema_name}
        for param in item.query_params:
            names.update(param.type.referenced_names())
        names.discard(None)
    return sorted(names)


def _contains_kind(field_type: FieldType, kind: FieldKind) -> bool:
    if field_type.kind == kind:
        return True
    return any(
        _contains_kind(inner, kind)
        for inner in (field_type.item_type, field_type.value_type)
        if inner is not None
    )


def _uses_datetime(named_type: Type) -> bool:
    if not isinstance(named_type.data, StructData):
        return False
    return any(_contains_kind(f.type, FieldKind.DATETIME) for f in named_type.data.fields)


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory and a rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
