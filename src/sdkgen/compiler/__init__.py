"""OpenAPI document -> intermediate representation.

This sub-package is the compiler front end. It walks a loaded OpenAPI
document and produces a :class:`~sdkgen.models.CompiledSpec`:

1. :func:`~sdkgen.compiler.api.build_api` groups the supported operations
   of ``paths`` into resources.
2. :func:`~sdkgen.compiler.types.resolve_types` builds the named types the
   operations' bodies refer to from ``components.schemas``.
3. :func:`~sdkgen.compiler.types.check_query_param_refs` reports query
   parameters whose type did not make it into the result.

Typical usage::

    from sdkgen.compiler import compile_spec
    from sdkgen.parser import load_spec

    compiled = compile_spec(load_spec("openapi.json"))
    for name, resource in compiled.api.resources.items():
        print(name, [op.name for op in resource.operations])

Sub-modules:

* :mod:`~sdkgen.compiler.api` -- paths table -> resources.
* :mod:`~sdkgen.compiler.operations` -- one operation, its parameters and bodies.
* :mod:`~sdkgen.compiler.parameters` -- parameter schema checks.
* :mod:`~sdkgen.compiler.field_types` -- schema -> field type.
* :mod:`~sdkgen.compiler.types` -- component schema -> named type.
"""

from __future__ import annotations

from typing import Any, Optional

from sdkgen.compiler.api import build_api
from sdkgen.compiler.types import check_query_param_refs, resolve_types
from sdkgen.diagnostics import Diagnostics
from sdkgen.models import CompiledSpec, GeneratorConfig


def compile_spec(
    document: dict[str, Any],
    config: Optional[GeneratorConfig] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> CompiledSpec:
    """Compile *document* into resources and named types.

    Args:
        document: A loaded OpenAPI 3.x document.
        config: Strictness settings; defaults to :class:`GeneratorConfig()`.
        diagnostics: Sink for skip notes and anomalies. A fresh one is used
            when omitted.

    Raises:
        SpecCompileError: If the document is malformed enough that partial
            output would be misleading.
    """
    config = config or GeneratorConfig()
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    api = build_api(document, diagnostics)
    schemas = (document.get("components") or {}).get("schemas") or {}
    types = resolve_types(
        api,
        schemas,
        diagnostics,
        strict_types=config.strict_types,
        strict_refs=config.strict_refs,
    )
    check_query_param_refs(api, types, diagnostics, strict_refs=config.strict_refs)
    return CompiledSpec(api=api, types=types)


__all__ = ["compile_spec", "build_api", "resolve_types"]
