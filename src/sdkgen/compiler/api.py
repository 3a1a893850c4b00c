"""Build the :class:`~sdkgen.models.Api` from a document's ``paths`` table."""

from __future__ import annotations

from typing import Any

from sdkgen.compiler.operations import extract_operation
from sdkgen.diagnostics import Diagnostics, Severity
from sdkgen.exceptions import SpecCompileError
from sdkgen.models import Api, HTTPMethod, Operation, Resource
from sdkgen.parser.refs import is_reference

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def build_api(document: dict[str, Any], diagnostics: Diagnostics) -> Api:
    """Group every supported operation of *document* into resources.

    Path items are visited in document order and so are the operations
    inside each of them, which gives the order of operations within a
    resource. Resources themselves are sorted by name.

    Args:
        document: The OpenAPI document.
        diagnostics: Sink receiving skip notes and anomalies.

    Returns:
        The resulting :class:`~sdkgen.models.Api`.

    Raises:
        SpecCompileError: If a path item is a ``$ref``, or an operation
            is malformed enough to be fatal (see
            :func:`~sdkgen.compiler.operations.extract_operation`).
    """
    operations: dict[str, list[Operation]] = {}

    for path, path_item in (document.get("paths") or {}).items():
        path_diag = diagnostics.scoped(path=path)
        if is_reference(path_item):
            raise SpecCompileError(f"$ref paths are currently not supported (path={path})")
        if not isinstance(path_item, dict):
            raise SpecCompileError(f"invalid path item (path={path})")
        if path_item.get("parameters"):
            path_diag.info("parameters at the path item level are not currently supported")
            for method, operation in path_item.items():
                if method in _HTTP_METHODS and isinstance(operation, dict) and operation.get("operationId"):
                    path_diag.scoped(method=method, operation_id=operation["operationId"]).skip(
                        "skipping operation under a path item with parameters", Severity.DEBUG
                    )
            continue

        for method, operation in path_item.items():
            if method not in _HTTP_METHODS or not isinstance(operation, dict):
                continue
            extracted = extract_operation(
                path, method, operation, document, path_diag.scoped(method=method)
            )
            if extracted is None:
                continue
            resource_name, op = extracted
            operations.setdefault(resource_name, []).append(op)

    return Api(
        resources={
            name: Resource(name=name, operations=tuple(operations[name]))
            for name in sorted(operations)
        }
    )
