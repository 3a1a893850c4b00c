"""Extract one :class:`~sdkgen.models.Operation` from an Operation Object.

:func:`extract_operation` either returns ``(resource_name, operation)``, or
``None`` when the operation is skipped. Skips are reported on the
diagnostics sink and never fail the run. A handful of shapes are fatal
instead and raise :class:`~sdkgen.exceptions.SpecCompileError`:

* a request body that is not required, carries extensions, or does not
  have exactly one ``application/json`` content entry with a schema;
* a response table with a ``default`` entry, extensions, non-numeric
  status codes, or no success (2xx) response at all;
* success responses that disagree on their body schema.

Operation IDs must look like ``v1.<resource>.<operation>``. Operations
without an ID are ignored silently, malformed IDs are logged at debug
level, and other versions at warning level.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Any, Optional

from sdkgen.compiler.parameters import enforce_string_parameter, resolve_parameter_type
from sdkgen.diagnostics import Diagnostics, Severity
from sdkgen.exceptions import SpecCompileError, UnsupportedSchemaError
from sdkgen.models import HeaderParam, HTTPMethod, Operation, QueryParam
from sdkgen.parser.refs import is_reference, resolve_pointer, schema_name

VERSION_TAG = "v1"
"""The only operation ID version compiled today; later versions are reserved."""

JSON_MEDIA_TYPE = "application/json"

_PATH_TEMPLATE_RE = re.compile(r"\{([^{}]+)\}")
_STATUS_RANGE_RE = re.compile(r"[1-5][Xx]{2}")
_DEFAULT_STYLES = {"path": "simple", "header": "simple", "query": "form", "cookie": "form"}


def extract_operation(
    path: str,
    method: str,
    operation: dict[str, Any],
    document: dict[str, Any],
    diagnostics: Diagnostics,
) -> Optional[tuple[str, Operation]]:
    """Validate and extract one operation.

    Args:
        path: The path template the operation lives under (``/app/{app_id}``).
        method: Lower-case HTTP method token.
        operation: The Operation Object.
        document: The whole document, used to look up response references.
        diagnostics: Sink for skip notes and anomalies; should already carry
            the path and method as context.

    Returns:
        ``(resource_name, operation)`` or ``None`` if the operation is skipped.

    Raises:
        SpecCompileError: For the fatal shapes listed in the module docstring.
    """
    op_id = operation.get("operationId")
    if not op_id:
        return None

    diag = diagnostics.scoped(operation_id=op_id)
    parts = str(op_id).split(".")
    if len(parts) != 3 or not all(parts):
        diag.skip(
            "skipping operation whose ID is not of the form <version>.<resource>.<operation>",
            Severity.DEBUG,
        )
        return None
    version, resource_name, op_name = parts
    if version != VERSION_TAG:
        diag.skip(f"found operation whose ID does not begin with {VERSION_TAG}")
        return None

    try:
        path_params, header_params, query_params = _extract_parameters(
            operation.get("parameters") or [], diag
        )
        _check_path_template(path, path_params)
    except UnsupportedSchemaError as exc:
        diag.skip(str(exc))
        return None

    request_body_schema_name = _request_body_schema_name(operation.get("requestBody"), diag)
    response_body_schema_name = _response_body_schema_name(
        operation.get("responses"), document, diag
    )

    return resource_name, Operation(
        id=op_id,
        name=op_name,
        description=operation.get("description"),
        method=HTTPMethod(method),
        path=path,
        path_params=tuple(path_params),
        header_params=tuple(header_params),
        query_params=tuple(query_params),
        request_body_schema_name=request_body_schema_name,
        response_body_schema_name=response_body_schema_name,
    )


def _extract_parameters(
    parameters: list[Any],
    diag: Diagnostics,
) -> tuple[list[str], list[HeaderParam], list[QueryParam]]:
    """Sort parameters into path, header and query lists.

    Raises:
        UnsupportedSchemaError: For any parameter that should drop the
            whole operation.
    """
    path_params: list[str] = []
    header_params: list[HeaderParam] = []
    query_params: list[QueryParam] = []

    for param in parameters:
        if is_reference(param):
            raise UnsupportedSchemaError("$ref parameters are not currently supported")
        if not isinstance(param, dict):
            raise UnsupportedSchemaError(f"invalid parameter: {param!r}")

        name = param.get("name")
        location = param.get("in")
        if not isinstance(name, str) or not name:
            raise UnsupportedSchemaError(f"parameter without a name (in={location})")
        style = param.get("style", _DEFAULT_STYLES.get(location))

        if location == "path" and style == "simple":
            if not param.get("required", False):
                raise UnsupportedSchemaError(f"optional path parameter `{name}` is not supported")
            try:
                enforce_string_parameter(param)
            except UnsupportedSchemaError as exc:
                raise UnsupportedSchemaError(f"unsupported path parameter `{name}`: {exc}") from exc
            path_params.append(name)

        elif location == "header" and style == "simple":
            try:
                enforce_string_parameter(param)
            except UnsupportedSchemaError as exc:
                raise UnsupportedSchemaError(f"unsupported header parameter `{name}`: {exc}") from exc
            header_params.append(
                HeaderParam(
                    name=name,
                    required=bool(param.get("required", False)),
                    description=param.get("description"),
                )
            )

        elif (
            location == "query"
            and style == "form"
            and not param.get("allowReserved", False)
            and "allowEmptyValue" not in param
        ):
            try:
                field_type = resolve_parameter_type(param)
            except UnsupportedSchemaError as exc:
                raise UnsupportedSchemaError(
                    f"unsupported query parameter type `{name}`: {exc}"
                ) from exc
            query_params.append(
                QueryParam(
                    name=name,
                    required=bool(param.get("required", False)),
                    type=field_type,
                    description=param.get("description"),
                )
            )

        else:
            raise UnsupportedSchemaError(
                f"this kind of parameter is not currently supported "
                f"(name={name}, in={location}, style={style})"
            )

        diag.scoped(parameter=name).debug(f"accepted {location} parameter")

    return path_params, header_params, query_params


def _check_path_template(path: str, path_params: list[str]) -> None:
    """Each ``{name}`` in *path* must be declared exactly once, and nothing else."""
    expected = set(_PATH_TEMPLATE_RE.findall(path))
    declared = Counter(path_params)
    duplicated = sorted(name for name, count in declared.items() if count > 1)
    if duplicated:
        raise UnsupportedSchemaError(f"path parameters declared more than once: {', '.join(duplicated)}")
    if expected != set(declared):
        missing = sorted(expected - set(declared))
        extra = sorted(set(declared) - expected)
        raise UnsupportedSchemaError(
            f"path parameters do not match the path template `{path}` "
            f"(undeclared: {', '.join(missing) or '-'}; not in template: {', '.join(extra) or '-'})"
        )


def _request_body_schema_name(body: Any, diag: Diagnostics) -> Optional[str]:
    if body is None:
        return None
    if is_reference(body):
        diag.warning("$ref request bodies are not currently supported")
        return None

    where = diag.location()
    if not isinstance(body, dict):
        raise SpecCompileError(f"invalid request body ({where})")
    if not body.get("required", False):
        raise SpecCompileError(f"optional request bodies are not supported ({where})")
    if _extensions(body):
        raise SpecCompileError(f"request body extensions are not supported ({where})")

    content = body.get("content") or {}
    if len(content) != 1:
        raise SpecCompileError(
            f"request body must have exactly one content type, found {len(content)} "
            f"({', '.join(content) or 'none'}) ({where})"
        )
    media = content.get(JSON_MEDIA_TYPE)
    if not isinstance(media, dict):
        raise SpecCompileError(
            f"request body content type must be {JSON_MEDIA_TYPE}, found {next(iter(content))} ({where})"
        )
    if _extensions(media):
        raise SpecCompileError(f"request body media type extensions are not supported ({where})")
    if "schema" not in media:
        raise SpecCompileError(f"request body has no JSON schema ({where})")

    return _body_schema_name(media["schema"], "request", diag)


def _response_body_schema_name(
    responses: Any,
    document: dict[str, Any],
    diag: Diagnostics,
) -> Optional[str]:
    where = diag.location()
    if not isinstance(responses, dict) or not responses:
        raise SpecCompileError(f"operation declares no responses ({where})")

    success: list[tuple[int, Any]] = []
    for key, response in responses.items():
        status = str(key)
        if status == "default":
            raise SpecCompileError(f"`default` responses are not supported ({where})")
        if status.startswith("x-"):
            raise SpecCompileError(f"response extensions are not supported ({where})")
        if _STATUS_RANGE_RE.fullmatch(status):
            diag.warning(f"unsupported status code range `{status}`")
            continue
        if not status.isdigit():
            raise SpecCompileError(f"invalid status code `{status}` ({where})")

        code = int(status)
        if 200 <= code < 300:
            success.append((code, response))
        elif code < 100 or code >= 600:
            diag.error(f"invalid status code {code}")
        elif code < 200 or 300 <= code < 400:
            diag.warning(f"unexpected status code {code}")

    if not success:
        raise SpecCompileError(f"every operation must have at least one success (2xx) response ({where})")

    names = {
        code: _response_schema_name(response, document, diag.scoped(status=code))
        for code, response in success
    }
    if len(set(names.values())) > 1:
        found = ", ".join(f"{code}={name or '<no body>'}" for code, name in names.items())
        raise SpecCompileError(f"success responses disagree on the response body schema: {found} ({where})")
    return next(iter(names.values()))


def _response_schema_name(response: Any, document: dict[str, Any], diag: Diagnostics) -> Optional[str]:
    seen: set[str] = set()
    while is_reference(response):
        ref = response["$ref"]
        if not isinstance(ref, str):
            raise SpecCompileError(f"invalid response $ref {ref!r} ({diag.location()})")
        if ref in seen:
            raise SpecCompileError(f"circular response reference `{ref}` ({diag.location()})")
        seen.add(ref)
        response = resolve_pointer(ref, document)

    if not isinstance(response, dict):
        raise SpecCompileError(f"invalid response object ({diag.location()})")

    content = response.get("content") or {}
    if not content:
        return None
    media = content.get(JSON_MEDIA_TYPE)
    if not isinstance(media, dict):
        diag.warning(f"response has no {JSON_MEDIA_TYPE} content (found {', '.join(content)})")
        return None
    if "schema" not in media:
        return None
    return _body_schema_name(media["schema"], "response", diag)


def _body_schema_name(schema: Any, what: str, diag: Diagnostics) -> Optional[str]:
    if isinstance(schema, bool):
        diag.warning(f"unexpected boolean {what} body schema")
        return None
    if not is_reference(schema):
        diag.warning(f"unexpected non-$ref {what} body schema")
        return None
    name = schema_name(schema["$ref"])
    if name is None:
        diag.warning(f"{what} body $ref `{schema['$ref']}` is not a component schema")
    return name


def _extensions(node: dict[str, Any]) -> list[str]:
    return [key for key in node if isinstance(key, str) and key.startswith("x-")]
