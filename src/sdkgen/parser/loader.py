"""Load OpenAPI documents from a URL, local file, or stdin.

This module is the only place that performs I/O on the input document. It
accepts JSON or YAML, detects the format from the file extension or the
HTTP ``Content-Type`` header when it can, and falls back to trying JSON and
then YAML. The result is a plain ``dict`` that
:func:`~sdkgen.compiler.compile_spec` walks directly.

Public functions:

* :func:`load_spec` -- load and parse a document from any supported source.
* :func:`validate_openapi_version` -- make sure the document is OpenAPI 3.x.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from sdkgen.exceptions import SpecParseError

_SUFFIX_HINTS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def load_spec(source: str) -> dict[str, Any]:
    """Load an OpenAPI document from a URL, file path, or stdin (``-``).

    Args:
        source: An ``http(s)://`` URL, a file path, or ``-`` for stdin.

    Returns:
        The parsed document.

    Raises:
        SpecParseError: If the source cannot be read or parsed, or does not
            contain a mapping at the top level.
    """
    if source == "-":
        content, hint, origin = _read_stdin(), "", "stdin"
    elif source.startswith(("http://", "https://")):
        content, hint = _fetch_url(source)
        origin = source
    else:
        content, hint = _read_file(source)
        origin = source

    if not content.strip():
        raise SpecParseError(f"OpenAPI document is empty: {origin}")
    return _parse_content(content, hint=hint)


def _read_stdin() -> str:
    try:
        return sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc


def _fetch_url(url: str) -> tuple[str, str]:
    """Fetch a document over HTTP and return ``(content, format_hint)``."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching OpenAPI document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch OpenAPI document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    return response.text, hint


def _read_file(path: str) -> tuple[str, str]:
    """Read a local document and return ``(content, format_hint)``."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"OpenAPI document not found: {path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read {path}: {exc}") from exc
    return content, _SUFFIX_HINTS.get(file_path.suffix.lower(), "")


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON or YAML.

    JSON is tried first unless *hint* is ``"yaml"``; every JSON document is
    also YAML, so YAML is the fallback. A ``"json"`` hint disables the
    fallback so a broken JSON file reports the JSON error.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _ensure_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _ensure_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise SpecParseError("Failed to parse OpenAPI document as JSON or YAML\n  " + "\n  ".join(errors))


def _ensure_mapping(document: Any) -> dict[str, Any]:
    if not isinstance(document, dict):
        kind = "empty document" if document is None else type(document).__name__
        raise SpecParseError(f"OpenAPI document must be a JSON/YAML object (got {kind})")
    return document


def validate_openapi_version(document: dict[str, Any]) -> str:
    """Return the document's ``openapi`` version if it is 3.x.

    Raises:
        SpecParseError: For Swagger 2.x documents, a missing ``openapi``
            field, or any major version other than 3.
    """
    if "swagger" in document:
        raise SpecParseError(
            f"Swagger {document['swagger']} is not supported. "
            "Only OpenAPI 3.x documents can be compiled."
        )

    version = document.get("openapi")
    if version is None:
        raise SpecParseError("Missing 'openapi' field. Is this an OpenAPI 3.x document?")

    version_str = str(version)
    if not version_str.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version_str}. Only OpenAPI 3.x is supported."
        )
    return version_str
