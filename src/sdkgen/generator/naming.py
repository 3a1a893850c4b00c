"""Identifier case conversion for generated code and file names."""

from __future__ import annotations

import re
from functools import lru_cache

_WORD_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")


@lru_cache(maxsize=1024)
def split_words(value: str) -> tuple[str, ...]:
    """Split an identifier into lower-case words.

    Examples:
        >>> split_words("EndpointHeadersIn")
        ('endpoint', 'headers', 'in')
        >>> split_words("message-attempt_v2")
        ('message', 'attempt', 'v2')
        >>> split_words("HTTPStatus")
        ('http', 'status')
    """
    value = _ACRONYM_BOUNDARY_RE.sub(r"\1_\2", value)
    value = _WORD_BOUNDARY_RE.sub(r"\1_\2", value)
    return tuple(word.lower() for word in _SEPARATOR_RE.split(value) if word)


def snake_case(value: str) -> str:
    return "_".join(split_words(value))


def kebab_case(value: str) -> str:
    return "-".join(split_words(value))


def pascal_case(value: str) -> str:
    return "".join(word.capitalize() for word in split_words(value))


def camel_case(value: str) -> str:
    pascal = pascal_case(value)
    return pascal[:1].lower() + pascal[1:]
