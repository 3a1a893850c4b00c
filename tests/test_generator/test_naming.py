"""Tests for sdkgen.generator.naming."""

from __future__ import annotations

import pytest

from sdkgen.generator.naming import camel_case, kebab_case, pascal_case, snake_case, split_words


@pytest.mark.parametrize("value, words", [
    ("ApplicationOut", ("application", "out")),
    ("event-type", ("event", "type")),
    ("idempotency-key", ("idempotency", "key")),
    ("app_id", ("app", "id")),
    ("createdAt", ("created", "at")),
    ("HTTPStatus", ("http", "status")),
    ("message-attempt_v2", ("message", "attempt", "v2")),
])
def test_split_words(value: str, words: tuple[str, ...]) -> None:
    assert split_words(value) == words


def test_conversions() -> None:
    assert snake_case("ListResponseEventTypeOut") == "list_response_event_type_out"
    assert kebab_case("ListResponseEventTypeOut") == "list-response-event-type-out"
    assert pascal_case("event-type") == "EventType"
    assert camel_case("idempotency-key") == "idempotencyKey"
    assert camel_case("ApplicationIn") == "applicationIn"


def test_empty() -> None:
    assert snake_case("") == ""
    assert camel_case("") == ""
