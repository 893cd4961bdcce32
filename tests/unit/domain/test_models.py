from __future__ import annotations

"""
Unit tests for Domain Models.

Verifies:
1. Data integrity of TransformResult factories (Success/Error).
2. Immutability of frozen dataclasses.
3. Mode parsing and the error taxonomy.
"""

import dataclasses

import pytest

from codeshaper.domain.errors import ErrorKind, RejectedMarkupError, TransformError, UnparseableJsonError
from codeshaper.domain.languages import LanguageId, Mode
from codeshaper.domain.transform_models import (
    TransformRequest,
    TransformStats,
    create_error_result,
    create_success_result,
)


def _stats() -> TransformStats:
    return TransformStats(
        original_bytes=10,
        output_bytes=5,
        original_size_kb=0.01,
        output_size_kb=0.0,
        delta_kb=0.0,
        delta_percentage=50.0,
    )


def test_create_success_result_populates_fields() -> None:
    result = create_success_result("a", _stats(), Mode.MINIFY, LanguageId.CSS)

    assert result.ok
    assert result.text == "a"
    assert result.language is LanguageId.CSS
    assert result.error == ""
    assert result.error_kind is None


def test_create_error_result_has_no_output() -> None:
    result = create_error_result("Invalid JSON: x", ErrorKind.UNPARSEABLE_JSON, Mode.BEAUTIFY)

    assert not result.ok
    assert result.text == ""
    assert result.stats is None
    assert result.language is LanguageId.UNKNOWN
    assert result.error_kind is ErrorKind.UNPARSEABLE_JSON


def test_models_are_frozen() -> None:
    request = TransformRequest("x")
    assert request.mode is Mode.MINIFY

    with pytest.raises(dataclasses.FrozenInstanceError):
        request.content = "y"  # type: ignore[misc]


@pytest.mark.parametrize("value, expected", [
    ("minify", Mode.MINIFY),
    ("BEAUTIFY", Mode.BEAUTIFY),
    ("format", Mode.BEAUTIFY),
    ("unminify", Mode.BEAUTIFY),
    (Mode.MINIFY, Mode.MINIFY),
])
def test_mode_parse(value, expected: Mode) -> None:
    assert Mode.parse(value) is expected


def test_mode_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        Mode.parse("shrink")


def test_language_values_travel_as_strings() -> None:
    assert LanguageId("java") is LanguageId.JAVA_FAMILY
    assert LanguageId.CSS == "css"
    assert not LanguageId.UNKNOWN.is_known


def test_error_taxonomy() -> None:
    json_error = UnparseableJsonError("Expecting value")
    assert str(json_error) == "Invalid JSON: Expecting value"
    assert json_error.detail == "Expecting value"
    assert isinstance(json_error, TransformError)
    assert isinstance(json_error, ValueError)

    assert RejectedMarkupError("x").kind is ErrorKind.REJECTED_XML_SECURITY_POLICY
