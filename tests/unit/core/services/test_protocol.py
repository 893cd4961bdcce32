from __future__ import annotations

"""
Unit tests for the Request/Response Protocol Adapter.

Verifies message parsing, result rendering for both modes, and that every
failure (bad JSON, rejected markup, bad requests, unexpected exceptions)
becomes a single error response instead of an exception.
"""

from unittest.mock import patch

from codeshaper.core.services.protocol import (
    handle_message,
    process_request,
    request_from_message,
    result_to_message,
)
from codeshaper.domain.errors import ErrorKind
from codeshaper.domain.languages import LanguageId, Mode
from codeshaper.domain.transform_models import TransformRequest

CSS_SOURCE = "a{color:red;background:blue}"

# -----------------------------------------------------------------------------
# SUCCESS PATHS
# -----------------------------------------------------------------------------

def test_minify_response_shape() -> None:
    response = handle_message({"content": CSS_SOURCE, "fileType": "css"}, Mode.MINIFY)

    assert response["success"] is True
    assert response["minifiedCode"] == CSS_SOURCE
    assert set(response["stats"]) == {"originalSize", "minifiedSize", "reduction", "percentage"}
    assert response["stats"]["percentage"] == "0.00"


def test_beautify_response_shape() -> None:
    response = handle_message({"content": CSS_SOURCE, "fileExtension": ".css"}, Mode.BEAUTIFY)

    assert response["success"] is True
    assert response["formattedCode"] == "a {\n  color:red;\n  background:blue;\n}"
    assert isinstance(response["stats"]["timeTaken"], int)
    assert "difference" in response["stats"]


def test_message_mode_overrides_default() -> None:
    """A 'mode' field, including the 'format' alias, selects the engine."""
    response = handle_message({"content": "a{b:c}", "fileType": "css", "mode": "format"}, Mode.MINIFY)
    assert "formattedCode" in response


def test_empty_content_is_a_valid_request() -> None:
    response = handle_message({"content": "", "fileType": "json"}, Mode.MINIFY)

    assert response["success"] is True
    assert response["minifiedCode"] == ""
    assert response["stats"]["percentage"] == 0


def test_unknown_type_returns_input_unchanged() -> None:
    response = handle_message({"content": "hello  world"}, Mode.MINIFY)
    assert response["minifiedCode"] == "hello  world"


def test_token_estimates_attached_on_request() -> None:
    request = TransformRequest("var a = 1;  // x", Mode.MINIFY, "javascript")
    result = process_request(request, estimate_tokens=True)

    assert result.ok
    assert result.stats.original_tokens > 0
    assert result.stats.output_tokens > 0
    assert result.language is LanguageId.JAVASCRIPT

# -----------------------------------------------------------------------------
# FAILURE PATHS
# -----------------------------------------------------------------------------

def test_invalid_json_error_response() -> None:
    response = handle_message({"content": "{bad", "fileType": "json"}, Mode.MINIFY)

    assert response["success"] is False
    assert response["error"].startswith("Invalid JSON:")
    assert "minifiedCode" not in response


def test_rejected_markup_in_both_modes() -> None:
    message = {"content": "<!DOCTYPE x><x/>", "fileType": "xml"}
    for mode in (Mode.MINIFY, Mode.BEAUTIFY):
        result = process_request(request_from_message(message, mode))
        assert not result.ok
        assert result.error_kind is ErrorKind.REJECTED_XML_SECURITY_POLICY
        assert result.text == ""


def test_missing_content_errors_name_the_mode() -> None:
    assert handle_message({"content": None}, Mode.MINIFY) == {
        "success": False,
        "error": "No content to minify",
    }
    assert handle_message({}, Mode.BEAUTIFY) == {
        "success": False,
        "error": "No content to format",
    }


def test_bad_messages_yield_error_responses() -> None:
    assert handle_message(["not", "a", "mapping"])["success"] is False


def test_unexpected_engine_failure_is_contained() -> None:
    with patch("codeshaper.core.services.protocol.minify", side_effect=RuntimeError("boom")):
        result = process_request(TransformRequest("x", Mode.MINIFY, "javascript"))

    assert not result.ok
    assert result.error == "boom"
    assert result.error_kind is ErrorKind.UNHANDLED_TRANSFORM_FAILURE
    assert result_to_message(result) == {"success": False, "error": "boom"}

# -----------------------------------------------------------------------------
# MESSAGE PARSING
# -----------------------------------------------------------------------------

def test_request_from_message_hints() -> None:
    request = request_from_message({"content": "x", "fileType": " ", "fileExtension": "rb"})

    assert request.mode is Mode.MINIFY
    assert request.declared_language is None
    assert request.extension_hint == "rb"


def test_unknown_message_mode_falls_back_to_default(caplog) -> None:
    """An unrecognized mode is not an error: the worker's own mode applies."""
    with caplog.at_level("WARNING"):
        response = handle_message({"content": "a  {  b : c }", "fileType": "css", "mode": "compress"}, Mode.MINIFY)

    assert response["success"] is True
    assert response["minifiedCode"] == "a{b:c}"
    assert "compress" in caplog.text

    request = request_from_message({"content": "x", "mode": "explode"}, Mode.BEAUTIFY)
    assert request.mode is Mode.BEAUTIFY


def test_string_mode_on_request_is_normalized() -> None:
    """Library callers may pass the mode as its string value."""
    result = process_request(TransformRequest(CSS_SOURCE, "minify", "css"))

    assert result.ok
    assert result.mode is Mode.MINIFY
    assert result.text == "a{color:red;background:blue}"
    assert result_to_message(result)["stats"]["reduction"] == "0.00"

    beautified = process_request(TransformRequest(CSS_SOURCE, "format", "css"))
    assert beautified.mode is Mode.BEAUTIFY
    assert "formattedCode" in result_to_message(beautified)
