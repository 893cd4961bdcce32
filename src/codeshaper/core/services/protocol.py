from __future__ import annotations

"""
Request/Response Protocol Adapter.

Binds the classifier, the engines and the statistics into the request and
response shapes exchanged with workers and callers. Every request yields
exactly one response; engine exceptions never escape this module.

Wire format:
    request  {content, fileType?, fileExtension?, mode?}
    success  {success: True, minifiedCode|formattedCode, stats: {...}}
    failure  {success: False, error}
"""

import logging
import time
from typing import Any, Dict, Mapping, Optional

from codeshaper.core.classification.classifier import classify
from codeshaper.core.processing.beautifier import beautify
from codeshaper.core.processing.minifier import minify
from codeshaper.core.processing.tokenizer import count_tokens
from codeshaper.core.reporting.stats import compute_stats, stats_to_wire, utf8_size
from codeshaper.domain.errors import ErrorKind, TransformError
from codeshaper.domain.languages import Mode
from codeshaper.domain.transform_models import (
    TransformRequest,
    TransformResult,
    create_error_result,
    create_success_result,
)

logger = logging.getLogger(__name__)

_EMPTY_CONTENT_ERRORS = {
    Mode.MINIFY: "No content to minify",
    Mode.BEAUTIFY: "No content to format",
}

# -----------------------------------------------------------------------------
# ENGINE BOUNDARY
# -----------------------------------------------------------------------------

def process_request(request: TransformRequest, estimate_tokens: bool = False) -> TransformResult:
    """
    Run one transform request to completion.

    Args:
        request: Content plus hints and mode.
        estimate_tokens: Attach token estimates of input and output.

    Returns:
        TransformResult: Success with text and stats, or a tagged error.
    """
    mode = Mode.parse(request.mode)
    content = request.content
    if not isinstance(content, str):
        return create_error_result(_EMPTY_CONTENT_ERRORS[mode], ErrorKind.INVALID_REQUEST, mode)

    language = classify(request.declared_language, request.extension_hint)
    logger.debug(f"Processing {mode.value} request ({language.value}, {len(content)} chars)")

    start = time.perf_counter()
    try:
        if mode is Mode.MINIFY:
            text = minify(content, language)
        else:
            text = beautify(content, language)
    except TransformError as e:
        logger.warning(f"Transform rejected ({e.kind.value}): {e}")
        return create_error_result(str(e), e.kind, mode, language)
    except Exception as e:
        logger.error(f"Unhandled failure during {mode.value} of {language.value}: {e}", exc_info=True)
        return create_error_result(str(e) or type(e).__name__, ErrorKind.UNHANDLED_TRANSFORM_FAILURE, mode, language)
    elapsed_ms = round((time.perf_counter() - start) * 1000)

    original_tokens = output_tokens = None
    if estimate_tokens:
        original_tokens = count_tokens(content)
        output_tokens = count_tokens(text)

    stats = compute_stats(
        utf8_size(content),
        utf8_size(text),
        mode,
        elapsed_ms=elapsed_ms,
        original_tokens=original_tokens,
        output_tokens=output_tokens,
    )
    return create_success_result(text, stats, mode, language)

# -----------------------------------------------------------------------------
# MESSAGE BOUNDARY
# -----------------------------------------------------------------------------

def request_from_message(message: Mapping[str, Any], default_mode: Mode = Mode.MINIFY) -> TransformRequest:
    """
    Build a TransformRequest from a protocol message.

    An unknown `mode` falls back to `default_mode`.

    Raises:
        ValueError: If the message is not a mapping.
    """
    if not isinstance(message, Mapping):
        raise ValueError("Request message must be an object")

    mode = Mode.parse(default_mode)
    if message.get("mode"):
        try:
            mode = Mode.parse(message["mode"])
        except ValueError:
            logger.warning(f"Unknown mode {message['mode']!r}, using {mode.value}")
    return TransformRequest(
        content=message.get("content"),
        mode=mode,
        declared_language=_as_hint(message.get("fileType")),
        extension_hint=_as_hint(message.get("fileExtension")),
    )


def result_to_message(result: TransformResult) -> Dict[str, Any]:
    """Render a TransformResult in the wire shape."""
    if not result.ok:
        return {"success": False, "error": result.error}

    code_key = "minifiedCode" if result.mode is Mode.MINIFY else "formattedCode"
    return {
        "success": True,
        code_key: result.text,
        "stats": stats_to_wire(result.stats, result.mode),
    }


def handle_message(
        message: Mapping[str, Any],
        mode: Mode = Mode.MINIFY,
        estimate_tokens: bool = False,
) -> Dict[str, Any]:
    """
    Process one protocol message and return exactly one response message.

    Args:
        message: {content, fileType?, fileExtension?, mode?}.
        mode: Mode used when the message does not name one.
        estimate_tokens: Attach token estimates to the stats.

    Returns:
        Dict[str, Any]: Success or failure response.
    """
    try:
        request = request_from_message(message, mode)
    except ValueError as e:
        logger.warning(f"Invalid request message: {e}")
        return {"success": False, "error": str(e)}

    return result_to_message(process_request(request, estimate_tokens=estimate_tokens))


def _as_hint(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value.strip() else None
