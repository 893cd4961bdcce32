from __future__ import annotations

"""
Transform Statistics.

Computes the size report attached to every successful transform and renders
it into the wire shape of the message protocol.
"""

import logging
from typing import Any, Dict, Optional, Union

from codeshaper.domain.languages import Mode
from codeshaper.domain.transform_models import TransformStats

logger = logging.getLogger(__name__)

BYTES_PER_KB = 1024

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def utf8_size(text: str) -> int:
    """Byte length of a text once encoded as UTF-8."""
    return len(text.encode("utf-8")) if text else 0


def compute_stats(
        original_bytes: int,
        output_bytes: int,
        mode: Mode,
        elapsed_ms: Optional[int] = None,
        original_tokens: Optional[int] = None,
        output_tokens: Optional[int] = None,
) -> TransformStats:
    """
    Build the size report of a transform.

    The delta is the reduction (original - output) for minify and the
    difference (output - original) for beautify. The percentage is relative
    to the original size and is exactly 0 when the original is empty.

    Args:
        original_bytes: UTF-8 size of the input.
        output_bytes: UTF-8 size of the output.
        mode: Processing direction.
        elapsed_ms: Processing time (beautify only).
        original_tokens: Optional token estimate of the input.
        output_tokens: Optional token estimate of the output.

    Returns:
        TransformStats: The frozen report.
    """
    mode = Mode.parse(mode)
    if mode is Mode.MINIFY:
        delta_bytes = original_bytes - output_bytes
    else:
        delta_bytes = output_bytes - original_bytes

    if original_bytes == 0:
        percentage = 0.0
    else:
        percentage = round(delta_bytes / original_bytes * 100, 2)

    return TransformStats(
        original_bytes=original_bytes,
        output_bytes=output_bytes,
        original_size_kb=_to_kb(original_bytes),
        output_size_kb=_to_kb(output_bytes),
        delta_kb=_to_kb(delta_bytes),
        delta_percentage=percentage,
        elapsed_ms=elapsed_ms if mode is Mode.BEAUTIFY else None,
        original_tokens=original_tokens,
        output_tokens=output_tokens,
    )


def stats_to_wire(stats: TransformStats, mode: Mode) -> Dict[str, Any]:
    """
    Render stats with the protocol key names.

    Sizes are 2-decimal KB strings; the percentage is a 2-decimal string, or
    the integer 0 when the input was empty.
    """
    mode = Mode.parse(mode)
    output_key = "minifiedSize" if mode is Mode.MINIFY else "formattedSize"
    delta_key = "reduction" if mode is Mode.MINIFY else "difference"

    percentage: Union[int, str] = 0
    if stats.original_bytes:
        percentage = f"{stats.delta_percentage:.2f}"

    wire: Dict[str, Any] = {
        "originalSize": f"{stats.original_size_kb:.2f}",
        output_key: f"{stats.output_size_kb:.2f}",
        delta_key: f"{stats.delta_kb:.2f}",
        "percentage": percentage,
    }
    if mode is Mode.BEAUTIFY and stats.elapsed_ms is not None:
        wire["timeTaken"] = stats.elapsed_ms
    if stats.original_tokens is not None:
        wire["originalTokens"] = stats.original_tokens
        wire["outputTokens"] = stats.output_tokens
    return wire


def format_summary(stats: TransformStats, mode: Mode) -> str:
    """One-line human summary used by the CLI."""
    mode = Mode.parse(mode)
    label = "saved" if mode is Mode.MINIFY else "added"
    summary = (
        f"{stats.original_size_kb:.2f} KB -> {stats.output_size_kb:.2f} KB "
        f"({stats.delta_kb:.2f} KB {label}, {stats.delta_percentage:.2f}%)"
    )
    if stats.original_tokens is not None:
        summary += f" | tokens {stats.original_tokens} -> {stats.output_tokens}"
    return summary

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _to_kb(size_bytes: int) -> float:
    return round(size_bytes / BYTES_PER_KB, 2)
