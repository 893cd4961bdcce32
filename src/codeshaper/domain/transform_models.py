from __future__ import annotations

"""
Transformation Domain Data Models.

Defines the request, statistics and result structures exchanged between the
engines, the protocol adapter and the interface layers (CLI, workers, batch).
"""

from dataclasses import dataclass
from typing import Optional

from codeshaper.domain.errors import ErrorKind
from codeshaper.domain.languages import LanguageId, Mode

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TransformRequest:
    """
    A single unit of work for the engine.

    Attributes:
        content: Raw UTF-8 text to transform.
        mode: Processing direction.
        declared_language: Optional explicit type name (e.g. 'typescript').
        extension_hint: Optional file extension or file name.
    """
    content: str
    mode: Mode = Mode.MINIFY
    declared_language: Optional[str] = None
    extension_hint: Optional[str] = None


@dataclass(frozen=True)
class TransformStats:
    """
    Size statistics of a transform.

    Attributes:
        original_bytes: UTF-8 byte length of the input.
        output_bytes: UTF-8 byte length of the output.
        original_size_kb: Input size in KB, rounded to 2 decimals.
        output_size_kb: Output size in KB, rounded to 2 decimals.
        delta_kb: Reduction (minify) or difference (beautify) in KB.
        delta_percentage: Delta relative to the input, 0 for empty input.
        elapsed_ms: Processing time, reported for beautify only.
        original_tokens: Optional token estimate of the input.
        output_tokens: Optional token estimate of the output.
    """
    original_bytes: int
    output_bytes: int
    original_size_kb: float
    output_size_kb: float
    delta_kb: float
    delta_percentage: float
    elapsed_ms: Optional[int] = None
    original_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


@dataclass(frozen=True)
class TransformResult:
    """
    Outcome of one request: either ok with text and stats, or an error.
    """
    ok: bool
    mode: Mode
    language: LanguageId
    text: str = ""
    stats: Optional[TransformStats] = None
    error: str = ""
    error_kind: Optional[ErrorKind] = None

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_success_result(
        text: str,
        stats: TransformStats,
        mode: Mode,
        language: LanguageId,
) -> TransformResult:
    """Create a successful transform result."""
    return TransformResult(ok=True, mode=mode, language=language, text=text, stats=stats)


def create_error_result(
        error: str,
        kind: ErrorKind,
        mode: Mode,
        language: LanguageId = LanguageId.UNKNOWN,
) -> TransformResult:
    """Create a failed transform result. Errors never carry partial output."""
    return TransformResult(ok=False, mode=mode, language=language, error=error, error_kind=kind)
