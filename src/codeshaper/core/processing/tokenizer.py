from __future__ import annotations

"""
Token Estimation Engine.

Estimates how many LLM tokens a text occupies so transform reports can show
the token saving of a minification. Routes the calculation to the tiktoken
BPE encoder when it is installed and falls back to a character-density
heuristic otherwise.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Dict

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# DEPENDENCY MANAGEMENT (LAZY LOADING)
# -----------------------------------------------------------------------------

TIKTOKEN_AVAILABLE = False
try:
    import tiktoken

    TIKTOKEN_AVAILABLE = True
except ImportError:
    pass

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

CHARS_PER_TOKEN_AVG = 4
DEFAULT_ENCODING = "o200k_base"
LEGACY_ENCODING = "cl100k_base"

# -----------------------------------------------------------------------------
# STRATEGY INTERFACES
# -----------------------------------------------------------------------------

class TokenizerStrategy(ABC):
    """
    Abstract base class for tokenization algorithms.
    """

    @abstractmethod
    def count(self, text: str, encoding_name: str) -> int:
        """
        Calculate the token count for a given text segment.

        Args:
            text: Input string to be tokenized.
            encoding_name: BPE encoding identifier.

        Returns:
            int: Total token count.
        """
        pass


class HeuristicStrategy(TokenizerStrategy):
    """
    Fallback algorithm using character density estimation.
    """

    def count(self, text: str, encoding_name: str) -> int:
        return math.ceil(len(text) / CHARS_PER_TOKEN_AVG)


class TiktokenStrategy(TokenizerStrategy):
    """
    Local BPE encoding via the tiktoken library.
    """

    def __init__(self) -> None:
        self._encodings: Dict[str, object] = {}

    def count(self, text: str, encoding_name: str) -> int:
        if not TIKTOKEN_AVAILABLE:
            raise ImportError("tiktoken not installed")

        encoding = self._encodings.get(encoding_name)
        if encoding is None:
            try:
                encoding = tiktoken.get_encoding(encoding_name)
            except ValueError:
                encoding = tiktoken.get_encoding(LEGACY_ENCODING)
            self._encodings[encoding_name] = encoding

        return len(encoding.encode(text, disallowed_special=()))

# -----------------------------------------------------------------------------
# SERVICE ORCHESTRATION (FACADE)
# -----------------------------------------------------------------------------

class TokenizerService:
    """
    Selects the best available strategy and degrades gracefully.
    """

    def __init__(self) -> None:
        self.heuristic = HeuristicStrategy()
        self.primary: TokenizerStrategy = TiktokenStrategy() if TIKTOKEN_AVAILABLE else self.heuristic

    def count(self, text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
        if not text:
            return 0
        try:
            return self.primary.count(text, encoding_name)
        except Exception as e:
            # Encoder files may be unavailable offline
            logger.warning(f"Tokenizer {type(self.primary).__name__} failed: {e}. Using heuristic fallback.")
            return self.heuristic.count(text, encoding_name)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

_SERVICE_INSTANCE = TokenizerService()


def count_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """
    Estimate the number of tokens in a text.

    Args:
        text: Input string content.
        encoding_name: tiktoken encoding to use when available.

    Returns:
        int: Token count (0 for empty text).
    """
    return _SERVICE_INSTANCE.count(text, encoding_name)


def is_tiktoken_available() -> bool:
    return TIKTOKEN_AVAILABLE
