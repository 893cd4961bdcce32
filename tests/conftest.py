from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for session configuration and sample sources.
"""

import os
import sys
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete session configuration for testing.

    Reflects the 'last_session' structure defined in
    'codeshaper.domain.config'.
    """
    return {
        "mode": "minify",
        "file_type": "",
        "output_dir": "",
        "overwrite": False,
        "estimate_tokens": False,
        "max_workers": 2,
    }


@pytest.fixture
def sample_sources() -> Dict[str, str]:
    """Small, readable source files keyed by file name."""
    return {
        "app.js": "function add(a, b) {\n  // sum\n  return a + b;\n}\n",
        "site.css": "body {\n  margin: 0;\n  /* reset */\n  padding: 0;\n}\n",
        "data.json": '{\n  "name": "codeshaper",\n  "tags": ["a", "b"]\n}\n',
        "script.py": "def main():\n    # entry\n    return 1\n",
    }
