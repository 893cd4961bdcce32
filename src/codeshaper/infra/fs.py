from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path resolution, text I/O and output naming
utilities. Acts as an abstraction over the 'os' module to ensure uniform
behavior across Windows and Unix-like systems.
"""

import os
from typing import List, Optional, Tuple

from codeshaper.domain.constants import FORMATTED_SUFFIX, MINIFIED_SUFFIX
from codeshaper.domain.languages import Mode

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "CodeShaper"
UNIX_APP_DIR_NAME = ".codeshaper"
DEFAULT_ENCODING = "utf-8"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/CodeShaper
    - Linux/Mac: ~/.codeshaper

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))


def safe_mkdir(path: str) -> Tuple[bool, Optional[str]]:
    """
    Attempt to recursively create a directory structure safely.

    Returns:
        Tuple[bool, Optional[str]]: (Success flag, Error message if applicable).
    """
    try:
        os.makedirs(path, exist_ok=True)
        return True, None
    except OSError as e:
        return False, str(e)

# -----------------------------------------------------------------------------
# OUTPUT NAMING API
# -----------------------------------------------------------------------------

def derive_output_name(file_name: str, mode: Mode) -> str:
    """
    Name of the artifact produced for a source file.

    Minify:   'app.js' -> 'app.min.js', 'Makefile' -> 'Makefile.min'
    Beautify: 'app.min.js' -> 'app.formatted.js', 'app.js' -> 'app.formatted.js'
    """
    if mode is Mode.MINIFY:
        stem, dot, ext = file_name.rpartition(".")
        if not dot or not stem:
            return f"{file_name}{MINIFIED_SUFFIX}"
        return f"{stem}{MINIFIED_SUFFIX}.{ext}"

    marker = f"{MINIFIED_SUFFIX}."
    if marker in file_name:
        return file_name.replace(marker, f"{FORMATTED_SUFFIX}.", 1)
    stem, dot, ext = file_name.rpartition(".")
    if not dot or not stem:
        return f"{file_name}{FORMATTED_SUFFIX}"
    return f"{stem}{FORMATTED_SUFFIX}.{ext}"


def resolve_output_path(source_path: str, mode: Mode, output_dir: Optional[str] = None) -> str:
    """Full destination path, next to the source unless an output dir is given."""
    directory = output_dir or os.path.dirname(os.path.abspath(source_path))
    return os.path.join(directory, derive_output_name(os.path.basename(source_path), mode))


def check_existing_output_files(paths: List[str]) -> List[str]:
    """Return the subset of paths that already exist."""
    return [p for p in paths if os.path.exists(p)]

# -----------------------------------------------------------------------------
# TEXT I/O API
# -----------------------------------------------------------------------------

def read_text_file(path: str) -> str:
    """
    Read a whole file as UTF-8 text.

    Raises:
        OSError: On missing or unreadable files.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    with open(path, "r", encoding=DEFAULT_ENCODING, newline="") as f:
        return f.read()


def write_text_file(path: str, content: str) -> None:
    """Write text as UTF-8, creating parent directories as needed."""
    parent = os.path.dirname(os.path.abspath(path))
    ok, err = safe_mkdir(parent)
    if not ok:
        raise OSError(f"Cannot create directory {parent}: {err}")
    with open(path, "w", encoding=DEFAULT_ENCODING, newline="") as f:
        f.write(content)
