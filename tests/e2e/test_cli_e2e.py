from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess. These tests validate argument parsing, exit codes,
stream output (stdout/stderr), and file system side effects (artifact
generation). HOME points to a temporary directory so no real user
configuration is read or written.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "codeshaper" / "main.py"


def run_cli(
        args: List[str],
        home: Path,
        stdin: Optional[str] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Helper to execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH to ensure the package
    is resolvable without being installed in site-packages.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env["HOME"] = str(home)
    env["LOCALAPPDATA"] = str(home)

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        input=stdin if stdin is not None else "",
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    Create a dummy project for E2E testing.

    Structure:
    /input
      app.js
      site.css
      README.md
    """
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    (input_dir / "app.js").write_text("function f(a) {\n  // c\n  return a;\n}\n", encoding="utf-8")
    (input_dir / "site.css").write_text("body {\n  margin: 0;\n}\n", encoding="utf-8")
    (input_dir / "README.md").write_text("#Title\n\n\n\n- item\n", encoding="utf-8")
    return input_dir


def test_cli_minify_files(tmp_path: Path, sample_project: Path) -> None:
    """TC-01: A standard batch execution produces the expected artifacts."""
    output_dir = tmp_path / "output"
    inputs = [str(sample_project / n) for n in ("app.js", "site.css", "README.md")]

    result = run_cli(["minify", "-i", *inputs, "-o", str(output_dir)], home=tmp_path)

    assert result.returncode == 0, f"CLI failed with stderr: {result.stderr}"
    assert (output_dir / "app.min.js").read_text(encoding="utf-8") == "function f(a){return a;}"
    assert (output_dir / "site.min.css").read_text(encoding="utf-8") == "body{margin:0}"
    assert (output_dir / "README.min.md").read_text(encoding="utf-8") == "#Title\n\n- item"


def test_cli_beautify_stdin(tmp_path: Path) -> None:
    """TC-02: Piped text is formatted onto stdout."""
    result = run_cli(["beautify", "--ext", "sql"], home=tmp_path, stdin="select a,b from t")

    assert result.returncode == 0, result.stderr
    assert result.stdout == "SELECT a,\n  b\nFROM t\n"


def test_cli_handles_missing_input(tmp_path: Path) -> None:
    """TC-03: An invalid input path exits with code 2."""
    result = run_cli(["-i", str(tmp_path / "non_existent.js")], home=tmp_path)

    assert result.returncode == 2
    assert "Input path does not exist" in result.stderr


def test_cli_json_rejection(tmp_path: Path) -> None:
    """TC-04: Rejected markup yields a JSON error response and exit code 1."""
    result = run_cli(
        ["minify", "--type", "xml", "--json"],
        home=tmp_path,
        stdin='<!DOCTYPE x [<!ENTITY a "b">]><x>&a;</x>',
    )

    assert result.returncode == 1
    data = json.loads(result.stdout)
    assert data == {
        "success": False,
        "error": "XML with DOCTYPE or ENTITY declarations cannot be minified due to security concerns",
    }


def test_cli_log_file_created(tmp_path: Path, sample_project: Path) -> None:
    """TC-05: --log-file writes the rotating log into the user data directory."""
    result = run_cli(["minify", "-i", str(sample_project / "site.css"), "--log-file"], home=tmp_path)

    assert result.returncode == 0, result.stderr
    log_file = tmp_path / ".codeshaper" / "logs" / "codeshaper.log"
    if os.name == "nt":
        log_file = tmp_path / "CodeShaper" / "logs" / "codeshaper.log"
    assert log_file.exists()
    assert "Batch finished" in log_file.read_text(encoding="utf-8")
