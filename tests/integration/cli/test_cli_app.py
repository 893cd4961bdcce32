from __future__ import annotations

"""
Integration tests for the CLI Application Controller.

Runs the controller in-process with patched stdin and temporary files to
verify stream and file modes, JSON output, exit codes, configuration
dumping and session persistence.
"""

import io
import json
import sys
from pathlib import Path

import pytest

from codeshaper.domain import config
from codeshaper.infra.logging import shutdown_logging
from codeshaper.interface.cli.app import (
    EXIT_FAILURE,
    EXIT_INVALID_INPUT,
    EXIT_OK,
    main,
)


class _Terminal(io.StringIO):
    def isatty(self) -> bool:
        return True


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    shutdown_logging()


def _feed_stdin(monkeypatch: pytest.MonkeyPatch, text: str) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO(text))

# -----------------------------------------------------------------------------
# STREAM MODE
# -----------------------------------------------------------------------------

def test_stream_beautify_to_stdout(monkeypatch, capsys) -> None:
    """TC-01: stdin is transformed and written to stdout."""
    _feed_stdin(monkeypatch, "a{color:red;background:blue}")

    code = main(["beautify", "--type", "css", "--use-defaults"])

    assert code == EXIT_OK
    assert capsys.readouterr().out == "a {\n  color:red;\n  background:blue;\n}\n"


def test_stream_json_response(monkeypatch, capsys) -> None:
    """TC-02: --json prints the protocol response."""
    _feed_stdin(monkeypatch, '{ "a": 1 }')

    code = main(["minify", "--ext", "json", "--json", "--use-defaults"])
    response = json.loads(capsys.readouterr().out)

    assert code == EXIT_OK
    assert response["success"] is True
    assert response["minifiedCode"] == '{"a":1}'
    assert response["stats"]["originalSize"] == "0.01"


def test_stream_transform_error(monkeypatch, capsys) -> None:
    """TC-03: Engine errors exit with 1 and report on stderr."""
    _feed_stdin(monkeypatch, "{broken")

    code = main(["minify", "--type", "json", "--use-defaults"])
    captured = capsys.readouterr()

    assert code == EXIT_FAILURE
    assert captured.out == ""
    assert "Invalid JSON" in captured.err


def test_stream_requires_piped_input(monkeypatch) -> None:
    """TC-04: An interactive stdin is not read."""
    monkeypatch.setattr(sys, "stdin", _Terminal(""))
    assert main(["minify", "--use-defaults"]) == EXIT_INVALID_INPUT

# -----------------------------------------------------------------------------
# FILE MODE
# -----------------------------------------------------------------------------

def test_file_mode_writes_artifacts(tmp_path: Path, capsys) -> None:
    """TC-05: -i paths are transformed next to their sources."""
    source = tmp_path / "app.js"
    source.write_text("var a = 1; // one\n", encoding="utf-8")

    code = main(["minify", "-i", str(source), "--use-defaults"])

    assert code == EXIT_OK
    assert (tmp_path / "app.min.js").read_text(encoding="utf-8") == "var a=1;"
    assert "minify: 1 succeeded, 0 failed, 0 skipped." in capsys.readouterr().out


def test_file_mode_json_report(tmp_path: Path, capsys) -> None:
    """TC-06: --json renders the batch report, including failures."""
    good = tmp_path / "ok.css"
    good.write_text("a { b : c ; }", encoding="utf-8")
    bad = tmp_path / "bad.json"
    bad.write_text("[1,", encoding="utf-8")
    out_dir = tmp_path / "dist"

    code = main(["minify", "-i", str(good), str(bad), "-o", str(out_dir), "--json", "--use-defaults"])
    report = json.loads(capsys.readouterr().out)

    assert code == EXIT_FAILURE
    assert report["ok"] is False
    assert [f["ok"] for f in report["files"]] == [True, False]
    assert report["files"][0]["language"] == "css"
    assert report["files"][0]["stats"]["minifiedSize"] == "0.01"
    assert (out_dir / "ok.min.css").read_text(encoding="utf-8") == "a{b:c}"


def test_file_mode_dry_run(tmp_path: Path) -> None:
    """TC-07: --dry-run transforms without writing."""
    source = tmp_path / "q.sql"
    source.write_text("select 1", encoding="utf-8")

    assert main(["beautify", "-i", str(source), "--dry-run", "--use-defaults"]) == EXIT_OK
    assert not (tmp_path / "q.formatted.sql").exists()


@pytest.mark.parametrize("make_path", [
    lambda root: root / "missing.js",
    lambda root: root,
])
def test_invalid_input_paths(tmp_path: Path, make_path) -> None:
    """TC-08: Missing paths and directories exit with 2."""
    assert main(["minify", "-i", str(make_path(tmp_path)), "--use-defaults"]) == EXIT_INVALID_INPUT

# -----------------------------------------------------------------------------
# CONFIGURATION
# -----------------------------------------------------------------------------

def test_dump_config_merges_flags(capsys) -> None:
    """TC-09: Flags override the session values in the effective config."""
    code = main(["format", "--workers", "2", "--type", "TypeScript", "--dump-config", "--use-defaults"])
    dumped = json.loads(capsys.readouterr().out)

    assert code == EXIT_OK
    assert dumped["mode"] == "beautify"
    assert dumped["max_workers"] == 2
    assert dumped["file_type"] == "typescript"


def test_save_persists_session(tmp_path: Path, monkeypatch, capsys) -> None:
    """TC-10: --save stores the effective settings for the next run."""
    config_file = tmp_path / "config.json"
    monkeypatch.setattr(config, "CONFIG_FILE", str(config_file))

    assert main(["beautify", "--workers", "3", "--save", "--dump-config"]) == EXIT_OK
    capsys.readouterr()

    saved = json.loads(config_file.read_text(encoding="utf-8"))
    assert saved["last_session"]["mode"] == "beautify"
    assert saved["last_session"]["max_workers"] == 3

    assert main(["--dump-config"]) == EXIT_OK
    assert json.loads(capsys.readouterr().out)["mode"] == "beautify"


def test_existing_output_is_skipped_with_warning(tmp_path: Path, caplog) -> None:
    """TC-11: Existing artifacts are reported up front and left untouched."""
    source = tmp_path / "a.css"
    source.write_text("a { b : c }", encoding="utf-8")
    target = tmp_path / "a.min.css"
    target.write_text("keep", encoding="utf-8")

    with caplog.at_level("WARNING"):
        code = main(["minify", "-i", str(source), "--use-defaults"])

    assert code == EXIT_OK
    assert target.read_text(encoding="utf-8") == "keep"
    assert "already exist" in caplog.text


def test_output_dir_expands_user_home(tmp_path: Path, monkeypatch) -> None:
    """TC-12: -o accepts ~ and is resolved to an absolute directory."""
    monkeypatch.setenv("HOME", str(tmp_path))
    source = tmp_path / "x.json"
    source.write_text('{"a": [1, 2]}', encoding="utf-8")

    assert main(["minify", "-i", str(source), "-o", "~/out", "--use-defaults"]) == EXIT_OK
    assert (tmp_path / "out" / "x.min.json").read_text(encoding="utf-8") == '{"a":[1,2]}'


def test_ext_hint_in_file_mode(tmp_path: Path) -> None:
    """TC-13: --ext types input files whose name carries no known extension."""
    source = tmp_path / "settings.cfg"
    source.write_text('{ "a" : 1 }', encoding="utf-8")

    assert main(["minify", "-i", str(source), "--ext", "json", "--use-defaults"]) == EXIT_OK
    assert (tmp_path / "settings.min.cfg").read_text(encoding="utf-8") == '{"a":1}'
