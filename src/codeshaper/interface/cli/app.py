from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of configuration
sources (defaults, saved session, CLI flags), dispatch to the batch runner
for files or to the protocol adapter for stdin, and result rendering.

Exit codes: 0 success, 1 transform failure, 2 invalid input, 130 interrupted.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from codeshaper.core.pipeline.batch import BatchReport, run_batch
from codeshaper.core.pipeline.validator import validate_config
from codeshaper.core.processing.tokenizer import is_tiktoken_available
from codeshaper.core.reporting.stats import format_summary, stats_to_wire
from codeshaper.core.services.protocol import process_request, result_to_message
from codeshaper.domain.config import get_default_app_state, load_app_state, save_config
from codeshaper.domain.languages import Mode
from codeshaper.domain.transform_models import TransformRequest
from codeshaper.infra.fs import check_existing_output_files, normalize_path, resolve_output_path
from codeshaper.infra.logging import LoggingConfig, configure_logging, get_default_log_path, get_logger
from codeshaper.interface.cli import args as cli_args
from codeshaper.utils.i18n import i18n

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    state = get_default_app_state() if args.use_defaults else load_app_state()
    app_settings = dict(state.get("app_settings", {}))
    if args.log_file:
        app_settings["save_log_file"] = True
    configure_logging(LoggingConfig.from_settings(app_settings, debug=args.debug, log_file=get_default_log_path()))

    raw_conf = _merge_config(state.get("last_session", {}), cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.save_session:
        save_config(clean_conf)
        logger.info("Session settings saved.")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    mode = Mode.parse(clean_conf["mode"])
    if clean_conf["estimate_tokens"] and not is_tiktoken_available():
        logger.info(i18n.t("cli.status.heuristic_tokens"))

    try:
        if args.input_paths:
            return _run_files(args, clean_conf, mode)
        return _run_stream(args, clean_conf, mode)
    except KeyboardInterrupt:
        msg = i18n.t("cli.status.interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return EXIT_INTERRUPTED

# -----------------------------------------------------------------------------
# EXECUTION MODES
# -----------------------------------------------------------------------------

def _run_files(args: Any, conf: Dict[str, Any], mode: Mode) -> int:
    """Transform files from -i through the batch runner."""
    for path in args.input_paths:
        if not os.path.exists(path):
            return _fail_input(i18n.t("cli.errors.path_not_exist", path=path))
        if not os.path.isfile(path):
            return _fail_input(i18n.t("cli.errors.not_a_file", path=path))

    output_dir = normalize_path(conf["output_dir"], os.getcwd()) if conf["output_dir"] else None
    if not conf["overwrite"] and not args.dry_run:
        targets = [resolve_output_path(p, mode, output_dir) for p in args.input_paths]
        existing = check_existing_output_files(targets)
        if existing:
            logger.warning(i18n.t("cli.status.existing_outputs", count=len(existing)))

    try:
        report = run_batch(
            args.input_paths,
            mode,
            output_dir=output_dir,
            declared_language=conf["file_type"] or None,
            extension_hint=args.file_extension,
            overwrite=conf["overwrite"],
            dry_run=bool(args.dry_run),
            estimate_tokens=conf["estimate_tokens"],
            max_workers=conf["max_workers"],
        )
    except Exception as e:
        msg = i18n.t("cli.errors.batch_fail", error=str(e))
        logger.critical(msg, exc_info=True)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json_output:
        print(json.dumps(_report_to_json(report), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(report)

    return EXIT_OK if report.ok else EXIT_FAILURE


def _run_stream(args: Any, conf: Dict[str, Any], mode: Mode) -> int:
    """Transform stdin and write the result to stdout."""
    if sys.stdin is None or sys.stdin.isatty():
        return _fail_input(i18n.t("cli.errors.no_input"))

    content = sys.stdin.read()
    result = process_request(
        TransformRequest(
            content=content,
            mode=mode,
            declared_language=conf["file_type"] or None,
            extension_hint=args.file_extension,
        ),
        estimate_tokens=conf["estimate_tokens"],
    )

    if args.json_output:
        print(json.dumps(result_to_message(result), ensure_ascii=False, indent=2))
        return EXIT_OK if result.ok else EXIT_FAILURE

    if not result.ok:
        print(f"ERROR: {i18n.t('cli.errors.transform_fail', error=result.error)}", file=sys.stderr)
        return EXIT_FAILURE

    sys.stdout.write(result.text)
    if result.text and not result.text.endswith("\n"):
        sys.stdout.write("\n")
    logger.info(i18n.t(
        "cli.status.stream_done",
        language=result.language.value,
        summary=format_summary(result.stats, mode),
    ))
    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of override values into the session configuration.

    Only known session keys are merged.
    """
    out = dict(base)
    keys_to_merge = ["mode", "file_type", "output_dir", "overwrite", "estimate_tokens", "max_workers"]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _fail_input(msg: str) -> int:
    logger.error(msg)
    print(f"ERROR: {msg}", file=sys.stderr)
    return EXIT_INVALID_INPUT


def _report_to_json(report: BatchReport) -> Dict[str, Any]:
    files = []
    for outcome in report.outcomes:
        entry = asdict(outcome)
        entry["language"] = outcome.language.value
        entry["stats"] = stats_to_wire(outcome.stats, report.mode) if outcome.stats else None
        files.append(entry)
    return {
        "mode": report.mode.value,
        "dry_run": report.dry_run,
        "ok": report.ok,
        "files": files,
    }


def _print_human_summary(report: BatchReport) -> None:
    """Render a batch report as terminal text."""
    for outcome in report.outcomes:
        if outcome.skipped:
            print(i18n.t("cli.status.skipped", source=outcome.source_path, target=outcome.output_path))
        elif outcome.ok:
            print(i18n.t(
                "cli.status.written",
                source=outcome.source_path,
                target=outcome.output_path,
                summary=format_summary(outcome.stats, report.mode),
            ))
        else:
            print(i18n.t("cli.status.failed", source=outcome.source_path, error=outcome.error), file=sys.stderr)

    if report.dry_run:
        print(i18n.t("cli.status.dry_run"))
    print(i18n.t(
        "cli.status.batch_done",
        mode=report.mode.value,
        ok=len(report.succeeded),
        failed=len(report.failed),
        skipped=len(report.skipped),
    ))

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
