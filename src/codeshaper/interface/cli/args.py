from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates parsed namespaces into
session configuration overrides.
"""

import argparse
from typing import Any, Dict

from codeshaper.utils.i18n import i18n

MODE_CHOICES = ("minify", "beautify", "format")

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the CodeShaper CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="codeshaper",
        description=i18n.t("app.description"),
    )

    p.add_argument(
        "mode",
        nargs="?",
        choices=MODE_CHOICES,
        default=None,
        help=i18n.t("cli.args.mode"),
    )

    # --- Input / Output ---
    p.add_argument(
        "-i", "--input",
        dest="input_paths",
        action="extend",
        nargs="+",
        default=None,
        metavar="PATH",
        help=i18n.t("cli.args.input"),
    )
    p.add_argument(
        "-o", "--output-dir",
        dest="output_dir",
        default=None,
        help=i18n.t("cli.args.output_dir"),
    )
    p.add_argument(
        "--type",
        dest="file_type",
        default=None,
        help=i18n.t("cli.args.type"),
    )
    p.add_argument(
        "--ext",
        dest="file_extension",
        default=None,
        help=i18n.t("cli.args.ext"),
    )

    # --- Runtime Behaviour ---
    p.add_argument("--overwrite", action="store_true", help=i18n.t("cli.args.overwrite"))
    p.add_argument("--dry-run", action="store_true", help=i18n.t("cli.args.dry_run"))
    p.add_argument("--tokens", action="store_true", help=i18n.t("cli.args.tokens"))
    p.add_argument(
        "--workers",
        dest="max_workers",
        type=int,
        default=None,
        help=i18n.t("cli.args.workers"),
    )

    # --- Configuration and Diagnostics ---
    p.add_argument("--use-defaults", action="store_true", help=i18n.t("cli.args.defaults"))
    p.add_argument("--dump-config", action="store_true", help=i18n.t("cli.args.dump"))
    p.add_argument("--save", dest="save_session", action="store_true", help=i18n.t("cli.args.save"))
    p.add_argument("--log-file", action="store_true", help=i18n.t("cli.args.log_file"))
    p.add_argument("--debug", action="store_true", help=i18n.t("cli.args.debug"))

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help=i18n.t("cli.args.json"),
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into session overrides.

    Only options the user actually passed are returned, so saved session
    values survive for everything else.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.mode:
        overrides["mode"] = args.mode
    if args.file_type:
        overrides["file_type"] = args.file_type
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if args.max_workers is not None:
        overrides["max_workers"] = args.max_workers
    if args.overwrite:
        overrides["overwrite"] = True
    if args.tokens:
        overrides["estimate_tokens"] = True

    return overrides
