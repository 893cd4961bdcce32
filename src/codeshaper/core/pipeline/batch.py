from __future__ import annotations

"""
Batch File Processing.

Transforms many files concurrently. Each file is an independent request
dispatched to a ThreadPoolExecutor; results are aggregated into a report.
Per-file failures (unreadable input, invalid JSON, rejected markup,
collisions) are recorded on the report and never raised.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from codeshaper.core.classification.classifier import classify
from codeshaper.core.services.protocol import process_request
from codeshaper.domain.languages import LanguageId, Mode
from codeshaper.domain.transform_models import TransformRequest, TransformStats
from codeshaper.infra import fs

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileOutcome:
    """
    Result of transforming one file.

    Attributes:
        source_path: Input file.
        output_path: Destination computed for the artifact.
        ok: True when the transform succeeded.
        written: True when the artifact was written to disk.
        skipped: True when an existing artifact blocked the write.
        language: Resolved language family.
        stats: Size report on success.
        error: Failure description.
    """
    source_path: str
    output_path: str
    ok: bool
    written: bool = False
    skipped: bool = False
    language: LanguageId = LanguageId.UNKNOWN
    stats: Optional[TransformStats] = None
    error: str = ""


@dataclass
class BatchReport:
    mode: Mode
    dry_run: bool = False
    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.ok and not o.skipped]

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def skipped(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.skipped]

    @property
    def ok(self) -> bool:
        return not self.failed

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def process_file(
        path: str,
        mode: Mode,
        output_dir: Optional[str] = None,
        declared_language: Optional[str] = None,
        extension_hint: Optional[str] = None,
        overwrite: bool = False,
        dry_run: bool = False,
        estimate_tokens: bool = False,
) -> FileOutcome:
    """
    Transform a single file and write its artifact.

    The language comes from `declared_language` when given, otherwise from
    the file extension, and from `extension_hint` when the file name alone
    does not resolve.
    """
    output_path = fs.resolve_output_path(path, mode, output_dir)

    if not overwrite and not dry_run and os.path.exists(output_path):
        logger.info(f"Skipping {path}: {output_path} already exists.")
        return FileOutcome(path, output_path, ok=True, skipped=True, error="Output file already exists")

    try:
        content = fs.read_text_file(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read {path}: {e}")
        return FileOutcome(path, output_path, ok=False, error=str(e))

    hint = os.path.basename(path)
    if extension_hint and classify(None, hint) is LanguageId.UNKNOWN:
        hint = extension_hint

    result = process_request(
        TransformRequest(
            content=content,
            mode=mode,
            declared_language=declared_language,
            extension_hint=hint,
        ),
        estimate_tokens=estimate_tokens,
    )
    if not result.ok:
        return FileOutcome(path, output_path, ok=False, language=result.language, error=result.error)

    written = False
    if not dry_run:
        try:
            fs.write_text_file(output_path, result.text)
            written = True
        except OSError as e:
            logger.error(f"Cannot write {output_path}: {e}")
            return FileOutcome(path, output_path, ok=False, language=result.language, error=str(e))

    return FileOutcome(
        path,
        output_path,
        ok=True,
        written=written,
        language=result.language,
        stats=result.stats,
    )


def run_batch(
        paths: List[str],
        mode: Mode,
        output_dir: Optional[str] = None,
        declared_language: Optional[str] = None,
        extension_hint: Optional[str] = None,
        overwrite: bool = False,
        dry_run: bool = False,
        estimate_tokens: bool = False,
        max_workers: Optional[int] = None,
        cancellation_event: Optional[threading.Event] = None,
) -> BatchReport:
    """
    Transform a list of files concurrently.

    Args:
        paths: Input files.
        mode: Processing direction.
        output_dir: Destination directory (defaults to each file's directory).
        declared_language: Explicit type applied to every file.
        extension_hint: Extension used for files whose name has no known one.
        overwrite: Replace existing artifacts.
        dry_run: Transform without writing anything.
        estimate_tokens: Attach token estimates to each report.
        max_workers: Thread pool size (None lets the executor decide).
        cancellation_event: Event flag used to stop dispatching new files.

    Returns:
        BatchReport: One outcome per dispatched file, in input order. A file
        whose artifact path was already claimed by an earlier input fails
        without being transformed.
    """
    report = BatchReport(mode=mode, dry_run=dry_run)
    if not paths:
        return report

    logger.info(f"Batch {mode.value}: {len(paths)} file(s), dry_run={dry_run}")
    ordered: List[Optional[FileOutcome]] = [None] * len(paths)
    claimed: Dict[str, str] = {}
    futures = {}

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="TransformWorker") as executor:
        for index, path in enumerate(paths):
            if cancellation_event and cancellation_event.is_set():
                logger.info("Batch cancelled before all files were dispatched.")
                break

            output_path = fs.resolve_output_path(path, mode, output_dir)
            key = os.path.normcase(os.path.abspath(output_path))
            if key in claimed:
                logger.error(f"Output collision: {path} and {claimed[key]} both map to {output_path}")
                ordered[index] = FileOutcome(
                    path, output_path, ok=False, error=f"Output collides with {claimed[key]}"
                )
                continue
            claimed[key] = path

            future = executor.submit(
                process_file,
                path,
                mode,
                output_dir=output_dir,
                declared_language=declared_language,
                extension_hint=extension_hint,
                overwrite=overwrite,
                dry_run=dry_run,
                estimate_tokens=estimate_tokens,
            )
            futures[future] = index

        for future in as_completed(futures):
            ordered[futures[future]] = future.result()

    report.outcomes = [o for o in ordered if o is not None]
    logger.info(
        f"Batch finished: {len(report.succeeded)} ok, "
        f"{len(report.failed)} failed, {len(report.skipped)} skipped."
    )
    return report
