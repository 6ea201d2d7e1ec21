"""Scan orchestration: read files, dispatch scans, restore input order."""

from __future__ import annotations

import logging
import os
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Iterable, Iterator

from invisible_detector.config import ScanConfig
from invisible_detector.errors import E_READ, E_TOO_LARGE, skip_reason
from invisible_detector.models import Report, ScanResult
from invisible_detector.paths import expand_patterns, partition_ignored
from invisible_detector.report import Verdict, aggregate, evaluate
from invisible_detector.scanner import escape_for_display, scan, scan_failure

logger = logging.getLogger(__name__)


def read_file(path: str, max_file_bytes: int) -> bytes | str:
    """Return the file's bytes, or a skip reason string if it can't be used."""
    try:
        size = os.path.getsize(path)
        if size > max_file_bytes:
            return skip_reason(E_TOO_LARGE, f"{size} bytes exceeds limit of {max_file_bytes}")
        with open(path, "rb") as fh:
            # Bounded read in case the file grew since the size check.
            data = fh.read(max_file_bytes + 1)
    except OSError as exc:
        return skip_reason(E_READ, exc.strerror or str(exc))
    if len(data) > max_file_bytes:
        return skip_reason(E_TOO_LARGE, f"more than {max_file_bytes} bytes")
    return data


def read_inputs(paths: Iterable[str], max_file_bytes: int) -> Iterator[tuple[str, bytes | str]]:
    """Lazily yield (path, bytes) or (path, skip reason) pairs."""
    for path in paths:
        yield path, read_file(path, max_file_bytes)


def _scan_content(path: str, content: bytes | str, config: ScanConfig) -> ScanResult:
    if isinstance(content, str):
        logger.info("Could not read %s: %s", escape_for_display(path), content)
        return scan_failure(path, content)
    result = scan(path, content, context_radius=config.context_radius)
    if result.skipped:
        logger.info("Could not decode %s: %s", escape_for_display(path), result.decode_error)
    return result


def scan_path(path: str, config: ScanConfig) -> ScanResult:
    """Read and scan a single file. Never raises for per-file problems."""
    return _scan_content(path, read_file(path, config.max_file_bytes), config)


def _scan_sequential(paths: list[str], config: ScanConfig) -> list[ScanResult]:
    results: list[ScanResult] = []
    for path, content in read_inputs(paths, config.max_file_bytes):
        result = _scan_content(path, content, config)
        results.append(result)
        if config.stop_on_first_threat and result.findings:
            logger.info("Stopping after first threat in %s", escape_for_display(path))
            break
    return results


def _scan_pooled(paths: list[str], config: ScanConfig) -> list[ScanResult]:
    done_by_index: dict[int, ScanResult] = {}
    with ThreadPoolExecutor(max_workers=config.jobs) as pool:
        pending: dict[Future[ScanResult], int] = {
            pool.submit(scan_path, path, config): i for i, path in enumerate(paths)
        }
        while pending:
            finished, _ = wait(pending, return_when=FIRST_COMPLETED)
            threat = False
            for fut in finished:
                index = pending.pop(fut)
                result = fut.result()
                done_by_index[index] = result
                threat = threat or bool(result.findings)
            if threat and config.stop_on_first_threat:
                for fut in pending:
                    fut.cancel()
                # Keep whatever was already running; drop what never started.
                for fut, index in pending.items():
                    if not fut.cancelled():
                        done_by_index[index] = fut.result()
                logger.info("Stopping after first threat; %d file(s) not scanned",
                            sum(1 for f in pending if f.cancelled()))
                break
    return [done_by_index[i] for i in sorted(done_by_index)]


def scan_paths(paths: list[str], config: ScanConfig) -> list[ScanResult]:
    """Scan files with `config.jobs` workers. Results follow input order."""
    if config.jobs <= 1 or len(paths) <= 1:
        return _scan_sequential(paths, config)
    return _scan_pooled(paths, config)


def run(patterns: list[str], config: ScanConfig) -> tuple[Report, Verdict]:
    """Resolve patterns, scan, aggregate, and decide the verdict.

    Raises InputResolutionError if nothing matched.
    """
    matched = expand_patterns(patterns)
    kept, ignored = partition_ignored(matched, config.scan_bundles)
    for path in ignored:
        logger.debug("  (ignored) %s", escape_for_display(path))
    if not kept:
        logger.warning("All %d matched file(s) are in ignored directories", len(ignored))

    results = scan_paths(kept, config)
    report = aggregate(results)
    verdict = evaluate(report, fail_on_skip=config.fail_on_skip)
    logger.info(
        "Scanned: %d files, Ignored: %d files, Skipped: %d files, Findings: %d",
        report.total_files_scanned, len(ignored), len(report.skipped_files), report.total_findings,
    )
    return report, verdict
