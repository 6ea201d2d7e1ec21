"""Aggregation, verdict, exit codes, and report rendering (text + JSON)."""

from __future__ import annotations

import json
from enum import Enum
from typing import Iterable

from invisible_detector.categories import REPORTABLE_CATEGORIES, format_code_point
from invisible_detector.models import Report, ScanResult, SkippedFile
from invisible_detector.scanner import escape_for_display


class Verdict(Enum):
    CLEAN = 0
    THREAT = 1
    OPERATIONAL_ERROR = 2

    @property
    def exit_code(self) -> int:
        # Hard contract with CI callers: 0 clean, 1 threat, 2 operational error.
        return self.value


def aggregate(scan_results: Iterable[ScanResult]) -> Report:
    """Fold per-file results into a Report, preserving input order."""
    per_file: list[ScanResult] = []
    skipped: list[SkippedFile] = []
    by_category = {c.key: 0 for c in REPORTABLE_CATEGORIES}
    total = 0

    for result in scan_results:
        per_file.append(result)
        if result.skipped:
            skipped.append(SkippedFile(path=result.file_path, reason=result.decode_error or ""))
            continue
        for finding in result.findings:
            by_category[finding.category.key] += 1
            total += 1

    return Report(
        total_files_scanned=len(per_file),
        total_findings=total,
        findings_by_category=by_category,
        per_file=tuple(per_file),
        skipped_files=tuple(skipped),
    )


def evaluate(report: Report, fail_on_skip: bool = False) -> Verdict:
    """Decide the run verdict. A skip escalation outranks findings."""
    if fail_on_skip and report.skipped_files:
        return Verdict.OPERATIONAL_ERROR
    if report.total_findings > 0:
        return Verdict.THREAT
    return Verdict.CLEAN


def render_json(report: Report) -> str:
    """Stable, pretty-printed JSON mirroring the Report fields."""
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=True)


def render_text(report: Report, verbose: bool = False) -> str:
    """Human-readable summary grouped by file, in scan order."""
    lines: list[str] = []

    if report.total_findings == 0:
        lines.append("No suspicious invisible characters detected.")
    else:
        lines.append(f"Found {report.total_findings} suspicious character(s):")
        lines.append("")
        for result in report.per_file:
            if not result.findings:
                continue
            lines.append(escape_for_display(result.file_path))
            for f in result.findings:
                lines.append(
                    f"    Line {f.line}:{f.column} (byte {f.byte_offset}) - "
                    f"{f.name} ({format_code_point(f.code_point)})"
                )
                lines.append(f"  {f.description}")
                if verbose:
                    lines.append(f"  context: {f.context_snippet}")
            lines.append("")

    if verbose:
        if lines[-1] != "":
            lines.append("")
        lines.append(
            f"Scanned: {report.total_files_scanned} files, "
            f"Skipped: {len(report.skipped_files)} files"
        )
        for category in REPORTABLE_CATEGORIES:
            count = report.findings_by_category.get(category.key, 0)
            if count:
                lines.append(f"  {category.label}: {count}")
        for skip in report.skipped_files:
            lines.append(f"  (skipped) {escape_for_display(skip.path)}: {skip.reason}")

    return "\n".join(lines).rstrip("\n")
