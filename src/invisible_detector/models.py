"""Data models: Finding, ScanResult, SkippedFile, Report."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from invisible_detector.categories import RiskCategory, format_code_point


@dataclass(frozen=True)
class Finding:
    file_path: str
    byte_offset: int  # 1-based
    line: int  # 1-based
    column: int  # 1-based, in scalar values
    code_point: int
    category: RiskCategory
    context_snippet: str
    name: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "byte_offset": self.byte_offset,
            "line": self.line,
            "column": self.column,
            "code_point": self.code_point,
            "unicode": format_code_point(self.code_point),
            "name": self.name,
            "category": self.category.key,
            "severity": self.category.severity,
            "description": self.description,
            "context_snippet": self.context_snippet,
        }


@dataclass(frozen=True)
class ScanResult:
    file_path: str
    findings: tuple[Finding, ...] = ()
    decode_error: str | None = None

    @property
    def skipped(self) -> bool:
        return self.decode_error is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "findings": [f.to_dict() for f in self.findings],
            "decode_error": self.decode_error,
        }


@dataclass(frozen=True)
class SkippedFile:
    path: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "reason": self.reason}


@dataclass(frozen=True)
class Report:
    """Aggregated outcome of one invocation. Built once, never mutated."""

    total_files_scanned: int
    total_findings: int
    findings_by_category: Mapping[str, int]
    per_file: tuple[ScanResult, ...] = ()
    skipped_files: tuple[SkippedFile, ...] = ()

    def __post_init__(self) -> None:
        # Freeze the mapping; the dataclass itself only blocks rebinding.
        object.__setattr__(
            self, "findings_by_category", MappingProxyType(dict(self.findings_by_category))
        )

    def findings(self) -> list[Finding]:
        """All findings across files, in report order."""
        return [f for result in self.per_file for f in result.findings]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files_scanned": self.total_files_scanned,
            "total_findings": self.total_findings,
            "findings_by_category": dict(self.findings_by_category),
            "per_file": [r.to_dict() for r in self.per_file],
            "skipped_files": [s.to_dict() for s in self.skipped_files],
        }
