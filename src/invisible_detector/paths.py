"""Path utilities: glob expansion and the ignore / bundle exclusion policy."""

from __future__ import annotations

import glob
import os
import re

from invisible_detector.config import BUNDLE_COMPONENTS, IGNORED_COMPONENTS
from invisible_detector.errors import E_INVALID_PATTERN, InputResolutionError

_SEPARATORS = re.compile(r"[/\\]")


def path_components(path: str) -> list[str]:
    """Split on both / and \\ regardless of host OS."""
    return [c for c in _SEPARATORS.split(path) if c]


def should_ignore_path(path: str, scan_bundles: bool) -> bool:
    """Check whether a path falls under an ignored or (optionally) bundle directory.

    Matching is per component, so "outline.ts" or "distance/x.js" are not
    mistaken for out/ or dist/.
    """
    components = path_components(path)
    if any(c in IGNORED_COMPONENTS for c in components):
        return True
    if not scan_bundles and any(c in BUNDLE_COMPONENTS for c in components):
        return True
    return False


def _expand_one(pattern: str) -> list[str]:
    if os.path.isdir(pattern):
        pattern = os.path.join(pattern, "**", "*")
    matches = glob.glob(pattern, recursive=True)
    # glob skips dotfiles for wildcards; an explicit file path still matches.
    return sorted(m for m in matches if os.path.isfile(m))


def expand_patterns(patterns: list[str]) -> list[str]:
    """Resolve glob patterns (and plain file or directory paths) to files.

    Order: patterns in the order given, matches of each pattern sorted.
    Duplicates keep their first position. Raises InputResolutionError if a
    pattern is empty or nothing at all matched.
    """
    if not patterns:
        raise InputResolutionError("No file pattern given.", code=E_INVALID_PATTERN)

    seen: set[str] = set()
    files: list[str] = []
    for pattern in patterns:
        if not pattern or not pattern.strip():
            raise InputResolutionError(
                "Empty file pattern.", code=E_INVALID_PATTERN, details={"pattern": pattern}
            )
        for match in _expand_one(pattern):
            key = os.path.normpath(match)
            if key in seen:
                continue
            seen.add(key)
            files.append(match)

    if not files:
        raise InputResolutionError(
            f"No files matched pattern: {' '.join(patterns)}",
            details={"patterns": list(patterns)},
        )
    return files


def partition_ignored(paths: list[str], scan_bundles: bool) -> tuple[list[str], list[str]]:
    """Split paths into (kept, ignored), both in input order."""
    kept: list[str] = []
    ignored: list[str] = []
    for path in paths:
        (ignored if should_ignore_path(path, scan_bundles) else kept).append(path)
    return kept, ignored
