"""Configuration: scan options, ignore lists, env overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping

from invisible_detector.errors import ConfigError
from invisible_detector.scanner import DEFAULT_CONTEXT_RADIUS

# Always skipped, matched per path component.
IGNORED_COMPONENTS: frozenset[str] = frozenset(
    {"node_modules", ".git", ".cargo", "target", ".vscode"}
)

# Build output. Skipped unless scan_bundles is set (bundled extensions often
# ship their real code under dist/ or out/).
BUNDLE_COMPONENTS: frozenset[str] = frozenset(
    {"dist", "build", "out", ".next", ".nuxt"}
)

DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024
VERBOSE_CONTEXT_RADIUS = 60

ENV_PREFIX = "INVISIBLE_DETECTOR_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class ScanConfig:
    scan_bundles: bool = False
    fail_on_skip: bool = False
    verbose: bool = False
    json_output: bool = False
    jobs: int = 1
    stop_on_first_threat: bool = False
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES

    @property
    def context_radius(self) -> int:
        return VERBOSE_CONTEXT_RADIUS if self.verbose else DEFAULT_CONTEXT_RADIUS

    def with_overrides(self, **overrides: object) -> "ScanConfig":
        """Copy with the given fields replaced. None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(
        f"{name} must be a boolean (1/0, true/false, yes/no), got {raw!r}.",
        details={"variable": name, "value": raw},
    )


def _parse_positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        value = 0
    if value < 1:
        raise ConfigError(
            f"{name} must be a positive integer, got {raw!r}.",
            details={"variable": name, "value": raw},
        )
    return value


def load_config(env: Mapping[str, str] | None = None) -> ScanConfig:
    """Build a ScanConfig from INVISIBLE_DETECTOR_* environment variables.

    Unset variables keep their defaults. Malformed values fail closed with
    ConfigError.
    """
    if env is None:
        env = os.environ

    values: dict[str, object] = {}
    for field_name in ("scan_bundles", "fail_on_skip"):
        var = ENV_PREFIX + field_name.upper()
        if var in env:
            values[field_name] = _parse_bool(var, env[var])
    for field_name in ("jobs", "max_file_bytes"):
        var = ENV_PREFIX + field_name.upper()
        if var in env:
            values[field_name] = _parse_positive_int(var, env[var])

    return ScanConfig(**values)
