"""Error taxonomy: run-level exceptions, per-file skip codes, structured error envelope."""

from __future__ import annotations

from typing import Any

# Per-file conditions. Recorded as skipped-file reasons, never raised.
E_DECODE = "E_DECODE"
E_READ = "E_READ"
E_TOO_LARGE = "E_TOO_LARGE"

# Run-level conditions. Raised before any scan starts.
E_NO_MATCH = "E_NO_MATCH"
E_INVALID_PATTERN = "E_INVALID_PATTERN"
E_CONFIG = "E_CONFIG"


class DetectorError(Exception):
    """Base for errors that abort a run with an operational failure."""

    code = "E_INTERNAL"

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return err(self.code, self.message, self.details)


class InputResolutionError(DetectorError):
    """No files matched, or a pattern could not be used."""

    code = E_NO_MATCH


class ConfigError(DetectorError):
    """Malformed configuration value."""

    code = E_CONFIG


def err(
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured error envelope."""
    return {
        "ok": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        },
    }


def skip_reason(code: str, message: str) -> str:
    """Format a per-file skip reason: 'E_DECODE: invalid utf-8 ...'."""
    return f"{code}: {message}"
