"""Per-file scanning: decode, walk scalar values once, emit positioned findings."""

from __future__ import annotations

import unicodedata
from typing import Iterator

from invisible_detector.categories import classify, describe, format_code_point
from invisible_detector.errors import E_DECODE, skip_reason
from invisible_detector.models import Finding, ScanResult

DEFAULT_CONTEXT_RADIUS = 20

# Unicode general categories rendered as escapes in snippets, beyond the
# risky set itself: controls, format, surrogates, private use, unassigned,
# line/paragraph separators.
_ESCAPED_GENERAL_CATEGORIES = {"Cc", "Cf", "Cs", "Co", "Cn", "Zl", "Zp"}


def utf8_width(code_point: int) -> int:
    """Number of bytes the code point occupies in UTF-8."""
    if code_point < 0x80:
        return 1
    if code_point < 0x800:
        return 2
    if code_point < 0x10000:
        return 3
    return 4


def iter_scalars(text: str) -> Iterator[tuple[int, int, int, int, str]]:
    """Yield (index, byte_offset, line, column, char) for every non-LF scalar value.

    index is the position in `text`; byte_offset, line and column are
    1-based. LF advances the line and resets the column; it is never
    yielded itself.
    """
    byte_offset = 0
    line = 1
    column = 0
    for index, ch in enumerate(text):
        code = ord(ch)
        if ch == "\n":
            line += 1
            column = 0
        else:
            column += 1
            yield index, byte_offset + 1, line, column, ch
        byte_offset += utf8_width(code)


def escape_for_display(text: str) -> str:
    """Render invisible, risky and non-printable characters as [U+XXXX]."""
    out: list[str] = []
    for ch in text:
        code = ord(ch)
        if ch == " ":
            out.append(ch)
        elif (
            classify(code).reportable
            or unicodedata.category(ch) in _ESCAPED_GENERAL_CATEGORIES
            or not ch.isprintable()
        ):
            out.append(f"[{format_code_point(code)}]")
        else:
            out.append(ch)
    return "".join(out)


def _window_bounds(text: str, index: int, radius: int) -> tuple[int, int]:
    # Both newline searches are confined to the window.
    lo = max(0, index - radius)
    hi = min(len(text), index + radius + 1)
    start = text.rfind("\n", lo, index) + 1
    end = text.find("\n", index, hi)
    return max(lo, start), hi if end == -1 else end


def context_snippet(text: str, index: int, radius: int = DEFAULT_CONTEXT_RADIUS) -> str:
    """Escaped window of up to `radius` chars either side of text[index], same line only."""
    lo, hi = _window_bounds(text, index, radius)
    return escape_for_display(text[lo:hi])


def decode(content: bytes) -> tuple[str | None, str | None]:
    """Strict UTF-8 decode. Returns (text, None) or (None, error message)."""
    try:
        return content.decode("utf-8"), None
    except UnicodeDecodeError as exc:
        return None, skip_reason(
            E_DECODE,
            f"invalid utf-8 at byte {exc.start + 1}: {exc.reason}",
        )


def scan_text(file_path: str, text: str, context_radius: int = DEFAULT_CONTEXT_RADIUS) -> list[Finding]:
    """Scan decoded text. Findings come out ordered by byte offset."""
    findings: list[Finding] = []
    for index, byte_offset, line, column, ch in iter_scalars(text):
        code = ord(ch)
        category = classify(code)
        if not category.reportable:
            continue
        name, description = describe(code)
        findings.append(Finding(
            file_path=file_path,
            byte_offset=byte_offset,
            line=line,
            column=column,
            code_point=code,
            category=category,
            context_snippet=context_snippet(text, index, context_radius),
            name=name,
            description=description,
        ))
    return findings


def scan(
    file_path: str,
    content: bytes | str,
    *,
    context_radius: int = DEFAULT_CONTEXT_RADIUS,
) -> ScanResult:
    """Scan one file's content.

    Bytes are decoded as strict UTF-8; a decode failure is returned in the
    result rather than raised.
    """
    if isinstance(content, bytes):
        text, error = decode(content)
        if text is None:
            return scan_failure(file_path, error)
    else:
        text = content
    return ScanResult(
        file_path=file_path,
        findings=tuple(scan_text(file_path, text, context_radius)),
    )


def scan_failure(file_path: str, reason: str) -> ScanResult:
    """Result for a file that could not be read or decoded."""
    return ScanResult(file_path=file_path, findings=(), decode_error=reason)
