"""Tests for per-file scanning: positions, ordering, decode failures, snippets."""

from __future__ import annotations

import pytest

from invisible_detector.categories import RiskCategory
from invisible_detector.scanner import (
    context_snippet,
    escape_for_display,
    iter_scalars,
    scan,
    scan_failure,
    utf8_width,
)


def test_no_break_space_in_statement():
    """let<NBSP>x = 5; yields exactly one confusable-whitespace finding."""
    result = scan("main.rs", "let\u00a0x = 5;".encode("utf-8"))
    assert result.decode_error is None
    assert len(result.findings) == 1
    f = result.findings[0]
    assert f.category is RiskCategory.CONFUSABLE_WHITESPACE
    assert f.code_point == 0x00A0
    assert f.line == 1
    assert f.column == 4
    assert f.byte_offset == 4
    assert f.name == "NO-BREAK SPACE"
    assert f.file_path == "main.rs"


def test_ascii_only_has_no_findings():
    result = scan("clean.py", b"def f(x):\n\treturn x + 1\r\n")
    assert result.findings == ()
    assert result.decode_error is None
    assert not result.skipped


def test_rtl_override_before_reversed_identifier():
    result = scan("auth.js", 'if (role === "\u202enimda") {}\n')
    assert len(result.findings) == 1
    f = result.findings[0]
    assert f.category is RiskCategory.BIDI_CONTROL
    assert f.code_point == 0x202E
    assert f.name == "RIGHT-TO-LEFT OVERRIDE"


def test_line_and_column_reset_after_newline():
    result = scan("a.txt", "ab\n\u200bc\nxy\u200d")
    assert [(f.line, f.column) for f in result.findings] == [(2, 1), (3, 3)]


def test_byte_offset_counts_utf8_bytes_not_chars():
    # e-acute is 2 bytes, CJK is 3, emoji is 4
    text = "\u00e9\u4e2d\U0001f600\u200b"
    result = scan("a.txt", text.encode("utf-8"))
    f = result.findings[0]
    assert f.byte_offset == 1 + 2 + 3 + 4
    assert f.column == 4
    assert text.encode("utf-8")[f.byte_offset - 1:f.byte_offset + 2] == "\u200b".encode("utf-8")


def test_str_and_bytes_input_agree():
    text = "x\u2060y\n\ue000"
    assert scan("f", text) == scan("f", text.encode("utf-8"))


def test_findings_strictly_increasing_by_byte_offset():
    text = "\u200b\u200c\u200d a\u202e\nb\ufe0f\u00ad\u3164\x07\u0085"
    findings = scan("f", text.encode("utf-8")).findings
    assert len(findings) == 9
    offsets = [f.byte_offset for f in findings]
    assert all(a < b for a, b in zip(offsets, offsets[1:]))


def test_leading_bom_is_reported():
    result = scan("bom.txt", b"\xef\xbb\xbfhello")
    assert len(result.findings) == 1
    assert result.findings[0].category is RiskCategory.ZERO_WIDTH_OR_JOINER
    assert result.findings[0].byte_offset == 1


def test_invalid_utf8_is_a_decode_error_not_an_exception():
    result = scan("bad.bin", b"abc\xff\xfe\xe2\x80\x8b")
    assert result.skipped
    assert result.findings == ()
    assert result.decode_error.startswith("E_DECODE")
    assert "byte 4" in result.decode_error


def test_scan_failure_carries_reason():
    result = scan_failure("gone.txt", "E_READ: No such file or directory")
    assert result.skipped
    assert result.findings == ()
    assert result.decode_error == "E_READ: No such file or directory"


def test_snippet_escapes_the_hidden_character():
    result = scan("f.js", "const ok\u200b = true;")
    snippet = result.findings[0].context_snippet
    assert snippet == "const ok[U+200B] = true;"
    assert "\u200b" not in snippet


def test_snippet_stays_on_its_own_line():
    result = scan("f.js", "first line\nsecond\u2066line\nthird line")
    assert result.findings[0].context_snippet == "second[U+2066]line"


def test_snippet_radius_is_bounded():
    text = "a" * 100 + "\u202e" + "b" * 100
    snippet = scan("f", text, context_radius=5).findings[0].context_snippet
    assert snippet == "aaaaa[U+202E]bbbbb"


def test_escape_for_display_leaves_printable_text_alone():
    assert escape_for_display("caf\u00e9 = 1") == "caf\u00e9 = 1"
    assert escape_for_display("a\tb") == "a[U+0009]b"
    assert escape_for_display("x\u00a0y") == "x[U+00A0]y"


def test_context_snippet_at_line_edges():
    text = "\u200bab"
    assert context_snippet(text, 0, radius=3) == "[U+200B]ab"


def test_iter_scalars_skips_newlines():
    positions = list(iter_scalars("a\nb"))
    assert positions == [(0, 1, 1, 1, "a"), (2, 3, 2, 1, "b")]


@pytest.mark.parametrize(
    "code, width",
    [(0x41, 1), (0x7F, 1), (0x80, 2), (0x7FF, 2), (0x800, 3), (0xFFFF, 3), (0x10000, 4), (0x10FFFF, 4)],
)
def test_utf8_width(code, width):
    assert utf8_width(code) == width


def test_snippets_on_a_long_single_line():
    """Many findings on one minified-style line each get their own bounded window."""
    text = "x = 1;\n" + "ab\u00a0cd" * 5000 + "\ntail"
    findings = scan("bundle.js", text, context_radius=4).findings
    assert len(findings) == 5000
    assert findings[0].context_snippet == "ab[U+00A0]cdab"
    assert findings[2500].context_snippet == "cdab[U+00A0]cdab"
    assert findings[-1].context_snippet == "cdab[U+00A0]cd"
    for f in findings[1:-1]:
        assert f.context_snippet == "cdab[U+00A0]cdab"


def test_context_snippet_newline_at_window_edge():
    text = "ab\ncd\u200bef\ngh"
    assert context_snippet(text, 5, radius=3) == "cd[U+200B]ef"
    assert context_snippet(text, 5, radius=2) == "cd[U+200B]ef"
    assert context_snippet(text, 5, radius=1) == "d[U+200B]e"


def test_lone_surrogate_is_not_a_finding_but_is_escaped():
    assert scan("f", "a\ud800b").findings == ()
    assert escape_for_display("a\ud800b") == "a[U+D800]b"
    result = scan("f", "\udfff\u200b")
    assert [f.code_point for f in result.findings] == [0x200B]
    assert result.findings[0].context_snippet == "[U+DFFF][U+200B]"
