"""Code point classification: zero-width, bidi, variation selectors, PUA, controls, blanks."""

from __future__ import annotations

import bisect
import unicodedata
from enum import Enum

MAX_SCALAR_VALUE = 0x10FFFF


class RiskCategory(Enum):
    """Closed set of risk categories. Every scalar value maps to exactly one."""

    ZERO_WIDTH_OR_JOINER = ("ZeroWidthOrJoiner", "Zero-width / joiner", "high")
    BIDI_CONTROL = ("BidiControl", "Bidirectional control", "high")
    VARIATION_SELECTOR = ("VariationSelector", "Variation selector", "high")
    PRIVATE_USE_AREA = ("PrivateUseArea", "Private use area", "medium")
    SUSPICIOUS_CONTROL = ("SuspiciousControl", "Control character", "medium")
    CONFUSABLE_WHITESPACE = ("ConfusableWhitespace", "Confusable whitespace", "low")
    BENIGN = ("Benign", "Benign", "none")

    def __init__(self, key: str, label: str, severity: str) -> None:
        self.key = key
        self.label = label
        self.severity = severity

    @property
    def reportable(self) -> bool:
        return self is not RiskCategory.BENIGN


REPORTABLE_CATEGORIES: tuple[RiskCategory, ...] = tuple(
    c for c in RiskCategory if c.reportable
)

_Z = RiskCategory.ZERO_WIDTH_OR_JOINER
_B = RiskCategory.BIDI_CONTROL
_V = RiskCategory.VARIATION_SELECTOR
_P = RiskCategory.PRIVATE_USE_AREA
_C = RiskCategory.SUSPICIOUS_CONTROL
_W = RiskCategory.CONFUSABLE_WHITESPACE

# Inclusive, pairwise-disjoint ranges. Tab (0x09), LF (0x0A), CR (0x0D) and
# space (0x20) fall into the gaps and stay benign.
_RANGES: tuple[tuple[int, int, RiskCategory], ...] = (
    (0x0000, 0x0008, _C),
    (0x000B, 0x000C, _C),
    (0x000E, 0x001F, _C),
    (0x007F, 0x009F, _C),       # DEL + C1 controls
    (0x00A0, 0x00A0, _W),       # NO-BREAK SPACE
    (0x00AD, 0x00AD, _W),       # SOFT HYPHEN
    (0x061C, 0x061C, _B),       # ARABIC LETTER MARK
    (0x2007, 0x2007, _W),       # FIGURE SPACE
    (0x200B, 0x200D, _Z),       # ZWSP, ZWNJ, ZWJ
    (0x200E, 0x200F, _B),       # LRM, RLM
    (0x2028, 0x2029, _W),       # LINE / PARAGRAPH SEPARATOR
    (0x202A, 0x202E, _B),       # embeddings + overrides
    (0x202F, 0x202F, _W),       # NARROW NO-BREAK SPACE
    (0x2060, 0x2060, _Z),       # WORD JOINER
    (0x2066, 0x2069, _B),       # isolates
    (0x3000, 0x3000, _W),       # IDEOGRAPHIC SPACE
    (0x3164, 0x3164, _W),       # HANGUL FILLER
    (0xE000, 0xF8FF, _P),
    (0xFE00, 0xFE0F, _V),
    (0xFEFF, 0xFEFF, _Z),       # ZERO WIDTH NO-BREAK SPACE / BOM
    (0xF0000, 0xFFFFD, _P),
    (0x100000, 0x10FFFD, _P),
)

_STARTS: tuple[int, ...] = tuple(r[0] for r in _RANGES)


def classification_ranges() -> tuple[tuple[int, int, RiskCategory], ...]:
    """Return the static range table (start, end, category), sorted by start."""
    return _RANGES


def classify(code_point: int) -> RiskCategory:
    """Map a Unicode scalar value to its risk category.

    Raises ValueError for values outside 0..0x10FFFF.
    """
    if code_point < 0 or code_point > MAX_SCALAR_VALUE:
        raise ValueError(f"Not a Unicode code point: {code_point!r}")
    i = bisect.bisect_right(_STARTS, code_point) - 1
    if i >= 0:
        start, end, category = _RANGES[i]
        if start <= code_point <= end:
            return category
    return RiskCategory.BENIGN


def is_reportable(code_point: int) -> bool:
    return classify(code_point).reportable


_DESCRIPTIONS: dict[int, str] = {
    0x200B: "Invisible character used to hide code",
    0x200C: "Can alter code logic invisibly",
    0x200D: "Can alter code logic invisibly",
    0x2060: "Invisible joiner; often used to hide payloads",
    0xFEFF: "BOM or invisible space",
    0x202A: "Bidi control; can mislead code review",
    0x202B: "Bidi control; can mislead code review",
    0x202C: "Bidi control; terminates embeddings/overrides",
    0x202D: "Bidi override; can reorder displayed code",
    0x202E: "Bidi override; can reorder displayed code",
    0x2066: "Bidi isolate; can affect display order",
    0x2067: "Bidi isolate; can affect display order",
    0x2068: "Bidi isolate; can affect display order",
    0x2069: "Bidi isolate terminator",
    0x200E: "Invisible directional marker",
    0x200F: "Invisible directional marker",
    0x061C: "Invisible directional marker",
    0x2028: "Can break parsing/tokenization",
    0x2029: "Can break parsing/tokenization",
    0x3164: "Often renders as blank; used for obfuscation",
    0x00AD: "Invisible in most contexts; used for obfuscation",
}

_CATEGORY_DESCRIPTIONS: dict[RiskCategory, str] = {
    _Z: "Invisible character used to hide code",
    _B: "Bidi control; can mislead code review",
    _V: "Can modify character appearance; abused to encode hidden payloads",
    _P: "Private use character - commonly used for payload hiding",
    _C: "Suspicious control character",
    _W: "Non-ASCII whitespace; may bypass naive filters",
}


def describe(code_point: int) -> tuple[str, str]:
    """Return (name, description) for a reportable code point.

    Benign code points get their Unicode name and an empty description.
    """
    category = classify(code_point)
    name = unicodedata.name(chr(code_point), "")
    if not name:
        if category is _P:
            name = "PRIVATE USE AREA"
        elif category is _C:
            name = "CONTROL CHARACTER"
        else:
            name = "UNNAMED CHARACTER"
    if not category.reportable:
        return name, ""
    description = _DESCRIPTIONS.get(code_point, _CATEGORY_DESCRIPTIONS[category])
    return name, description


def format_code_point(code_point: int) -> str:
    """U+XXXX notation, at least four hex digits."""
    return f"U+{code_point:04X}"
