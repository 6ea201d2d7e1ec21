"""Create sample files for a manual end-to-end check.

Usage: python scripts/create_fixtures.py <root_dir>

Writes one file per risk category, plus a clean file and an undecodable one:
  - zero_width.js      (ZeroWidthOrJoiner: U+200B inside an identifier)
  - trojan_source.js   (BidiControl: U+202E / U+2066 / U+2069)
  - variation.txt      (VariationSelector: U+FE00..U+FE0F payload)
  - private_use.py     (PrivateUseArea: U+E000)
  - control.c          (SuspiciousControl: ESC U+001B)
  - whitespace.rs      (ConfusableWhitespace: U+00A0 between tokens)
  - clean.py           (no findings)
  - latin1.txt         (invalid UTF-8, reported as skipped)
  - dist/bundle.js     (only scanned with --scan-bundles)

Then run: invisible-char-detector "<root_dir>" --verbose
"""

from __future__ import annotations

import os
import sys

FIXTURES: dict[str, bytes] = {
    "zero_width.js": "function normalLook\u200bing() {\n    return 'hidden';\n}\n".encode("utf-8"),
    "trojan_source.js": (
        "var accessLevel = 'user';\n"
        "if (accessLevel != 'user\u202e \u2066// Check if admin\u2069 \u2066') {\n"
        "    console.log('You are an admin.');\n"
        "}\n"
    ).encode("utf-8"),
    "variation.txt": ("payload: A" + "".join(chr(0xFE00 + b) for b in (1, 14, 7, 15)) + "\n").encode("utf-8"),
    "private_use.py": "icon = '\ue000'\n".encode("utf-8"),
    "control.c": "int main(void) { return 0; } /* \x1b[2K */\n".encode("utf-8"),
    "whitespace.rs": "let\u00a0x = 5;\n".encode("utf-8"),
    "clean.py": b"print('hello, world')\n",
    "latin1.txt": "caf\u00e9\n".encode("latin-1"),
    os.path.join("dist", "bundle.js"): "module.exports = '\u2060';\n".encode("utf-8"),
}


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python create_fixtures.py <root_dir>", file=sys.stderr)
        sys.exit(1)

    root = sys.argv[1]
    if not os.path.isdir(root):
        print(f"Root does not exist: {root}", file=sys.stderr)
        sys.exit(1)

    for rel, data in FIXTURES.items():
        path = os.path.join(root, rel)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        print(f"  created: {rel} ({len(data)} bytes)")

    count = sum(len(files) for _, _, files in os.walk(root))
    print(f"  root contains {count} files")


if __name__ == "__main__":
    main()
