"""Command line entry point: parse flags, run the scan, print the report, exit."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from invisible_detector import __version__
from invisible_detector.config import ScanConfig, load_config
from invisible_detector.errors import DetectorError
from invisible_detector.report import Verdict, render_json, render_text
from invisible_detector.runner import run

logger = logging.getLogger("invisible_detector")

DESCRIPTION = "Invisible Character Detector - Find suspicious Unicode in code"

EPILOG = """\
examples:
  invisible-char-detector "**/*.rs"
  invisible-char-detector "src/**/*.ts" --json
  invisible-char-detector "**/*.js" --verbose
  invisible-char-detector "**/*.tsx" --scan-bundles

detects:
  - Zero-width / joiners (U+200B, U+200C, U+200D, U+2060, U+FEFF)
  - Bidirectional controls (U+202A-U+202E, U+2066-U+2069)
  - Directional marks (U+200E, U+200F, U+061C)
  - Variation selectors (U+FE00-U+FE0F)
  - Line/paragraph separators (U+2028, U+2029)
  - Select non-ASCII whitespace (e.g. U+00A0, U+2007, U+202F, U+3000)
  - Private Use Area characters
  - Suspicious control characters

exit codes:
  0  No suspicious characters found
  1  Suspicious characters detected (fail in CI)
  2  Operational error (no match, bad config, read failure with --fail-on-skip)
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="invisible-char-detector",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("patterns", nargs="+", metavar="PATTERN",
                        help="Glob pattern, file, or directory to scan (e.g. '**/*.rs')")
    parser.add_argument("--json", dest="json_output", action="store_true", default=None,
                        help="Output results as JSON (for CI/tooling integration)")
    parser.add_argument("-v", "--verbose", action="store_true", default=None,
                        help="Show ignored/unreadable files and wider context")
    parser.add_argument("--scan-bundles", action="store_true", default=None,
                        help="Include dist/, build/, out/ directories (useful for bundled extensions)")
    parser.add_argument("--fail-on-skip", action="store_true", default=None,
                        help="Exit with code 2 if any files cannot be read (strict mode)")
    parser.add_argument("-j", "--jobs", type=_positive_int, default=None,
                        help="Number of files scanned in parallel (default: 1)")
    parser.add_argument("--stop-on-first-threat", action="store_true", default=None,
                        help="Stop dispatching files once a finding is reported")
    parser.add_argument("--max-file-bytes", type=_positive_int, default=None,
                        help="Skip files larger than this many bytes")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {raw!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {raw!r}")
    return value


def configure_logging(verbose: bool) -> None:
    """Log to stderr so stdout carries only the report."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def resolve_config(args: argparse.Namespace) -> ScanConfig:
    """Env defaults first, then any flag given on the command line."""
    return load_config().with_overrides(
        scan_bundles=args.scan_bundles,
        fail_on_skip=args.fail_on_skip,
        verbose=args.verbose,
        json_output=args.json_output,
        jobs=args.jobs,
        stop_on_first_threat=args.stop_on_first_threat,
        max_file_bytes=args.max_file_bytes,
    )


def _report_error(exc: DetectorError, json_output: bool) -> None:
    if json_output:
        print(json.dumps(exc.to_dict(), indent=2))
    else:
        print(f"Error: {exc.message}", file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the detector and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(bool(args.verbose))

    try:
        config = resolve_config(args)
    except DetectorError as exc:
        _report_error(exc, bool(args.json_output))
        return Verdict.OPERATIONAL_ERROR.exit_code

    logger.info("Scanning files matching: %s", " ".join(args.patterns))
    logger.debug(
        "Options: json=%s, scan_bundles=%s, fail_on_skip=%s, jobs=%d",
        config.json_output, config.scan_bundles, config.fail_on_skip, config.jobs,
    )

    try:
        report, verdict = run(list(args.patterns), config)
    except DetectorError as exc:
        _report_error(exc, config.json_output)
        return Verdict.OPERATIONAL_ERROR.exit_code

    if config.json_output:
        print(render_json(report))
    else:
        print(render_text(report, verbose=config.verbose))

    if verdict is Verdict.OPERATIONAL_ERROR:
        logger.error(
            "%d file(s) were skipped (--fail-on-skip enabled)", len(report.skipped_files)
        )
    return verdict.exit_code
