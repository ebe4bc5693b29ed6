#!/usr/bin/env python3
"""Number and resolve the extended lists of one Markdown file.

Runs a full recompute over the file and reports markers, content regions,
resolved references, ordinal runs and label registries.

Usage:
    python3 scripts/list_numbering.py notes.md
    python3 scripts/list_numbering.py notes.md --strict --summary
    python3 scripts/list_numbering.py notes.md --settings settings.json
    python3 scripts/list_numbering.py notes.md --output report.json

Structured JSON output goes to stdout; human messages go to stderr.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pandoc_lists.io_utils import load_json, result_to_dict, save_json, summary_to_dict  # noqa: E402
from pandoc_lists.pipeline import recompute  # noqa: E402
from pandoc_lists.types import NumberingConfig  # noqa: E402

log = logging.getLogger("list_numbering")


def dump_json(obj: Any) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()


def build_config(args: argparse.Namespace) -> NumberingConfig:
    """Settings file first, then command-line switches on top."""
    base = NumberingConfig()
    if args.settings is not None:
        data = load_json(args.settings)
        if not isinstance(data, dict):
            raise ValueError(f"{args.settings}: settings must be a JSON object")
        base = NumberingConfig.from_mapping(data)
    return NumberingConfig(
        strict_mode=base.strict_mode or args.strict,
        extended_labels=base.extended_labels and not args.no_extended_labels,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Number Pandoc extended lists and resolve their references.",
    )
    parser.add_argument("file", type=Path, help="Markdown file to process")
    parser.add_argument(
        "--strict", action="store_true",
        help="Require blank lines around lists and two spaces after capital-letter markers",
    )
    parser.add_argument(
        "--no-extended-labels", action="store_true",
        help="Disable {::LABEL} custom labels and placeholder numbering",
    )
    parser.add_argument(
        "--settings", type=Path, default=None,
        help="JSON file with host settings (strictPandocMode, moreExtendedSyntax, ...)",
    )
    parser.add_argument(
        "--summary", action="store_true",
        help="Emit counts and label tables instead of the full result",
    )
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Write output to file instead of stdout",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    if not args.file.exists():
        log.error("input file not found: %s", args.file)
        return 1
    if args.settings is not None and not args.settings.exists():
        log.error("settings file not found: %s", args.settings)
        return 1

    config = build_config(args)
    text = args.file.read_text(encoding="utf-8")
    result = recompute(text, config)

    log.info(
        "%s: %d lines, %d replacements, %d invalid",
        args.file, len(result.lines), len(result.replacements), len(result.invalid_lines),
    )
    report = summary_to_dict(result) if args.summary else result_to_dict(result)
    if args.output:
        save_json(report, args.output)
        log.info("wrote report to %s", args.output)
    else:
        dump_json(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
