"""Analyze an exported exam history and print the performance report as JSON."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from engines.analysis import analyze
from env_validation import EnvironmentError, get_env_bool, get_log_level, validate_environment
from schemas import ExamPayloadError, parse_exam_payload
from subject_catalog import CatalogConfigError, catalog_from_env, load_catalog

logger = logging.getLogger("exam_analysis.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "input",
        type=str,
        help="Path to the exam JSON payload, or '-' to read standard input",
    )
    parser.add_argument(
        "--selection",
        type=str,
        default=None,
        help='Elective selection as a JSON array, e.g. \'["Physics","Chemistry","Biology"]\' '
        "(default: the payload's selected_subjects, if any)",
    )
    parser.add_argument(
        "--catalog",
        type=str,
        default=None,
        help="Path to a subject catalog JSON file (default: $EXAM_CATALOG_PATH or built-in)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Optional path to write the JSON report",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )
    return parser


def _read_payload(source: str) -> Any:
    if source == "-":
        text = sys.stdin.read()
    else:
        try:
            text = Path(source).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ExamPayloadError(f"Payload is not UTF-8 text: {exc}") from exc
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ExamPayloadError(f"Payload is not valid JSON: {exc}") from exc


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=get_log_level(), format="%(levelname)s %(name)s: %(message)s")

    try:
        validate_environment()
        catalog = load_catalog(args.catalog) if args.catalog else catalog_from_env()
    except (EnvironmentError, CatalogConfigError, OSError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    try:
        decoded = _read_payload(args.input)
        records = parse_exam_payload(decoded)
    except FileNotFoundError as exc:
        print(f"Input not found: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"Cannot read input: {exc}", file=sys.stderr)
        return 2
    except ExamPayloadError as exc:
        print(f"Invalid exam payload: {exc}", file=sys.stderr)
        return 2

    selection: Any = args.selection
    if selection is None and isinstance(decoded, dict):
        selection = decoded.get("selected_subjects", decoded.get("selectedSubjects"))

    report = analyze(records, selection, catalog)
    if report is None:
        logger.info("No exams in %s; nothing to analyze", args.input)

    payload = json.dumps(
        report.to_dict() if report is not None else None,
        indent=args.indent,
        ensure_ascii=get_env_bool("EXAM_ANALYSIS_ASCII_JSON"),
    )
    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
    print(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
