"""CLI entry point for sheetdiff.

Usage:
    python -m sheetdiff parse <file.xlsx>
    python -m sheetdiff compare <old> <new> [--json] [--sheet NAME]
                                [--type {added,removed,changed}] [--show-formulas]
    python -m sheetdiff serve [--host HOST] [--port PORT]

Inputs to ``compare`` may be .xlsx files or workbook .json snapshots as
printed by ``parse``. ``compare`` exits 0 when the workbooks match, 1 when
differences were found and 2 on errors.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from sheetdiff.exceptions import SheetDiffError
from sheetdiff.models import CHANGE_TYPES, Workbook
from sheetdiff.parser import parse_workbook
from sheetdiff.report import render_text
from sheetdiff.validation import compare_payloads

EXIT_SAME = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def load_workbook_file(path: Path) -> Workbook | dict:
    """Load a workbook from an .xlsx file or a JSON snapshot.

    JSON snapshots are returned as raw dicts so they go through boundary
    validation like any other payload.
    """
    if path.suffix.lower() == ".json":
        return json.loads(path.read_text(encoding="utf-8"))
    return parse_workbook(path)


def cmd_parse(args: argparse.Namespace) -> int:
    """Print a workbook as JSON."""
    path = Path(args.file)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return EXIT_ERROR

    try:
        workbook = parse_workbook(path)
    except SheetDiffError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    print(json.dumps(workbook.to_dict(), indent=2))
    return EXIT_SAME


def cmd_compare(args: argparse.Namespace) -> int:
    """Compare two workbooks and print the report."""
    paths = [Path(args.old), Path(args.new)]
    for path in paths:
        if not path.exists():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return EXIT_ERROR

    try:
        old, new = (load_workbook_file(path) for path in paths)
        result = compare_payloads(old, new)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON snapshot: {e}", file=sys.stderr)
        return EXIT_ERROR
    except SheetDiffError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        # Snapshot has a sheet list but malformed sheets or cells
        print(f"Error: Malformed workbook snapshot: {e!r}", file=sys.stderr)
        return EXIT_ERROR

    if args.sheet is not None and result.sheet(args.sheet) is None:
        print(f"Error: Sheet not found in either file: {args.sheet}", file=sys.stderr)
        return EXIT_ERROR

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(
            render_text(
                result,
                sheet_name=args.sheet,
                types=args.types,
                show_formulas=args.show_formulas,
            )
        )

    return EXIT_DIFFERENT if result.has_changes() else EXIT_SAME


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP service."""
    from sheetdiff.server.main import run

    run(host=args.host, port=args.port)
    return EXIT_SAME


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetdiff",
        description="Compare spreadsheet workbooks cell by cell",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser("parse", help="Print a workbook as JSON")
    parse_parser.add_argument("file", help="Path to an .xlsx file")
    parse_parser.set_defaults(func=cmd_parse)

    compare_parser = subparsers.add_parser("compare", help="Compare two workbooks")
    compare_parser.add_argument("old", help="Baseline workbook (.xlsx or .json)")
    compare_parser.add_argument("new", help="Workbook to compare (.xlsx or .json)")
    compare_parser.add_argument(
        "--json", action="store_true", help="Print the full report as JSON"
    )
    compare_parser.add_argument("--sheet", help="Only show this sheet")
    compare_parser.add_argument(
        "--type",
        dest="types",
        action="append",
        choices=CHANGE_TYPES,
        help="Only show this change type (repeatable)",
    )
    compare_parser.add_argument(
        "--show-formulas",
        action="store_true",
        help="Show old/new formulas and how they changed",
    )
    compare_parser.set_defaults(func=cmd_compare)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
