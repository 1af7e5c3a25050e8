#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Sequence

from dutchie.domain.receipt import EXTRACTION_STRATEGIES
from dutchie.runtime.logging import set_log_level


def _add_strategy_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--strategy",
        choices=EXTRACTION_STRATEGIES,
        default="itemized",
        help="itemized pairs descriptions with prices; prices_only keeps prices only (default: itemized)",
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Split shared expenses from receipts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  extract <file|->           Extract items from OCR text
  scan <image>               Scan a receipt image through the OCR service
  settle <ledger.json>       Compute who pays whom for a ledger snapshot
  serve [--host] [--port]    Start the HTTP server

Environment:
  DUTCHIE_OCR_URL    OCR service URL (default: http://localhost:8001)
  DUTCHIE_HOME       Project root holding config/line_rules.toml
  DUTCHIE_LOG_LEVEL  DEBUG, INFO, WARNING or ERROR
""",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # extract command
    extract_parser = subparsers.add_parser("extract", help="Extract items from OCR text")
    extract_parser.add_argument("file", help="OCR text file, or '-' for stdin")
    _add_strategy_argument(extract_parser)
    extract_parser.add_argument(
        "--words",
        action="store_true",
        help="Input is OCR JSON ({text, words}); rebuild lines from word positions",
    )
    extract_parser.add_argument("--rules", default=None, help="Line rules TOML file (default: config/line_rules.toml)")
    extract_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Scan a receipt image")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument("--ocr-url", default=None, help="OCR service URL (default: $DUTCHIE_OCR_URL)")
    _add_strategy_argument(scan_parser)
    scan_parser.add_argument("--words", action="store_true", help="Rebuild lines from word positions")
    scan_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    # settle command
    settle_parser = subparsers.add_parser("settle", help="Settle a ledger snapshot")
    settle_parser.add_argument("ledger", help="Path to ledger JSON snapshot")
    settle_parser.add_argument("--json", action="store_true", help="Print JSON instead of a report")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.verbose:
        set_log_level(logging.DEBUG)

    if args.command == "extract":
        from dutchie.cli.receipt import cmd_extract

        return cmd_extract(args)
    elif args.command == "scan":
        from dutchie.cli.receipt import cmd_scan

        return cmd_scan(args)
    elif args.command == "settle":
        from dutchie.cli.settlement import cmd_settle

        return cmd_settle(args)
    elif args.command == "serve":
        from dutchie.cli.receipt import cmd_serve

        return cmd_serve(args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
