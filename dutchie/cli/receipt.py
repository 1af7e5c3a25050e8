"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from dutchie.application.receipts.scan import (
    ReceiptScanRequest,
    ReceiptScanResult,
    run_ocr_extraction,
    run_receipt_scan,
)
from dutchie.domain.ledger import Ledger
from dutchie.domain.receipt import OcrResult
from dutchie.receipt.formatter import extraction_to_dict, format_extraction
from dutchie.receipt.ocr_helpers import transform_vision_result
from dutchie.runtime import get_logger

logger = get_logger(__name__)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _print_result(result: ReceiptScanResult, ledger: Ledger, as_json: bool) -> int:
    if result.status == "no_prices":
        print("No prices parsed. Try the other --strategy or enter items manually.")
        return 1

    extraction = result.extraction
    if extraction is None:
        print("Extraction failed: missing output.")
        return 1

    if as_json:
        payload = {"status": result.status, **extraction_to_dict(extraction, result.items), "ledger": ledger.to_dict()}
        print(json.dumps(payload, indent=2))
    else:
        print(format_extraction(extraction, result.items))
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    """Extract items from OCR text (or an OCR JSON result with --words)."""
    try:
        raw = _read_input(args.file)
    except OSError as exc:
        print(f"Error: cannot read {args.file}: {exc}")
        return 1

    if args.words:
        try:
            ocr_result = transform_vision_result(json.loads(raw))
        except (json.JSONDecodeError, AttributeError) as exc:
            print(f"Error: {args.file} is not an OCR JSON result: {exc}")
            return 1
    else:
        ocr_result = OcrResult(text=raw)

    ledger = Ledger()
    try:
        result = run_ocr_extraction(ocr_result, args.strategy, ledger, use_words=args.words, rules_path=args.rules)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}")
        return 1
    return _print_result(result, ledger, args.json)


def cmd_scan(args: argparse.Namespace) -> int:
    """Scan a receipt image through the OCR service and show the parsed items."""
    ledger = Ledger()
    result = run_receipt_scan(
        ReceiptScanRequest(
            image_path=Path(args.image),
            strategy=args.strategy,
            ocr_url=args.ocr_url,
            use_words=args.words,
            ledger=ledger,
        )
    )

    if result.status in ("file_not_found", "unreadable_image"):
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        return 1

    if result.status == "ocr_unavailable":
        logger.error("%s", result.error)
        print(f"OCR service unavailable: {result.error}")
        print("Make sure the OCR service is running before scanning receipts.")
        return 1

    return _print_result(result, ledger, args.json)


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI server."""
    import uvicorn

    from dutchie.runtime import split_server as server

    print(f"Starting dutchie server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/extract | /scan | /settle | /health")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
    return 0
