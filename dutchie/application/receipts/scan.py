"""Receipt scan and text extraction workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from dutchie.domain.ledger import Ledger, ReceiptItem
from dutchie.domain.receipt import ExtractionStrategy, OcrResult, ReceiptExtraction
from dutchie.receipt.ocr_result_parser import parse_ocr_result
from dutchie.runtime import get_logger, load_line_rules
from dutchie.runtime.ocr_client import OCRServiceUnavailable, call_ocr_service

logger = get_logger(__name__)

ScanStatus = Literal[
    "file_not_found",
    "unreadable_image",
    "ocr_unavailable",
    "no_prices",
    "extracted",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image_path: Path
    strategy: ExtractionStrategy = "itemized"
    ocr_url: str | None = None
    use_words: bool = False
    ledger: Ledger = field(default_factory=Ledger)


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan or text extraction workflow."""

    status: ScanStatus
    extraction: ReceiptExtraction | None = None
    group_id: str | None = None
    items: tuple[ReceiptItem, ...] = ()
    error: str | None = None


def _apply_extraction(extraction: ReceiptExtraction, ledger: Ledger) -> ReceiptScanResult:
    if extraction.is_empty:
        logger.info("No prices parsed (%s strategy)", extraction.strategy)
        return ReceiptScanResult(status="no_prices", extraction=extraction, error="No prices parsed")

    items = ledger.add_receipt_items(extraction.items)
    group_id = items[0].receipt_group_id
    logger.info("Added %d receipt items as group %s", len(items), group_id)
    if extraction.total is not None and extraction.total_gap:
        logger.debug("Item sum differs from printed total by %s", extraction.total_gap)
    return ReceiptScanResult(status="extracted", extraction=extraction, group_id=group_id, items=tuple(items))


def run_ocr_extraction(
    ocr_result: OcrResult,
    strategy: ExtractionStrategy,
    ledger: Ledger,
    *,
    use_words: bool = False,
    rules_path: str | None = None,
) -> ReceiptScanResult:
    """Parse an OCR result and append the items to ``ledger`` as a new receipt group."""
    rules = load_line_rules(rules_path)
    extraction = parse_ocr_result(ocr_result, strategy, use_words=use_words, rules=rules)
    return _apply_extraction(extraction, ledger)


def run_text_extraction(
    text: str,
    strategy: ExtractionStrategy,
    ledger: Ledger | None = None,
    *,
    rules_path: str | None = None,
) -> ReceiptScanResult:
    """Parse plain OCR text; the same as a scan without the OCR call."""
    return run_ocr_extraction(
        OcrResult(text=text), strategy, ledger if ledger is not None else Ledger(), rules_path=rules_path
    )


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: OCR -> parse with the requested strategy -> append to ledger."""
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    try:
        ocr_result = call_ocr_service(request.image_path, request.ocr_url)
    except OCRServiceUnavailable as exc:
        return ReceiptScanResult(
            status="ocr_unavailable",
            error=str(exc),
        )
    except OSError as exc:
        logger.warning("Unreadable receipt image %s: %s", request.image_path, exc)
        return ReceiptScanResult(
            status="unreadable_image",
            error=f"Not a readable image: {request.image_path}",
        )

    return run_ocr_extraction(ocr_result, request.strategy, request.ledger, use_words=request.use_words)
