"""Receipt workflows."""

from dutchie.application.receipts.scan import (
    ReceiptScanRequest,
    ReceiptScanResult,
    run_ocr_extraction,
    run_receipt_scan,
    run_text_extraction,
)

__all__ = [
    "ReceiptScanRequest",
    "ReceiptScanResult",
    "run_ocr_extraction",
    "run_receipt_scan",
    "run_text_extraction",
]
