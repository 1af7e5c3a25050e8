"""Client for the external OCR (vision) service."""

import os
import time
from pathlib import Path

import httpx

from dutchie.domain.receipt import OcrResult
from dutchie.receipt.ocr_helpers import resize_image_bytes, transform_vision_result
from dutchie.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OCR_URL = "http://localhost:8001"
OCR_TIMEOUT_SECONDS = 60.0


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def default_ocr_url() -> str:
    """OCR service base URL from $DUTCHIE_OCR_URL."""
    return os.environ.get("DUTCHIE_OCR_URL", "").strip() or DEFAULT_OCR_URL


def vision_endpoint(ocr_url: str) -> str:
    return f"{ocr_url.rstrip('/')}/vision"


def call_ocr_service(image_path: Path, ocr_url: str | None = None) -> OcrResult:
    """
    Send one image to the OCR service and return its text and word boxes.

    The image is downscaled and padded first. The request is issued exactly
    once; there are no retries.
    """
    endpoint = vision_endpoint(ocr_url or default_ocr_url())
    logger.info("Sending receipt to OCR service at %s...", endpoint)

    try:
        image_bytes = image_path.read_bytes()
        resized_bytes = resize_image_bytes(image_bytes)

        start_time = time.time()
        response = httpx.post(
            endpoint,
            files={"file": (image_path.name, resized_bytes, "image/jpeg")},
            timeout=OCR_TIMEOUT_SECONDS,
        )
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)

        if response.status_code != 200:
            # Body is not logged: it may carry receipt text.
            logger.error("OCR service error: %s", response.status_code)
            raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

        return transform_vision_result(response.json())

    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e
