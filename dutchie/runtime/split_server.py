"""FastAPI server exposing receipt extraction and settlement over HTTP.

The server is stateless: every request carries the ledger snapshot it works
on and gets the updated snapshot back.
"""

import json
from typing import Any, cast

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dutchie.domain.ledger import Ledger
from dutchie.domain.receipt import EXTRACTION_STRATEGIES, ExtractionStrategy, OcrResult
from dutchie.receipt.formatter import extraction_to_dict
from dutchie.receipt.ocr_helpers import resize_image_bytes, transform_vision_result
from dutchie.receipt.ocr_result_parser import parse_ocr_result
from dutchie.runtime import get_logger, load_line_rules
from dutchie.runtime.ocr_client import OCR_TIMEOUT_SECONDS, default_ocr_url, vision_endpoint
from dutchie.settlement import build_settlement_report, report_to_dict

logger = get_logger(__name__)

app = FastAPI(title="Dutchie")


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


def _ledger_from_payload(raw: Any) -> Ledger:
    if raw is None:
        return Ledger()
    if isinstance(raw, str):
        raw = json.loads(raw)
    if not isinstance(raw, dict):
        raise ValueError("ledger must be a JSON object")
    return Ledger.from_dict(raw)


def _strategy(raw: Any) -> ExtractionStrategy:
    strategy = str(raw or "itemized")
    if strategy not in EXTRACTION_STRATEGIES:
        raise ValueError(f"Unknown strategy {strategy!r}; expected one of {', '.join(EXTRACTION_STRATEGIES)}")
    return cast(ExtractionStrategy, strategy)


async def _json_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON body: {exc}") from exc
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def _extraction_response(
    ocr_result: OcrResult, strategy: ExtractionStrategy, ledger: Ledger, use_words: bool
) -> JSONResponse:
    extraction = parse_ocr_result(ocr_result, strategy, use_words=use_words, rules=load_line_rules())
    if extraction.is_empty:
        return JSONResponse(
            {"status": "no_prices", "message": "No prices parsed", "extraction": extraction_to_dict(extraction)},
            status_code=422,
        )
    items = ledger.add_receipt_items(extraction.items)
    logger.info("Extracted %d items (%s) into group %s", len(items), strategy, items[0].receipt_group_id)
    return JSONResponse(
        {
            "status": "extracted",
            "extraction": extraction_to_dict(extraction, items),
            "ledger": ledger.to_dict(),
        }
    )


@app.post("/extract")
async def extract(request: Request) -> JSONResponse:
    """Parse OCR text: ``{"text": ..., "strategy": ..., "ledger": {...}}``."""
    try:
        body = await _json_body(request)
        strategy = _strategy(body.get("strategy"))
        ledger = _ledger_from_payload(body.get("ledger"))
    except (ValueError, KeyError) as exc:
        return _error(str(exc), 400)

    text = body.get("text")
    if not isinstance(text, str):
        return _error("'text' must be a string", 400)
    return _extraction_response(OcrResult(text=text), strategy, ledger, use_words=False)


@app.post("/scan")
async def scan(request: Request) -> JSONResponse:
    """Receive a receipt image, run it through the OCR service, and parse it."""
    form = await request.form()

    file = None
    for key, value in form.items():
        logger.debug("Form field: key=%r, type=%s", key, type(value))
        if hasattr(value, "read"):
            file = value
            break

    if not file:
        return _error("No file found in request", 400)

    try:
        strategy = _strategy(form.get("strategy"))
        ledger = _ledger_from_payload(form.get("ledger"))
    except (ValueError, KeyError) as exc:
        return _error(str(exc), 400)
    use_words = str(form.get("use_words") or "").lower() in ("1", "true", "yes")

    contents = await file.read()
    filename = getattr(file, "filename", None) or "receipt.jpg"
    try:
        resized_contents = resize_image_bytes(contents)
    except OSError as exc:
        logger.warning("Unreadable image upload %s: %s", filename, exc)
        return _error("Uploaded file is not a readable image", 400)

    endpoint = vision_endpoint(default_ocr_url())
    try:
        async with httpx.AsyncClient(timeout=OCR_TIMEOUT_SECONDS) as client:
            response = await client.post(endpoint, files={"file": (filename, resized_contents, "image/jpeg")})
    except httpx.RequestError as exc:
        logger.error("OCR service unavailable: %s", exc)
        return _error("OCR service unavailable", 502)

    if response.status_code != 200:
        logger.error("OCR service error: %s", response.status_code)
        return _error(f"OCR service error: {response.status_code}", 502)

    ocr_result = transform_vision_result(response.json())
    return _extraction_response(ocr_result, strategy, ledger, use_words=use_words)


@app.post("/settle")
async def settle(request: Request) -> JSONResponse:
    """Settle a ledger snapshot and return transfers plus paid/owed mappings."""
    try:
        body = await _json_body(request)
        ledger = _ledger_from_payload(body.get("ledger", body))
    except (ValueError, KeyError) as exc:
        return _error(str(exc), 400)

    report = build_settlement_report(ledger)
    return JSONResponse({"status": "settled", **report_to_dict(report)})


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
