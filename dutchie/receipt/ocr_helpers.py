"""Pure OCR transformation helpers for receipt parsing."""

import io
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from dutchie.domain.receipt import OcrResult, OcrWord

from .line_rules import DEFAULT_Y_TOLERANCE

MAX_IMAGE_DIMENSION = 3000  # Resize if either dimension exceeds this
OCR_IMAGE_PADDING = 50  # White padding around image to prevent edge truncation


def resize_image_bytes(
    image_bytes: bytes, max_dimension: int = MAX_IMAGE_DIMENSION, padding: int = OCR_IMAGE_PADDING
) -> bytes:
    """
    Resize image bytes if it exceeds max_dimension on either side.

    Also adds white padding around the image to prevent OCR edge truncation.

    Args:
        image_bytes: Image data as bytes
        max_dimension: Maximum allowed dimension (width or height)
        padding: White padding to add around image (pixels)

    Returns:
        Image bytes (JPEG format), resized if necessary, with padding added
    """
    from PIL import Image, ImageOps

    img = Image.open(io.BytesIO(image_bytes))

    # Apply EXIF orientation so phone photos reach OCR upright
    img = ImageOps.exif_transpose(img)

    width, height = img.size

    if width <= max_dimension and height <= max_dimension:
        img_final = img
    else:
        if width > height:
            new_width = max_dimension
            new_height = int(height * (max_dimension / width))
        else:
            new_height = max_dimension
            new_width = int(width * (max_dimension / height))

        img_final = img.resize((new_width, new_height), Image.Resampling.LANCZOS)

    if padding > 0:
        img_final = ImageOps.expand(img_final, border=padding, fill="white")

    buffer = io.BytesIO()
    img_final.convert("RGB").save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


def _line_center_y(line: list[OcrWord]) -> float:
    """Return average center Y for a grouped line."""
    return sum(word.y for word in line) / len(line)


def group_words_into_lines(words: Iterable[OcrWord], y_tolerance: float = DEFAULT_Y_TOLERANCE) -> list[list[OcrWord]]:
    """
    Group words into visual lines by vertical proximity.

    Words are visited top to bottom; a word joins the current line while its
    center is within ``y_tolerance`` pixels of the line's mean center, and
    starts a new line otherwise. Each line is ordered left to right.
    """
    ordered = sorted((w for w in words if w.text.strip()), key=lambda w: (w.y, w.x))
    lines: list[list[OcrWord]] = []
    for word in ordered:
        if lines and abs(word.y - _line_center_y(lines[-1])) <= y_tolerance:
            lines[-1].append(word)
        else:
            lines.append([word])

    for line in lines:
        line.sort(key=lambda w: w.x)
    return lines


def rebuild_lines(words: Iterable[OcrWord], y_tolerance: float = DEFAULT_Y_TOLERANCE) -> list[str]:
    """Reconstruct text lines from positioned words."""
    return [" ".join(w.text.strip() for w in line) for line in group_words_into_lines(words, y_tolerance)]


def rebuild_text(words: Iterable[OcrWord], y_tolerance: float = DEFAULT_Y_TOLERANCE) -> str:
    """Reconstruct newline-separated OCR text for when raw line breaks are unreliable."""
    return "\n".join(rebuild_lines(words, y_tolerance))


def _parse_words(raw_words: Sequence[Mapping[str, Any]]) -> tuple[OcrWord, ...]:
    words: list[OcrWord] = []
    for raw in raw_words:
        text = str(raw.get("text") or "")
        if not text.strip():
            continue
        try:
            x = float(raw.get("x", 0))
            y = float(raw.get("y", 0))
        except (TypeError, ValueError):
            continue
        words.append(OcrWord(text=text, x=x, y=y))
    return tuple(words)


def transform_vision_result(raw_result: Mapping[str, Any]) -> OcrResult:
    """
    Transform the OCR service JSON (``{"text": ..., "words": [{"text", "x", "y"}]}``)
    into an OcrResult. Words without usable coordinates are dropped.
    """
    text = str(raw_result.get("text") or "")
    raw_words = raw_result.get("words") or []
    if not isinstance(raw_words, list):
        raw_words = []
    return OcrResult(text=text, words=_parse_words([w for w in raw_words if isinstance(w, Mapping)]))
