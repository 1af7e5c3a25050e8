"""Tests for OCR transformation helpers."""

import io

import pytest

from dutchie.domain.receipt import OcrWord
from dutchie.receipt.ocr_helpers import (
    group_words_into_lines,
    rebuild_lines,
    rebuild_text,
    resize_image_bytes,
    transform_vision_result,
)


def _word(text: str, x: float, y: float) -> OcrWord:
    return OcrWord(text=text, x=x, y=y)


def test_rebuild_lines_groups_by_vertical_proximity_and_orders_left_to_right() -> None:
    words = [
        _word("3.49", 400, 102),
        _word("MILK", 40, 100),
        _word("2%", 120, 97),
        _word("BREAD", 40, 140),
        _word("2.99", 400, 143),
    ]

    assert rebuild_lines(words) == ["MILK 2% 3.49", "BREAD 2.99"]


def test_rebuild_lines_respects_tolerance() -> None:
    words = [_word("A", 0, 100), _word("B", 10, 112)]

    assert rebuild_lines(words, y_tolerance=10) == ["A", "B"]
    assert rebuild_lines(words, y_tolerance=14) == ["A B"]


def test_group_words_skips_blank_words() -> None:
    lines = group_words_into_lines([_word("  ", 0, 0), _word("TOTAL", 0, 50)])

    assert [[w.text for w in line] for line in lines] == [["TOTAL"]]


def test_rebuild_text_joins_lines() -> None:
    words = [_word("SUBTOTAL", 0, 10), _word("7.00", 0, 40)]

    assert rebuild_text(words) == "SUBTOTAL\n7.00"
    assert rebuild_text([]) == ""


def test_transform_vision_result_drops_words_without_coordinates() -> None:
    raw = {
        "text": "MILK 3.49\nTOTAL 3.49",
        "words": [
            {"text": "MILK", "x": 10, "y": 20},
            {"text": "3.49", "x": "200.5", "y": 21},
            {"text": "BAD", "x": "left", "y": 21},
            {"text": "", "x": 1, "y": 1},
            "not-a-word",
        ],
    }

    result = transform_vision_result(raw)

    assert result.text == "MILK 3.49\nTOTAL 3.49"
    assert result.words == (_word("MILK", 10.0, 20.0), _word("3.49", 200.5, 21.0))


def test_transform_vision_result_tolerates_missing_fields() -> None:
    result = transform_vision_result({})

    assert result.text == ""
    assert result.words == ()


def test_resize_image_bytes_downscales_and_pads() -> None:
    Image = pytest.importorskip("PIL.Image")

    buffer = io.BytesIO()
    Image.new("RGB", (4000, 1000), "black").save(buffer, format="PNG")

    resized = resize_image_bytes(buffer.getvalue(), max_dimension=2000, padding=10)

    with Image.open(io.BytesIO(resized)) as img:
        assert img.format == "JPEG"
        assert img.size == (2020, 520)
