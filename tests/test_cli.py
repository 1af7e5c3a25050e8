import json
import logging
from pathlib import Path

import pytest

from dutchie.application.receipts import scan as scan_workflow
from dutchie.cli.main import main
from dutchie.domain.receipt import OcrResult
from dutchie.runtime.logging import LOGGER_NAMESPACE, set_log_level


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "extract" in capsys.readouterr().out


def test_extract_itemized_text(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "receipt.txt"
    source.write_text("BREAD\n3.99\nE\n761486 ORG SPAGHETTI\n4.29\nSUBTOTAL\n8.28\n", encoding="utf-8")

    assert main(["extract", str(source)]) == 0

    out = capsys.readouterr().out
    assert "Strategy: itemized" in out
    assert "ORG SPAGHETTI" in out
    assert "8.28" in out


def test_extract_prices_only_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "receipt.txt"
    source.write_text("MILK 3.49\nSUBTOTAL\n7.00\nTAX\n0.56\nTOTAL\n7.56\n", encoding="utf-8")

    assert main(["extract", str(source), "--strategy", "prices_only", "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["items"] == [{"name": "r1-1", "price": "3.49"}]
    assert payload["subtotal"] == "7.00"
    assert payload["tax"] == "0.56"
    assert payload["total"] == "7.56"


def test_extract_from_word_boxes(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "ocr.json"
    source.write_text(
        json.dumps(
            {
                "text": "MILK EGGS\n3.49 4.99",
                "words": [
                    {"text": "MILK", "x": 10, "y": 100},
                    {"text": "3.49", "x": 300, "y": 101},
                    {"text": "EGGS", "x": 10, "y": 140},
                    {"text": "4.99", "x": 300, "y": 141},
                ],
            }
        ),
        encoding="utf-8",
    )

    assert main(["extract", str(source), "--strategy", "prices_only", "--words", "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert [item["price"] for item in payload["items"]] == ["3.49", "4.99"]


def test_extract_with_no_prices_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "receipt.txt"
    source.write_text("THANK YOU\n", encoding="utf-8")

    assert main(["extract", str(source), "--strategy", "prices_only"]) == 1
    assert "No prices parsed" in capsys.readouterr().out


def test_extract_missing_rules_file_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "receipt.txt"
    source.write_text("MILK 3.49\n", encoding="utf-8")

    assert main(["extract", str(source), "--rules", str(tmp_path / "nope.toml")]) == 1
    assert "not found" in capsys.readouterr().out


def test_scan_missing_image(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["scan", str(tmp_path / "missing.jpg")]) == 1
    assert "not found" in capsys.readouterr().out


def test_scan_uses_ocr_result(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    image = tmp_path / "receipt.jpg"
    image.write_bytes(b"img")
    monkeypatch.setattr(scan_workflow, "call_ocr_service", lambda path, url: OcrResult(text="BREAD\n3.99\n"))

    assert main(["scan", str(image), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "extracted"
    assert payload["items"] == [{"name": "BREAD", "price": "3.99"}]


def _write_ledger(path: Path) -> None:
    ledger = {
        "people": [{"id": "a", "name": "Ann"}, {"id": "b", "name": "Bo"}, {"id": "c", "name": ""}],
        "items": [
            {"id": "m1", "name": "Cabin", "price": "90.00", "source": "manual", "payer_id": "a"},
            {
                "id": "i1",
                "name": "WINE",
                "price": "12.00",
                "source": "receipt",
                "receipt_group_id": "r1",
                "assigned_person_ids": [],
            },
        ],
        "receipt_payers": {"r1": "b"},
    }
    path.write_text(json.dumps(ledger), encoding="utf-8")


def test_settle_prints_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "ledger.json"
    _write_ledger(path)

    assert main(["settle", str(path)]) == 0

    out = capsys.readouterr().out
    assert "Bo -> Ann: 18.00" in out
    assert "Unnamed -> Ann: 30.00" in out
    assert "1 receipt item(s) have nobody assigned" in out
    assert "OPTIMIZED TRANSFER MATRIX" in out


def test_settle_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "ledger.json"
    _write_ledger(path)

    assert main(["settle", str(path), "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["owed"] == {"a": "30.00", "b": "30.00", "c": "30.00"}
    assert payload["paid"] == {"a": "90.00", "b": "12.00", "c": "0.00"}
    assert payload["unsettled"] == "12.00"


def test_settle_missing_or_invalid_ledger(tmp_path: Path) -> None:
    assert main(["settle", str(tmp_path / "missing.json")]) == 1

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert main(["settle", str(bad)]) == 1


def test_verbose_switches_to_debug_logging(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "receipt.txt"
    source.write_text("MILK 3.49\n", encoding="utf-8")
    try:
        assert main(["-v", "extract", str(source), "--strategy", "prices_only"]) == 0
        assert logging.getLogger(LOGGER_NAMESPACE).level == logging.DEBUG
    finally:
        set_log_level(logging.INFO)
    capsys.readouterr()


def test_scan_rejects_non_image(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    image = tmp_path / "notes.jpg"
    image.write_text("hello", encoding="utf-8")

    assert main(["scan", str(image), "--ocr-url", "http://vision.invalid"]) == 1
    assert "Not a readable image" in capsys.readouterr().out


def test_settle_rejects_wrongly_shaped_snapshot(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps({"people": ["Ann"], "items": []}), encoding="utf-8")

    assert main(["settle", str(path)]) == 1
    assert "invalid ledger file" in capsys.readouterr().out
