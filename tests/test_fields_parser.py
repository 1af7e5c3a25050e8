from decimal import Decimal

from dutchie.receipt.ocr_parser.fields_parser import extract_itemized_fields, extract_price_only_fields


def test_price_only_fields_use_first_keyword_match() -> None:
    lines = ["TAX 0.50", "TAX 0.75", "SUBTOTAL 10.00", "TOTAL 10.50"]

    assert extract_price_only_fields(lines) == (Decimal("10.00"), Decimal("0.50"), Decimal("10.50"))


def test_price_only_fields_read_next_line_with_ocr_confusions() -> None:
    lines = ["SUBTOTAL", "7.0O", "TOTAL", "$7.56 CAD"]

    subtotal, tax, total = extract_price_only_fields(lines)

    assert subtotal == Decimal("7.00")
    assert tax is None
    assert total == Decimal("7.56")


def test_total_search_skips_subtotal_lines() -> None:
    lines = ["SUB TOTAL 5.00", "GRAND TOTAL 5.65"]

    subtotal, _, total = extract_price_only_fields(lines)

    assert subtotal == Decimal("5.00")
    assert total == Decimal("5.65")


def test_itemized_fields_prefer_pure_money_next_line() -> None:
    lines = ["SUBTOTAL 9.99", "10.00", "TAX", "1.30", "TOTAL", "11.30"]

    assert extract_itemized_fields(lines) == (Decimal("10.00"), Decimal("1.30"), Decimal("11.30"))


def test_itemized_fields_fall_back_to_same_line_amount() -> None:
    lines = ["SUBTOTAL $9.99", "TAX 1.30 H", "TOTAL"]

    subtotal, tax, total = extract_itemized_fields(lines)

    assert subtotal == Decimal("9.99")
    assert tax == Decimal("1.30")
    assert total is None


def test_missing_fields_are_none() -> None:
    assert extract_price_only_fields([]) == (None, None, None)
    assert extract_itemized_fields(["MILK", "3.49"]) == (None, None, None)
