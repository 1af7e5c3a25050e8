from decimal import Decimal

import pytest

from dutchie.receipt.ocr_parser.money import (
    find_money_tokens,
    is_money_line,
    last_money_value,
    money_from_line,
    normalize_money_token,
    parse_money,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("12.89", Decimal("12.89")),
        ("2.00-", Decimal("-2.00")),
        ("(3.50)", Decimal("-3.50")),
        ("$4.99", Decimal("4.99")),
        ("($1.25)", Decimal("-1.25")),
        ("3,49", Decimal("3.49")),
        ("2.00−", Decimal("-2.00")),
        ("1O.5O", Decimal("10.50")),
        ("I.99", Decimal("1.99")),
        ("4.99*", Decimal("4.99")),
        (" 7.00 ", Decimal("7.00")),
    ],
)
def test_parse_money_recovers_signed_amount(raw: str, expected: Decimal) -> None:
    assert parse_money(raw) == expected


@pytest.mark.parametrize("raw", ["12.8", "abc", "12.899", "", "12", "1.2.3", "-"])
def test_parse_money_rejects_malformed_tokens(raw: str) -> None:
    assert parse_money(raw) is None


def test_normalize_money_token_applies_rules_in_order() -> None:
    assert normalize_money_token(" $ 1O,5O. ") == "10.50"
    assert normalize_money_token("(  $3.50 )") == "(3.50)"


def test_find_money_tokens_returns_amounts_left_to_right() -> None:
    tokens = find_money_tokens("2 @ 1.99 3.98")

    assert tokens == ["1.99", "3.98"]


def test_find_money_tokens_keeps_discount_markers() -> None:
    assert find_money_tokens("COUPON 2.00-") == ["2.00-"]
    assert find_money_tokens("MEMBER SAVINGS (1.50)") == ["(1.50)"]
    assert find_money_tokens("TOTAL $7.56") == ["$7.56"]


def test_find_money_tokens_ignores_longer_number_runs() -> None:
    assert find_money_tokens("UPC 0123456789") == []
    assert find_money_tokens("WEIGHT 1.255 kg") == []


def test_pure_money_line_detection() -> None:
    assert is_money_line("4.29")
    assert is_money_line(" 2.00- ")
    assert not is_money_line("ORG SPAGHETTI 4.29")
    assert not is_money_line("$4.29")

    assert money_from_line("2.00-") == Decimal("-2.00")
    assert money_from_line("BREAD") is None


def test_last_money_value_skips_unparseable_tail() -> None:
    assert last_money_value("MILK 3.49 H") == Decimal("3.49")
    assert last_money_value("NO AMOUNT HERE") is None
