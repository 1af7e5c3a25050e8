"""Subtotal/tax/total extraction helpers.

All three amounts are optional and informational: a missing amount is None,
and nothing here reconciles them against the item prices.
"""

import re
from decimal import Decimal

from dutchie.domain.amounts import round_cents

from .common import SUBTOTAL_PATTERN, TAX_PATTERN, TOTAL_PATTERN, collapse_whitespace
from .money import first_money_value, is_money_line, last_money_value, money_from_line, parse_money

# How far below a "total" line the itemized layout may print its amount.
TOTAL_LOOKAHEAD_LINES = 12


def _is_total_line(line: str) -> bool:
    return TOTAL_PATTERN.search(line) is not None and SUBTOTAL_PATTERN.match(line) is None


def _find_keyword_index(lines: list[str], matcher: re.Pattern[str] | None = None, *, total: bool = False) -> int | None:
    for idx, raw in enumerate(lines):
        line = collapse_whitespace(raw)
        if total:
            if _is_total_line(line):
                return idx
        elif matcher is not None and matcher.search(line):
            return idx
    return None


def _find_amount_near(lines: list[str], idx: int | None) -> Decimal | None:
    """Last amount on the keyword line, else the first amount on the next line."""
    if idx is None:
        return None

    same_line = last_money_value(lines[idx])
    if same_line is not None:
        return same_line

    if idx + 1 >= len(lines):
        return None
    next_line = lines[idx + 1]
    next_value = first_money_value(next_line)
    if next_value is not None:
        return next_value
    # The whole next line may be an amount with OCR confusions ("7.0O").
    whole = parse_money(next_line)
    return round_cents(whole) if whole is not None else None


def extract_price_only_fields(lines: list[str]) -> tuple[Decimal | None, Decimal | None, Decimal | None]:
    """Return (subtotal, tax, total) using first keyword match, top to bottom."""
    subtotal = _find_amount_near(lines, _find_keyword_index(lines, SUBTOTAL_PATTERN))
    tax = _find_amount_near(lines, _find_keyword_index(lines, TAX_PATTERN))
    total = _find_amount_near(lines, _find_keyword_index(lines, total=True))
    return subtotal, tax, total


def _find_amount_after_keyword(lines: list[str], idx: int | None) -> Decimal | None:
    """Pure money line right after the keyword, else an amount on the keyword line itself."""
    if idx is None:
        return None
    if idx + 1 < len(lines) and is_money_line(lines[idx + 1]):
        value = money_from_line(lines[idx + 1])
        if value is not None:
            return round_cents(value)
    return last_money_value(lines[idx])


def _find_itemized_total(lines: list[str]) -> Decimal | None:
    """
    First pure money line within TOTAL_LOOKAHEAD_LINES after the total line.

    Falls back to the last pure money line of the whole text when the window
    holds none. Without any total line there is no total.
    """
    idx = _find_keyword_index(lines, total=True)
    if idx is None:
        return None

    for line in lines[idx + 1 : idx + 1 + TOTAL_LOOKAHEAD_LINES]:
        if is_money_line(line):
            value = money_from_line(line)
            if value is not None:
                return round_cents(value)

    for line in reversed(lines):
        if is_money_line(line):
            value = money_from_line(line)
            if value is not None:
                return round_cents(value)
    return None


def extract_itemized_fields(lines: list[str]) -> tuple[Decimal | None, Decimal | None, Decimal | None]:
    """Return (subtotal, tax, total) for the description+price layout."""
    subtotal = _find_amount_after_keyword(lines, _find_keyword_index(lines, SUBTOTAL_PATTERN))
    tax = _find_amount_after_keyword(lines, _find_keyword_index(lines, TAX_PATTERN))
    total = _find_itemized_total(lines)
    return subtotal, tax, total
