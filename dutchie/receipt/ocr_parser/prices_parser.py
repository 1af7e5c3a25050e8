"""Price-only receipt extraction.

Fallback strategy for layouts that defeat description/price pairing: every
item-region line contributes its rightmost amount, descriptions are dropped,
and items are later named by position ("r1-1", "r1-2", ...).
"""

from decimal import Decimal

from dutchie.domain.amounts import NOISE_PRICE_EPSILON, round_cents
from dutchie.domain.receipt import PriceOnlyResult

from ..line_rules import DEFAULT_LINE_RULES, LineRules
from .common import candidate_item_lines, split_lines
from .fields_parser import extract_price_only_fields
from .money import find_money_tokens, parse_money


def _line_price(line: str) -> Decimal | None:
    """Price of an item line: its last money token, which receipts print rightmost."""
    tokens = find_money_tokens(line)
    if not tokens:
        return None
    return parse_money(tokens[-1])


def _extract_prices(lines: list[str], rules: LineRules) -> list[Decimal]:
    prices: list[Decimal] = []
    for line in candidate_item_lines(lines, rules):
        price = _line_price(line)
        if price is None:
            continue
        # Stray "0.00" fields are noise, not items.
        if abs(price) < NOISE_PRICE_EPSILON:
            continue
        prices.append(round_cents(price))
    return prices


def extract_prices_only(text: str, rules: LineRules = DEFAULT_LINE_RULES) -> PriceOnlyResult:
    """Extract item prices in line order plus optional subtotal/tax/total."""
    lines = split_lines(text)
    subtotal, tax, total = extract_price_only_fields(lines)
    return PriceOnlyResult(
        prices=_extract_prices(lines, rules),
        subtotal=subtotal,
        tax=tax,
        total=total,
    )
