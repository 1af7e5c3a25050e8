"""Description+price receipt extraction.

Handles layouts where the description sits on one or more lines and the
price follows on a line of its own:

    BREAD
    3.99
    E
    761486 ORG SPAGHETTI
    4.29
"""

from dutchie.domain.amounts import round_cents
from dutchie.domain.receipt import ExtractedItem, ItemizedResult

from ..line_rules import DEFAULT_LINE_RULES, LineRules
from .common import (
    STOP_WORD_PATTERN,
    SUBTOTAL_PATTERN,
    clean_item_name,
    collapse_whitespace,
    is_lone_letter,
    is_valid_item_name,
    split_lines,
)
from .fields_parser import extract_itemized_fields
from .money import is_money_line, money_from_line


def _item_region(lines: list[str], rules: LineRules) -> list[str]:
    """Lines after the start-of-items marker (if any) and before SUBTOTAL (if any)."""
    start = 0
    for idx, line in enumerate(lines):
        if rules.item_start_regex.match(collapse_whitespace(line)):
            start = idx + 1
            break

    end = len(lines)
    for idx in range(start, len(lines)):
        if SUBTOTAL_PATTERN.match(collapse_whitespace(lines[idx])):
            end = idx
            break
    return lines[start:end]


def _extract_items(lines: list[str], rules: LineRules) -> list[ExtractedItem]:
    items: list[ExtractedItem] = []
    buffer: list[str] = []

    for line in _item_region(lines, rules):
        if STOP_WORD_PATTERN.match(line):
            buffer.clear()
            continue

        if is_money_line(line):
            price = money_from_line(line)
            name = clean_item_name(" ".join(buffer))
            if price is not None and is_valid_item_name(name, rules):
                items.append(ExtractedItem(name=name, price=round_cents(price)))
            buffer.clear()
            continue

        if is_lone_letter(line):
            continue
        buffer.append(line)

    # Keep duplicates: two cartons of the same milk are two items.
    return items


def extract_items_with_names(text: str, rules: LineRules = DEFAULT_LINE_RULES) -> ItemizedResult:
    """Extract named items in line order plus optional subtotal/tax/total."""
    lines = split_lines(text)
    subtotal, tax, total = extract_itemized_fields(lines)
    return ItemizedResult(
        items=_extract_items(lines, rules),
        subtotal=subtotal,
        tax=tax,
        total=total,
    )
