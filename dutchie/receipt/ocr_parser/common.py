"""Shared line handling for OCR receipt parsing."""

import re
from collections.abc import Iterator

from dutchie.domain.receipt import LineKind

from ..line_rules import DEFAULT_LINE_RULES, LineRules

SUBTOTAL_PATTERN = re.compile(r"^sub\s*total\b", re.IGNORECASE)
TAX_PATTERN = re.compile(r"^tax\b", re.IGNORECASE)
TOTAL_PATTERN = re.compile(r"^(\*+)?\s*total\b|\btotal\b", re.IGNORECASE)

# Stop-words inside the itemized region; any of them discards the description buffer.
STOP_WORD_PATTERN = re.compile(r"^(?:sub\s*total|tax|total)\b", re.IGNORECASE)

# Department-code markers ("E", "F") that OCR emits on their own line.
LONE_LETTER_PATTERN = re.compile(r"^[A-Za-z]$")

LEADING_LETTER_CODE = re.compile(r"^[A-Za-z](?:\s+|$)")
LEADING_DIGIT_CODE = re.compile(r"^\d{4,}\s+(?!/)")
LINKED_DISCOUNT_CODE = re.compile(r"^\d{6,}\s*/\s*(\d{3,})$")


def split_lines(text: str) -> list[str]:
    """Split OCR text into trimmed, non-empty lines, preserving order."""
    if not text:
        return []
    lines = text.replace("\r", "").split("\n")
    return [line.strip() for line in lines if line.strip()]


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def is_summary_line(line: str, rules: LineRules = DEFAULT_LINE_RULES) -> bool:
    """Return True for subtotal/tax/total/tender/change headers."""
    return rules.summary_regex.match(collapse_whitespace(line)) is not None


def is_noise_line(line: str, rules: LineRules = DEFAULT_LINE_RULES) -> bool:
    """Return True for payment-processing lines (card networks, approvals, ids)."""
    return rules.noise_regex.search(collapse_whitespace(line)) is not None


def classify_line(line: str, rules: LineRules = DEFAULT_LINE_RULES) -> LineKind:
    """Classify one line as summary, noise or a candidate item line."""
    if is_summary_line(line, rules):
        return "summary"
    if is_noise_line(line, rules):
        return "noise"
    return "item"


def candidate_item_lines(lines: list[str], rules: LineRules = DEFAULT_LINE_RULES) -> Iterator[str]:
    """
    Yield item-region lines, whitespace-collapsed.

    The item region ends at the first summary or noise line; nothing after it
    is yielded, even lines that would otherwise classify as items.
    """
    for raw in lines:
        line = collapse_whitespace(raw)
        if classify_line(line, rules) != "item":
            return
        yield line


def is_lone_letter(line: str) -> bool:
    return LONE_LETTER_PATTERN.match(line.strip()) is not None


def clean_item_name(desc: str) -> str:
    """
    Clean an item description from OCR artifacts.

    Collapses whitespace, drops one leading letter code ("E 761486 ..."), drops
    a leading 4+ digit department/PLU code, and relabels linked discount codes
    ("0000371710 / 370586") as "DISCOUNT 370586".
    """
    name = collapse_whitespace(desc)
    name = LEADING_LETTER_CODE.sub("", name, count=1).strip()
    name = LEADING_DIGIT_CODE.sub("", name, count=1).strip()
    discount = LINKED_DISCOUNT_CODE.match(name)
    if discount:
        name = f"DISCOUNT {discount.group(1)}"
    return name


def is_store_noise(name: str, rules: LineRules = DEFAULT_LINE_RULES) -> bool:
    return rules.store_noise_regex.search(name) is not None


def is_valid_item_name(name: str, rules: LineRules = DEFAULT_LINE_RULES) -> bool:
    """A cleaned name is usable unless empty, numeric-only, or store noise."""
    if not name:
        return False
    if re.fullmatch(r"[\d\s.,/#*-]+", name):
        return False
    return not is_store_noise(name, rules)
