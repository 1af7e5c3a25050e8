"""Composable OCR receipt parser components."""

from .common import candidate_item_lines, classify_line, clean_item_name, split_lines
from .fields_parser import extract_itemized_fields, extract_price_only_fields
from .items_text_parser import extract_items_with_names
from .money import find_money_tokens, is_money_line, money_from_line, normalize_money_token, parse_money
from .prices_parser import extract_prices_only

__all__ = [
    "candidate_item_lines",
    "classify_line",
    "clean_item_name",
    "extract_itemized_fields",
    "extract_items_with_names",
    "extract_price_only_fields",
    "extract_prices_only",
    "find_money_tokens",
    "is_money_line",
    "money_from_line",
    "normalize_money_token",
    "parse_money",
    "split_lines",
]
