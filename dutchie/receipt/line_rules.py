"""Vocabulary used to classify receipt lines.

The rules are plain data so a different noise vocabulary can be swapped in
without touching money parsing. Built-in defaults live here; project TOML
files only add to them (see ``dutchie.runtime.line_rules``).

Every term is a case-insensitive regular expression fragment.
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

# Payment-processing vocabulary. Once a line matches, the item region is over.
DEFAULT_NOISE_TERMS: tuple[str, ...] = (
    "approved",
    "verified",
    "pin",
    "debit",
    "credit",
    "visa",
    "mastercard",
    "amex",
    "eft",
    "account",
    "network",
    "ref",
    "appr",
    "resp",
    r"tran\s*id",
    "aid:",
    "seq#",
    "app#",
    "chip",
    "total purchase",
    "items sold",
)

# Subtotal/tax/total/tender headers, matched as a line prefix.
DEFAULT_SUMMARY_PREFIXES: tuple[str, ...] = (
    "subtotal",
    r"sub\s+total",
    "tax",
    "total",
    "change",
    "tend",
    "tender",
    r"balance\s+due",
    r"amount\s+due",
)

# Header/footer text that must never become an item name.
DEFAULT_STORE_NOISE_PATTERNS: tuple[str, ...] = (
    r"^(?:store|st)\s*#?\s*\d+",
    r"\b(?:tel|phone|fax)\b",
    r"\bwww\.|\.com\b",
    r"\(?\d{3}\)?[-.\s]\d{3}[-.\s]\d{4}",
    r"\b(?:street|avenue|boulevard|blvd|road|highway|suite)\b",
    r"\b[A-Z]{2}\s+\d{5}(?:-\d{4})?\b",
    r"\b(?:thank\s+you|welcome|cashier|manager|receipt)\b",
    r"\bopen\s+\d",
)

# Lines that announce the start of the itemized section.
DEFAULT_ITEM_START_MARKERS: tuple[str, ...] = (
    r"items?",
    r"item\s+desc(?:ription)?",
    r"description",
    r"qty\s+(?:item|description).*",
    r"sale\s+transaction",
)

DEFAULT_Y_TOLERANCE = 10.0
MIN_Y_TOLERANCE = 8.0
MAX_Y_TOLERANCE = 14.0


def _word_bounded(term: str) -> str:
    """Anchor a term at word edges; punctuation-terminated terms ("seq#") only at the start."""
    suffix = r"(?!\w)" if term[-1:].isalnum() else ""
    return rf"(?<!\w)(?:{term}){suffix}"


@lru_cache(maxsize=32)
def _compile_noise(terms: tuple[str, ...]) -> re.Pattern[str]:
    return re.compile("|".join(_word_bounded(t) for t in terms), re.IGNORECASE)


@lru_cache(maxsize=32)
def _compile_prefixes(prefixes: tuple[str, ...]) -> re.Pattern[str]:
    return re.compile(r"^(?:" + "|".join(prefixes) + r")(?!\w)", re.IGNORECASE)


@lru_cache(maxsize=32)
def _compile_any(patterns: tuple[str, ...]) -> re.Pattern[str]:
    return re.compile("|".join(f"(?:{p})" for p in patterns), re.IGNORECASE)


@lru_cache(maxsize=32)
def _compile_markers(markers: tuple[str, ...]) -> re.Pattern[str]:
    return re.compile(r"^(?:" + "|".join(markers) + r")\s*:?$", re.IGNORECASE)


@dataclass(frozen=True)
class LineRules:
    """In-memory line classification vocabulary."""

    noise_terms: tuple[str, ...] = DEFAULT_NOISE_TERMS
    summary_prefixes: tuple[str, ...] = DEFAULT_SUMMARY_PREFIXES
    store_noise_patterns: tuple[str, ...] = DEFAULT_STORE_NOISE_PATTERNS
    item_start_markers: tuple[str, ...] = DEFAULT_ITEM_START_MARKERS
    y_tolerance: float = DEFAULT_Y_TOLERANCE

    @property
    def noise_regex(self) -> re.Pattern[str]:
        return _compile_noise(self.noise_terms)

    @property
    def summary_regex(self) -> re.Pattern[str]:
        return _compile_prefixes(self.summary_prefixes)

    @property
    def store_noise_regex(self) -> re.Pattern[str]:
        return _compile_any(self.store_noise_patterns)

    @property
    def item_start_regex(self) -> re.Pattern[str]:
        return _compile_markers(self.item_start_markers)


DEFAULT_LINE_RULES = LineRules()


def _normalize_terms(raw: Any, field_name: str) -> tuple[str, ...]:
    """Normalize a TOML string-or-list value into validated regex fragments."""
    if raw is None:
        return tuple()
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise ValueError(f"'{field_name}' must be a string or a list of strings")
    terms: list[str] = []
    for value in raw:
        term = str(value).strip()
        if not term:
            continue
        try:
            re.compile(term)
        except re.error as exc:
            raise ValueError(f"Invalid pattern in '{field_name}': {term!r} ({exc})") from exc
        terms.append(term)
    return tuple(terms)


def _merge(base: Sequence[str], extra: Sequence[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys([*base, *extra]))


def build_line_rules(configs: Sequence[Mapping[str, Any]] = (), base: LineRules = DEFAULT_LINE_RULES) -> LineRules:
    """
    Layer config mappings on top of ``base``.

    Each config may carry ``noise_terms``, ``summary_prefixes``,
    ``store_noise_patterns`` and ``item_start_markers`` (appended to the
    existing vocabulary) and ``y_tolerance`` (replaces the current value).
    Later configs win.
    """
    noise = base.noise_terms
    summary = base.summary_prefixes
    store = base.store_noise_patterns
    markers = base.item_start_markers
    y_tolerance = base.y_tolerance

    for config in configs:
        noise = _merge(noise, _normalize_terms(config.get("noise_terms"), "noise_terms"))
        summary = _merge(summary, _normalize_terms(config.get("summary_prefixes"), "summary_prefixes"))
        store = _merge(store, _normalize_terms(config.get("store_noise_patterns"), "store_noise_patterns"))
        markers = _merge(markers, _normalize_terms(config.get("item_start_markers"), "item_start_markers"))
        if "y_tolerance" in config:
            try:
                y_tolerance = float(config["y_tolerance"])
            except (TypeError, ValueError) as exc:
                raise ValueError(f"'y_tolerance' must be a number, got {config['y_tolerance']!r}") from exc
            if not MIN_Y_TOLERANCE <= y_tolerance <= MAX_Y_TOLERANCE:
                raise ValueError(
                    f"'y_tolerance' must be between {MIN_Y_TOLERANCE} and {MAX_Y_TOLERANCE}, got {y_tolerance}"
                )

    return LineRules(
        noise_terms=noise,
        summary_prefixes=summary,
        store_noise_patterns=store,
        item_start_markers=markers,
        y_tolerance=y_tolerance,
    )
