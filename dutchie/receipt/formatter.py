"""Format receipt extractions as aligned plain text."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from dutchie.domain.amounts import format_amount
from dutchie.domain.ledger import ReceiptItem
from dutchie.domain.receipt import ReceiptExtraction


def _format_rows_aligned(rows: list[tuple[str, str]], indent: str = "  ") -> list[str]:
    """
    Format (label, amount) rows with left-aligned labels and right-aligned amounts.

    Args:
        rows: List of (label, amount_text) tuples
        indent: Indentation prefix for each line

    Returns:
        List of formatted lines
    """
    if not rows:
        return []

    max_label_len = max(len(label) for label, _ in rows)
    max_amount_len = max(len(amount) for _, amount in rows)
    return [f"{indent}{label.ljust(max_label_len)}  {amount.rjust(max_amount_len)}" for label, amount in rows]


def _optional_amount(value: Decimal | None) -> str:
    return format_amount(value) if value is not None else "-"


def format_extraction(extraction: ReceiptExtraction, items: Sequence[ReceiptItem] = ()) -> str:
    """
    Render an extraction for review.

    When ``items`` (the ledger entries created from it) are given, their names
    are shown, which includes positional names for price-only extractions.
    """
    lines = [f"Strategy: {extraction.strategy}"]
    if items:
        lines.append(f"Receipt group: {items[0].receipt_group_id}")
        names = [item.name for item in items]
    else:
        names = [item.name or f"#{idx}" for idx, item in enumerate(extraction.items, 1)]

    lines.append(f"Items ({len(extraction.items)}):")
    rows = [
        (f"{idx}. {name}", format_amount(item.price))
        for idx, (name, item) in enumerate(zip(names, extraction.items), 1)
    ]
    lines.extend(_format_rows_aligned(rows))

    summary = [
        ("Item sum", format_amount(extraction.items_sum)),
        ("Subtotal", _optional_amount(extraction.subtotal)),
        ("Tax", _optional_amount(extraction.tax)),
        ("Total", _optional_amount(extraction.total)),
    ]
    lines.append("")
    lines.extend(_format_rows_aligned(summary, indent=""))
    gap = extraction.total_gap
    if gap:
        lines.append(f"Note: printed total differs from item sum by {format_amount(gap)}")
    return "\n".join(lines)


def extraction_to_dict(extraction: ReceiptExtraction, items: Sequence[ReceiptItem] = ()) -> dict[str, Any]:
    """JSON-ready view of an extraction; amounts as two-decimal strings."""
    if items:
        records = [{"name": item.name, "price": format_amount(item.price)} for item in items]
    else:
        records = [{"name": item.name, "price": format_amount(item.price)} for item in extraction.items]
    return {
        "strategy": extraction.strategy,
        "receipt_group_id": items[0].receipt_group_id if items else None,
        "items": records,
        "subtotal": format_amount(extraction.subtotal) if extraction.subtotal is not None else None,
        "tax": format_amount(extraction.tax) if extraction.tax is not None else None,
        "total": format_amount(extraction.total) if extraction.total is not None else None,
    }
