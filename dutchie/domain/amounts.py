"""Cent-level Decimal helpers shared by extraction and settlement."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Amounts at or below this magnitude are treated as settled.
SETTLE_EPSILON = Decimal("0.009")

# Extracted prices below this magnitude are OCR noise such as "0.00" fields.
NOISE_PRICE_EPSILON = Decimal("0.005")


def round_cents(value: Decimal | int | str) -> Decimal:
    """Round to two decimal places, half-up at the cent."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: Decimal) -> int:
    """Integer cents of an amount, rounded half-up."""
    return int(round_cents(value) * 100)


def format_amount(value: Decimal) -> str:
    """Render an amount with exactly two decimals."""
    return f"{round_cents(value):.2f}"
