"""Data models for receipt text extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

from dutchie.domain.amounts import ZERO, round_cents

ExtractionStrategy = Literal["prices_only", "itemized"]
EXTRACTION_STRATEGIES: tuple[ExtractionStrategy, ...] = ("prices_only", "itemized")

LineKind = Literal["noise", "summary", "item"]


@dataclass(frozen=True)
class OcrWord:
    """A recognized word with the pixel-space center of its bounding box."""

    text: str
    x: float
    y: float


@dataclass(frozen=True)
class OcrResult:
    """Output of the external OCR collaborator."""

    text: str
    words: tuple[OcrWord, ...] = ()


@dataclass(frozen=True)
class ExtractedItem:
    """A single priced line pulled off a receipt.

    ``name`` is None when the strategy discards descriptions (price-only);
    such items are named positionally when they join a receipt group.
    """

    price: Decimal
    name: str | None = None


@dataclass
class PriceOnlyResult:
    """Prices in line order plus the optional summary amounts."""

    prices: list[Decimal] = field(default_factory=list)
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    total: Decimal | None = None


@dataclass
class ItemizedResult:
    """Named items in line order plus the optional summary amounts."""

    items: list[ExtractedItem] = field(default_factory=list)
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    total: Decimal | None = None


@dataclass
class ReceiptExtraction:
    """Strategy-independent extraction outcome handed to callers."""

    strategy: ExtractionStrategy
    items: list[ExtractedItem] = field(default_factory=list)
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    total: Decimal | None = None

    @property
    def is_empty(self) -> bool:
        """True when no prices were parsed; callers decide how to surface it."""
        return not self.items

    @property
    def items_sum(self) -> Decimal:
        return round_cents(sum((item.price for item in self.items), ZERO))

    @property
    def total_gap(self) -> Decimal | None:
        """Printed total minus the item sum, for display only."""
        if self.total is None:
            return None
        return round_cents(self.total - self.items_sum)
