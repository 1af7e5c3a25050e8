"""Data models for balances and transfers."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

from dutchie.domain.amounts import ZERO, round_cents, to_cents


@dataclass(frozen=True)
class Transfer:
    """A directed, strictly positive payment from one person to another."""

    from_id: str
    to_id: str
    amount: Decimal

    @property
    def amount_cents(self) -> int:
        return to_cents(self.amount)

    def as_record(self) -> dict[str, str | int]:
        """Shape consumed by the presentation layer."""
        return {"from_id": self.from_id, "to_id": self.to_id, "amount_cents": self.amount_cents}


@dataclass
class BalanceSheet:
    """Per-person owed / paid / balance, keyed in people order.

    Warning counters report selections that were missing and therefore
    excluded from the math instead of being defaulted.
    """

    owed: dict[str, Decimal] = field(default_factory=dict)
    paid: dict[str, Decimal] = field(default_factory=dict)
    balance: dict[str, Decimal] = field(default_factory=dict)
    unassigned_items: int = 0
    missing_manual_payers: int = 0
    missing_receipt_payers: int = 0

    @property
    def owed_total(self) -> Decimal:
        return round_cents(sum(self.owed.values(), ZERO))

    @property
    def paid_total(self) -> Decimal:
        return round_cents(sum(self.paid.values(), ZERO))

    @property
    def unsettled(self) -> Decimal:
        """paid_total - owed_total; non-zero when selections are incomplete."""
        return self.paid_total - self.owed_total

    @property
    def has_warnings(self) -> bool:
        return bool(self.unassigned_items or self.missing_manual_payers or self.missing_receipt_payers)


@dataclass(frozen=True)
class PaymentEvent:
    """One actual payment: a receipt group or a single manual item."""

    event_id: str
    label: str
    kind: Literal["receipt", "manual"]
    total: Decimal
    shares: dict[str, Decimal]
    payer_id: str | None = None


@dataclass
class SettlementReport:
    """Everything the presentation layer shows for a settled ledger."""

    person_ids: list[str]
    sheet: BalanceSheet
    transfers: list[Transfer]
    events: list[PaymentEvent]
    raw_obligations: list[Transfer]

    @property
    def transfer_records(self) -> list[dict[str, str | int]]:
        return [t.as_record() for t in self.transfers]
