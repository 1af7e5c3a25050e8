"""Assemble balances, optimized transfers and the raw obligation view for one ledger."""

from __future__ import annotations

from dutchie.domain.ledger import Ledger
from dutchie.domain.settlement import SettlementReport

from .balances import build_payment_events, compute_balances, raw_obligations
from .engine import settle


def build_settlement_report(ledger: Ledger) -> SettlementReport:
    """Derive everything shown for a settled ledger; the ledger is not modified."""
    person_ids = ledger.person_ids
    sheet = compute_balances(ledger.people, ledger.items, ledger.receipt_payers)
    events = build_payment_events(ledger.people, ledger.manual_items, ledger.receipt_groups())
    return SettlementReport(
        person_ids=person_ids,
        sheet=sheet,
        transfers=settle(sheet.balance),
        events=events,
        raw_obligations=raw_obligations(person_ids, events),
    )
