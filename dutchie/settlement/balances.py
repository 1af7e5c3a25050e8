"""Owed / paid / balance aggregation and the per-payment breakdown.

``owed`` is each person's fair share: manual items split equally across
everyone, receipt items split among their assignees. ``paid`` is actual outlay
from payer selections. Missing selections are counted and excluded, never
defaulted, so ``sum(paid)`` may differ from ``sum(owed)``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal

from dutchie.domain.amounts import SETTLE_EPSILON, ZERO, round_cents
from dutchie.domain.ledger import ManualItem, Person, ReceiptGroup, ReceiptItem, natural_sort_key
from dutchie.domain.settlement import BalanceSheet, PaymentEvent, Transfer


def _group_receipt_items(items: Iterable[ReceiptItem]) -> list[tuple[str, list[ReceiptItem]]]:
    grouped: dict[str, list[ReceiptItem]] = {}
    for item in items:
        grouped.setdefault(item.receipt_group_id, []).append(item)
    return [(gid, grouped[gid]) for gid in sorted(grouped, key=natural_sort_key)]


def compute_balances(
    people: Sequence[Person],
    items: Iterable[ManualItem | ReceiptItem],
    receipt_payers: Mapping[str, str],
) -> BalanceSheet:
    """Aggregate owed and paid per person and derive ``balance = paid - owed``."""
    person_ids = [p.person_id for p in people]
    owed: dict[str, Decimal] = {pid: ZERO for pid in person_ids}
    paid: dict[str, Decimal] = {pid: ZERO for pid in person_ids}
    sheet = BalanceSheet()

    item_list = list(items)
    manual_items = [item for item in item_list if isinstance(item, ManualItem)]
    receipt_items = [item for item in item_list if isinstance(item, ReceiptItem)]

    if person_ids:
        for item in manual_items:
            share = item.price / len(person_ids)
            for pid in person_ids:
                owed[pid] += share

    for item in receipt_items:
        assigned = item.assigned_person_ids
        if not assigned:
            sheet.unassigned_items += 1
            continue
        # Divide by every assignee, even ids no longer among people.
        share = item.price / len(assigned)
        for pid in assigned:
            if pid in owed:
                owed[pid] += share

    for item in manual_items:
        if not item.payer_id:
            sheet.missing_manual_payers += 1
            continue
        if item.payer_id in paid:
            paid[item.payer_id] += item.price

    for group_id, group_items in _group_receipt_items(receipt_items):
        payer_id = receipt_payers.get(group_id)
        if not payer_id:
            sheet.missing_receipt_payers += 1
            continue
        if payer_id in paid:
            paid[payer_id] += sum((item.price for item in group_items), ZERO)

    sheet.owed = {pid: round_cents(value) for pid, value in owed.items()}
    sheet.paid = {pid: round_cents(value) for pid, value in paid.items()}
    sheet.balance = {pid: round_cents(sheet.paid[pid] - sheet.owed[pid]) for pid in person_ids}
    return sheet


def build_payment_events(
    people: Sequence[Person],
    manual_items: Iterable[ManualItem],
    receipt_groups: Iterable[ReceiptGroup],
) -> list[PaymentEvent]:
    """
    One event per receipt group, then one per manual item.

    Each event records every person's share of it, rounded to cents, so a
    payer can see who should reimburse them for which payment.
    """
    person_ids = [p.person_id for p in people]
    events: list[PaymentEvent] = []

    for idx, group in enumerate(receipt_groups, 1):
        shares: dict[str, Decimal] = {pid: ZERO for pid in person_ids}
        for item in group.items:
            if not item.assigned_person_ids:
                continue
            share = item.price / len(item.assigned_person_ids)
            for pid in item.assigned_person_ids:
                if pid in shares:
                    shares[pid] += share
        events.append(
            PaymentEvent(
                event_id=f"receipt:{group.group_id}",
                label=f"Receipt #{idx} ({group.group_id})",
                kind="receipt",
                total=group.total,
                shares={pid: round_cents(value) for pid, value in shares.items()},
                payer_id=group.payer_id,
            )
        )

    for item in manual_items:
        if person_ids:
            share = round_cents(item.price / len(person_ids))
            shares = {pid: share for pid in person_ids}
        else:
            shares = {}
        events.append(
            PaymentEvent(
                event_id=f"manual:{item.item_id}",
                label=item.name,
                kind="manual",
                total=round_cents(item.price),
                shares=shares,
                payer_id=item.payer_id,
            )
        )
    return events


def raw_obligations(person_ids: Sequence[str], events: Iterable[PaymentEvent]) -> list[Transfer]:
    """
    Unoptimized view: everyone reimburses each payment's payer directly.

    Events without a payer (or with a payer not among ``person_ids``) are
    skipped. Amounts are summed per (from, to) pair, in first-seen order.
    """
    known = set(person_ids)
    totals: dict[tuple[str, str], Decimal] = {}
    for event in events:
        payer = event.payer_id
        if not payer or payer not in known:
            continue
        for pid in person_ids:
            if pid == payer:
                continue
            amount = event.shares.get(pid, ZERO)
            if amount > SETTLE_EPSILON:
                key = (pid, payer)
                totals[key] = round_cents(totals.get(key, ZERO) + amount)
    return [Transfer(from_id=src, to_id=dst, amount=amount) for (src, dst), amount in totals.items()]


def transfer_matrix(person_ids: Sequence[str], transfers: Iterable[Transfer]) -> list[list[Decimal]]:
    """Square matrix in ``person_ids`` order: rows send, columns receive."""
    index = {pid: idx for idx, pid in enumerate(person_ids)}
    size = len(person_ids)
    matrix = [[ZERO] * size for _ in range(size)]
    for transfer in transfers:
        row = index.get(transfer.from_id)
        col = index.get(transfer.to_id)
        if row is None or col is None:
            continue
        matrix[row][col] = round_cents(matrix[row][col] + transfer.amount)
    return matrix
