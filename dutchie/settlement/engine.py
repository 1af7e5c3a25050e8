"""Greedy settlement: match the largest debtor with the largest creditor."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from dutchie.domain.amounts import SETTLE_EPSILON, ZERO, round_cents
from dutchie.domain.settlement import Transfer


@dataclass
class _Party:
    person_id: str
    remaining: Decimal


def _partition(balances: Mapping[str, Decimal]) -> tuple[list[_Party], list[_Party]]:
    creditors: list[_Party] = []
    debtors: list[_Party] = []
    for person_id, balance in balances.items():
        value = round_cents(balance)
        if value > SETTLE_EPSILON:
            creditors.append(_Party(person_id, value))
        elif value < -SETTLE_EPSILON:
            debtors.append(_Party(person_id, -value))

    # sorted() is stable, so equal amounts keep the mapping's order.
    creditors = sorted(creditors, key=lambda party: party.remaining, reverse=True)
    debtors = sorted(debtors, key=lambda party: party.remaining, reverse=True)
    return creditors, debtors


def settle(balances: Mapping[str, Decimal]) -> list[Transfer]:
    """
    Compute transfers that zero out ``balances`` (paid minus owed per person).

    Positive balances are creditors, negative ones debtors; anything within
    SETTLE_EPSILON of zero is already settled. At most
    ``len(creditors) + len(debtors) - 1`` transfers are emitted. When total
    credit and total debit differ, the residue is left unsettled.
    """
    creditors, debtors = _partition(balances)
    transfers: list[Transfer] = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(debtor.remaining, creditor.remaining)
        rounded = round_cents(amount)
        if rounded > ZERO:
            transfers.append(Transfer(from_id=debtor.person_id, to_id=creditor.person_id, amount=rounded))

        debtor.remaining -= amount
        creditor.remaining -= amount
        if debtor.remaining <= SETTLE_EPSILON:
            i += 1
        if creditor.remaining <= SETTLE_EPSILON:
            j += 1
    return transfers


def net_flow(transfers: Iterable[Transfer]) -> dict[str, Decimal]:
    """Received minus sent per person; equals the balances a transfer list settles."""
    flow: dict[str, Decimal] = {}
    for transfer in transfers:
        flow[transfer.to_id] = flow.get(transfer.to_id, ZERO) + transfer.amount
        flow[transfer.from_id] = flow.get(transfer.from_id, ZERO) - transfer.amount
    return flow
