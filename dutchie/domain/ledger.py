"""Ledger state for one shared expense: people, items and payer selections.

The ledger is an explicit state object handed to the extraction and settlement
workflows. Items are a tagged variant: manual items are split equally across
everyone and carry their own payer; receipt items belong to a receipt group,
are split among their assignees, and are paid for as a group.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Literal

from dutchie.domain.amounts import ZERO, round_cents
from dutchie.domain.receipt import ExtractedItem

UNNAMED = "Unnamed"
RECEIPT_GROUP_PREFIX = "r"


def new_id() -> str:
    """Short random identifier for people and items."""
    return uuid.uuid4().hex[:8]


def natural_sort_key(value: str) -> tuple[Any, ...]:
    """Sort key that orders r1, r2, r10 numerically."""
    parts = re.split(r"(\d+)", value)
    return tuple((0, int(part)) if part.isdigit() else (1, part) for part in parts if part)


def _coerce_price(value: Decimal | int | str) -> Decimal:
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid price: {value!r}") from exc
    if not price.is_finite():
        raise ValueError(f"Invalid price: {value!r}")
    return round_cents(price)


@dataclass(frozen=True)
class Person:
    person_id: str
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name.strip() or UNNAMED


@dataclass(frozen=True)
class ManualItem:
    """Entered by hand; split equally across the whole group."""

    item_id: str
    name: str
    price: Decimal
    payer_id: str | None = None
    source: Literal["manual"] = "manual"


@dataclass(frozen=True)
class ReceiptItem:
    """Extracted from a receipt; split among the assigned people only."""

    item_id: str
    name: str
    price: Decimal
    receipt_group_id: str
    assigned_person_ids: tuple[str, ...] = ()
    source: Literal["receipt"] = "receipt"


Item = ManualItem | ReceiptItem


@dataclass(frozen=True)
class ReceiptGroup:
    """Items from one scanned receipt, paid for by a single person."""

    group_id: str
    items: tuple[ReceiptItem, ...]
    payer_id: str | None = None

    @property
    def total(self) -> Decimal:
        return round_cents(sum((item.price for item in self.items), ZERO))


@dataclass
class Ledger:
    """Mutable session state; derived values are recomputed from it on demand."""

    people: list[Person] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    receipt_payers: dict[str, str] = field(default_factory=dict)

    # --- People ---
    def add_person(self, name: str = "", person_id: str | None = None) -> Person:
        person_id = person_id or new_id()
        if any(p.person_id == person_id for p in self.people):
            raise ValueError(f"Duplicate person id: {person_id}")
        person = Person(person_id=person_id, name=name.strip())
        self.people.append(person)
        return person

    def get_person(self, person_id: str) -> Person:
        for person in self.people:
            if person.person_id == person_id:
                return person
        raise KeyError(person_id)

    def rename_person(self, person_id: str, name: str) -> Person:
        person = self.get_person(person_id)
        renamed = replace(person, name=name.strip())
        self.people[self.people.index(person)] = renamed
        return renamed

    def remove_person(self, person_id: str) -> None:
        """Remove a person along with their assignments and payer selections."""
        person = self.get_person(person_id)
        self.people.remove(person)
        updated: list[Item] = []
        for item in self.items:
            if isinstance(item, ReceiptItem) and person_id in item.assigned_person_ids:
                ids = tuple(pid for pid in item.assigned_person_ids if pid != person_id)
                item = replace(item, assigned_person_ids=ids)
            elif isinstance(item, ManualItem) and item.payer_id == person_id:
                item = replace(item, payer_id=None)
            updated.append(item)
        self.items = updated
        self.receipt_payers = {gid: pid for gid, pid in self.receipt_payers.items() if pid != person_id}

    def display_name(self, person_id: str) -> str:
        try:
            return self.get_person(person_id).display_name
        except KeyError:
            return UNNAMED

    @property
    def person_ids(self) -> list[str]:
        return [p.person_id for p in self.people]

    # --- Items ---
    @property
    def manual_items(self) -> list[ManualItem]:
        return [item for item in self.items if isinstance(item, ManualItem)]

    @property
    def receipt_items(self) -> list[ReceiptItem]:
        return [item for item in self.items if isinstance(item, ReceiptItem)]

    def get_item(self, item_id: str) -> Item:
        return self.items[self._item_index(item_id)]

    def _item_index(self, item_id: str) -> int:
        for idx, item in enumerate(self.items):
            if item.item_id == item_id:
                return idx
        raise KeyError(item_id)

    def _receipt_item_index(self, item_id: str) -> int:
        idx = self._item_index(item_id)
        if not isinstance(self.items[idx], ReceiptItem):
            raise ValueError(f"Item {item_id} is not a receipt item")
        return idx

    def add_manual_item(self, name: str, price: Decimal | int | str) -> ManualItem:
        name = name.strip()
        if not name:
            raise ValueError("Item name must not be empty")
        amount = _coerce_price(price)
        if amount <= ZERO:
            raise ValueError(f"Manual item price must be positive: {price!r}")
        item = ManualItem(item_id=new_id(), name=name, price=amount)
        self.items.append(item)
        return item

    def next_receipt_group_id(self) -> str:
        """Next id past the largest r<n> held by an item or a payer selection."""
        max_num = 0
        for gid in [item.receipt_group_id for item in self.receipt_items] + list(self.receipt_payers):
            if gid.startswith(RECEIPT_GROUP_PREFIX) and gid[len(RECEIPT_GROUP_PREFIX) :].isdigit():
                max_num = max(max_num, int(gid[len(RECEIPT_GROUP_PREFIX) :]))
        return f"{RECEIPT_GROUP_PREFIX}{max_num + 1}"

    def add_receipt_items(self, extracted: Sequence[ExtractedItem], group_id: str | None = None) -> list[ReceiptItem]:
        """Append extracted items as one new receipt group; unnamed items get "<group>-<n>"."""
        if not extracted:
            return []
        group_id = group_id or self.next_receipt_group_id()
        new_items = [
            ReceiptItem(
                item_id=new_id(),
                name=item.name or f"{group_id}-{idx}",
                price=round_cents(item.price),
                receipt_group_id=group_id,
            )
            for idx, item in enumerate(extracted, 1)
        ]
        self.items.extend(new_items)
        return new_items

    def rename_item(self, item_id: str, name: str) -> Item:
        name = name.strip()
        if not name:
            raise ValueError("Item name must not be empty")
        idx = self._item_index(item_id)
        renamed = replace(self.items[idx], name=name)
        self.items[idx] = renamed
        return renamed

    def remove_item(self, item_id: str) -> None:
        """Remove one item; a receipt group losing its last item also loses its payer."""
        removed = self.items.pop(self._item_index(item_id))
        if isinstance(removed, ReceiptItem) and not any(
            item.receipt_group_id == removed.receipt_group_id for item in self.receipt_items
        ):
            self.receipt_payers.pop(removed.receipt_group_id, None)

    def remove_receipt_group(self, group_id: str) -> int:
        """Remove every item of one receipt group; returns how many were removed."""
        before = len(self.items)
        self.items = [
            item for item in self.items if not (isinstance(item, ReceiptItem) and item.receipt_group_id == group_id)
        ]
        self.receipt_payers.pop(group_id, None)
        return before - len(self.items)

    def clear_receipt_items(self) -> int:
        before = len(self.items)
        self.items = [item for item in self.items if not isinstance(item, ReceiptItem)]
        self.receipt_payers.clear()
        return before - len(self.items)

    # --- Assignment ---
    def toggle_assignee(self, item_id: str, person_id: str) -> ReceiptItem:
        self.get_person(person_id)
        idx = self._receipt_item_index(item_id)
        item = self.items[idx]
        assert isinstance(item, ReceiptItem)
        if person_id in item.assigned_person_ids:
            ids = tuple(pid for pid in item.assigned_person_ids if pid != person_id)
        else:
            ids = item.assigned_person_ids + (person_id,)
        updated = replace(item, assigned_person_ids=ids)
        self.items[idx] = updated
        return updated

    def assign_everyone(self, item_id: str) -> ReceiptItem:
        idx = self._receipt_item_index(item_id)
        updated = replace(self.items[idx], assigned_person_ids=tuple(self.person_ids))
        self.items[idx] = updated
        return updated  # type: ignore[return-value]

    def clear_assignees(self, item_id: str) -> ReceiptItem:
        idx = self._receipt_item_index(item_id)
        updated = replace(self.items[idx], assigned_person_ids=())
        self.items[idx] = updated
        return updated  # type: ignore[return-value]

    # --- Payers ---
    def set_manual_payer(self, item_id: str, person_id: str | None) -> ManualItem:
        if person_id is not None:
            self.get_person(person_id)
        idx = self._item_index(item_id)
        item = self.items[idx]
        if not isinstance(item, ManualItem):
            raise ValueError(f"Item {item_id} is not a manual item")
        updated = replace(item, payer_id=person_id)
        self.items[idx] = updated
        return updated

    def set_receipt_payer(self, group_id: str, person_id: str | None) -> None:
        if group_id not in {g.group_id for g in self.receipt_groups()}:
            raise KeyError(group_id)
        if person_id is None:
            self.receipt_payers.pop(group_id, None)
            return
        self.get_person(person_id)
        self.receipt_payers[group_id] = person_id

    def set_all_receipts_paid_by(self, person_id: str) -> None:
        self.get_person(person_id)
        for group in self.receipt_groups():
            self.receipt_payers[group.group_id] = person_id

    def clear_payer_selections(self) -> None:
        self.items = [replace(item, payer_id=None) if isinstance(item, ManualItem) else item for item in self.items]
        self.receipt_payers.clear()

    # --- Views ---
    def receipt_groups(self) -> list[ReceiptGroup]:
        """Receipt groups in natural id order (r1, r2, r10), items in ledger order."""
        grouped: dict[str, list[ReceiptItem]] = {}
        for item in self.receipt_items:
            grouped.setdefault(item.receipt_group_id, []).append(item)
        return [
            ReceiptGroup(group_id=gid, items=tuple(grouped[gid]), payer_id=self.receipt_payers.get(gid))
            for gid in sorted(grouped, key=natural_sort_key)
        ]

    @property
    def manual_total(self) -> Decimal:
        return round_cents(sum((item.price for item in self.manual_items), ZERO))

    @property
    def receipt_total(self) -> Decimal:
        return round_cents(sum((item.price for item in self.receipt_items), ZERO))

    @property
    def grand_total(self) -> Decimal:
        return self.manual_total + self.receipt_total

    # --- Snapshot ---
    def to_dict(self) -> dict[str, Any]:
        items: list[dict[str, Any]] = []
        for item in self.items:
            entry: dict[str, Any] = {
                "id": item.item_id,
                "name": item.name,
                "price": f"{item.price:.2f}",
                "source": item.source,
            }
            if isinstance(item, ManualItem):
                entry["payer_id"] = item.payer_id
            else:
                entry["receipt_group_id"] = item.receipt_group_id
                entry["assigned_person_ids"] = list(item.assigned_person_ids)
            items.append(entry)
        return {
            "people": [{"id": p.person_id, "name": p.name} for p in self.people],
            "items": items,
            "receipt_payers": dict(self.receipt_payers),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Ledger:
        """Rebuild a ledger from a snapshot; raises ValueError on malformed entries."""
        ledger = cls()
        for raw_person in _snapshot_list(data, "people"):
            if not isinstance(raw_person, Mapping) or not raw_person.get("id"):
                raise ValueError(f"Person entry must be an object with an id: {raw_person!r}")
            ledger.add_person(str(raw_person.get("name") or ""), person_id=str(raw_person["id"]))

        for raw_item in _snapshot_list(data, "items"):
            if not isinstance(raw_item, Mapping):
                raise ValueError(f"Item entry must be an object: {raw_item!r}")
            source = raw_item.get("source")
            item_id = str(raw_item.get("id") or new_id())
            name = str(raw_item.get("name") or "").strip()
            if not name:
                raise ValueError(f"Item {item_id} has an empty name")
            price = _coerce_price(raw_item.get("price", ""))
            if source == "manual":
                if price <= ZERO:
                    raise ValueError(f"Manual item price must be positive: {raw_item.get('price')!r}")
                payer = raw_item.get("payer_id")
                ledger.items.append(
                    ManualItem(item_id=item_id, name=name, price=price, payer_id=str(payer) if payer else None)
                )
            elif source == "receipt":
                group_id = str(raw_item.get("receipt_group_id") or f"{RECEIPT_GROUP_PREFIX}1")
                raw_assigned = raw_item.get("assigned_person_ids") or []
                if not isinstance(raw_assigned, list):
                    raise ValueError(f"assigned_person_ids of item {item_id} must be a list")
                assigned = tuple(dict.fromkeys(str(pid) for pid in raw_assigned))
                ledger.items.append(
                    ReceiptItem(
                        item_id=item_id,
                        name=name,
                        price=price,
                        receipt_group_id=group_id,
                        assigned_person_ids=assigned,
                    )
                )
            else:
                raise ValueError(f"Unknown item source: {source!r}")

        raw_payers = data.get("receipt_payers") or {}
        if not isinstance(raw_payers, Mapping):
            raise ValueError("receipt_payers must be an object of group id to person id")
        for group_id, person_id in raw_payers.items():
            if person_id:
                ledger.receipt_payers[str(group_id)] = str(person_id)
        return ledger


def _snapshot_list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list")
    return value
