from decimal import Decimal

from dutchie.domain.ledger import Ledger, ManualItem, Person, ReceiptItem
from dutchie.domain.receipt import ExtractedItem
from dutchie.settlement.balances import build_payment_events, compute_balances, raw_obligations, transfer_matrix
from dutchie.settlement.report import build_settlement_report

D = Decimal


def _people(*ids: str) -> list[Person]:
    return [Person(person_id=pid, name=pid.upper()) for pid in ids]


def test_unassigned_receipt_item_is_excluded_and_counted() -> None:
    people = _people("a", "b")
    items = [
        ReceiptItem(item_id="i1", name="WINE", price=D("99.99"), receipt_group_id="r1"),
        ReceiptItem(item_id="i2", name="BREAD", price=D("4.00"), receipt_group_id="r1", assigned_person_ids=("a",)),
    ]

    sheet = compute_balances(people, items, {"r1": "b"})

    assert sheet.unassigned_items == 1
    assert sheet.owed == {"a": D("4.00"), "b": D("0.00")}
    assert sheet.paid == {"a": D("0.00"), "b": D("103.99")}
    assert sheet.unsettled == D("99.99")


def test_manual_items_split_equally_and_credit_their_payer() -> None:
    people = _people("a", "b", "c")
    items = [ManualItem(item_id="m1", name="Cabin", price=D("100.00"), payer_id="a")]

    sheet = compute_balances(people, items, {})

    assert sheet.owed == {"a": D("33.33"), "b": D("33.33"), "c": D("33.33")}
    assert sheet.paid == {"a": D("100.00"), "b": D("0.00"), "c": D("0.00")}
    assert sheet.balance == {"a": D("66.67"), "b": D("-33.33"), "c": D("-33.33")}


def test_zero_people_means_zero_owed() -> None:
    items = [ManualItem(item_id="m1", name="Gas", price=D("40.00"))]

    sheet = compute_balances([], items, {})

    assert sheet.owed == {}
    assert sheet.missing_manual_payers == 1


def test_missing_payers_are_counted_not_defaulted() -> None:
    people = _people("a", "b")
    items = [
        ManualItem(item_id="m1", name="Gas", price=D("40.00")),
        ReceiptItem(item_id="i1", name="MILK", price=D("3.00"), receipt_group_id="r1", assigned_person_ids=("a",)),
        ReceiptItem(item_id="i2", name="EGGS", price=D("5.00"), receipt_group_id="r2", assigned_person_ids=("b",)),
    ]

    sheet = compute_balances(people, items, {"r2": "a"})

    assert sheet.missing_manual_payers == 1
    assert sheet.missing_receipt_payers == 1
    assert sheet.paid == {"a": D("5.00"), "b": D("0.00")}
    assert sheet.has_warnings


def test_receipt_item_split_among_assignees() -> None:
    people = _people("a", "b", "c")
    items = [
        ReceiptItem(
            item_id="i1", name="PIZZA", price=D("10.00"), receipt_group_id="r1", assigned_person_ids=("a", "b", "c")
        ),
        ReceiptItem(item_id="i2", name="SODA", price=D("3.00"), receipt_group_id="r1", assigned_person_ids=("b", "c")),
    ]

    sheet = compute_balances(people, items, {"r1": "c"})

    assert sheet.owed == {"a": D("3.33"), "b": D("4.83"), "c": D("4.83")}
    assert sheet.paid["c"] == D("13.00")
    assert sheet.balance == {"a": D("-3.33"), "b": D("-4.83"), "c": D("8.17")}


def test_payment_events_and_raw_obligations() -> None:
    ledger = Ledger()
    a = ledger.add_person("Ann", person_id="a")
    b = ledger.add_person("Bo", person_id="b")
    items = ledger.add_receipt_items([ExtractedItem(price=D("6.00"), name="CHEESE"), ExtractedItem(price=D("2.00"))])
    ledger.assign_everyone(items[0].item_id)
    ledger.toggle_assignee(items[1].item_id, b.person_id)
    ledger.set_receipt_payer("r1", a.person_id)
    dinner = ledger.add_manual_item("Dinner", "30")
    ledger.set_manual_payer(dinner.item_id, b.person_id)

    events = build_payment_events(ledger.people, ledger.manual_items, ledger.receipt_groups())

    assert [e.event_id for e in events] == ["receipt:r1", f"manual:{dinner.item_id}"]
    assert events[0].label == "Receipt #1 (r1)"
    assert events[0].shares == {"a": D("3.00"), "b": D("5.00")}
    assert events[1].shares == {"a": D("15.00"), "b": D("15.00")}

    obligations = raw_obligations(ledger.person_ids, events)

    assert [t.as_record() for t in obligations] == [
        {"from_id": "b", "to_id": "a", "amount_cents": 500},
        {"from_id": "a", "to_id": "b", "amount_cents": 1500},
    ]


def test_raw_obligations_skip_events_without_payer() -> None:
    people = _people("a", "b")
    events = build_payment_events(people, [ManualItem(item_id="m1", name="Gas", price=D("10.00"))], [])

    assert raw_obligations(["a", "b"], events) == []


def test_transfer_matrix_rows_send_columns_receive() -> None:
    report_ledger = Ledger()
    report_ledger.add_person("A", person_id="a")
    report_ledger.add_person("B", person_id="b")
    item = report_ledger.add_manual_item("Tickets", "20.00")
    report_ledger.set_manual_payer(item.item_id, "a")

    report = build_settlement_report(report_ledger)

    assert report.transfer_records == [{"from_id": "b", "to_id": "a", "amount_cents": 1000}]
    assert transfer_matrix(report.person_ids, report.transfers) == [[D("0"), D("0")], [D("10.00"), D("0")]]
    assert report.raw_obligations == report.transfers
    assert report.sheet.owed_total == report.sheet.paid_total == D("20.00")
