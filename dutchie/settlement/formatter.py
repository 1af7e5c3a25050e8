"""Render a SettlementReport as text or as a JSON-ready mapping."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import Any

from dutchie.domain.amounts import format_amount
from dutchie.domain.settlement import SettlementReport, Transfer

from .balances import transfer_matrix

NameLookup = Callable[[str], str]


def _format_table(header: Sequence[str], rows: Sequence[Sequence[str]]) -> list[str]:
    """First column left-aligned, the rest right-aligned."""
    widths = [max(len(row[col]) for row in [header, *rows]) for col in range(len(header))]
    lines = []
    for row in [header, *rows]:
        cells = [row[0].ljust(widths[0])] + [cell.rjust(width) for cell, width in zip(row[1:], widths[1:])]
        lines.append("  ".join(cells).rstrip())
    return lines


def _format_matrix(person_ids: Sequence[str], transfers: Sequence[Transfer], name_of: NameLookup) -> list[str]:
    names = [name_of(pid) for pid in person_ids]
    matrix = transfer_matrix(person_ids, transfers)
    rows = [[names[idx], *(format_amount(value) for value in matrix[idx])] for idx in range(len(person_ids))]
    return _format_table(["from \\ to", *names], rows)


def format_settlement_report(report: SettlementReport, name_of: NameLookup) -> str:
    """Balances, warnings, optimized transfers and both transfer matrices."""
    sheet = report.sheet
    lines: list[str] = ["BALANCES"]
    rows = [
        [name_of(pid), *(format_amount(mapping[pid]) for mapping in (sheet.paid, sheet.owed, sheet.balance))]
        for pid in report.person_ids
    ]
    lines.extend(_format_table(["person", "paid", "owed", "balance"], rows))
    lines.append(f"Owed total: {format_amount(sheet.owed_total)}")
    lines.append(f"Paid total: {format_amount(sheet.paid_total)}")

    if sheet.has_warnings or sheet.unsettled:
        lines.append("")
        lines.append("WARNINGS")
        if sheet.unassigned_items:
            lines.append(f"  {sheet.unassigned_items} receipt item(s) have nobody assigned")
        if sheet.missing_manual_payers:
            lines.append(f"  {sheet.missing_manual_payers} manual item(s) have no payer")
        if sheet.missing_receipt_payers:
            lines.append(f"  {sheet.missing_receipt_payers} receipt(s) have no payer")
        if sheet.unsettled:
            lines.append(f"  Unsettled difference: {format_amount(sheet.unsettled)}")

    lines.append("")
    lines.append("TRANSFERS")
    if not report.transfers:
        lines.append("  No transfers needed (already settled).")
    for transfer in report.transfers:
        lines.append(f"  {name_of(transfer.from_id)} -> {name_of(transfer.to_id)}: {format_amount(transfer.amount)}")

    if report.person_ids:
        lines.append("")
        lines.append("RAW TRANSFER MATRIX (pay each payer directly)")
        lines.extend(_format_matrix(report.person_ids, report.raw_obligations, name_of))
        lines.append("")
        lines.append("OPTIMIZED TRANSFER MATRIX")
        lines.extend(_format_matrix(report.person_ids, report.transfers, name_of))
    return "\n".join(lines)


def _amounts(mapping: dict[str, Decimal]) -> dict[str, str]:
    return {pid: format_amount(value) for pid, value in mapping.items()}


def report_to_dict(report: SettlementReport) -> dict[str, Any]:
    """Presentation payload: transfer records plus the paid and owed mappings."""
    sheet = report.sheet
    return {
        "transfers": report.transfer_records,
        "raw_obligations": [t.as_record() for t in report.raw_obligations],
        "paid": _amounts(sheet.paid),
        "owed": _amounts(sheet.owed),
        "balance": _amounts(sheet.balance),
        "owed_total": format_amount(sheet.owed_total),
        "paid_total": format_amount(sheet.paid_total),
        "unsettled": format_amount(sheet.unsettled),
        "warnings": {
            "unassigned_items": sheet.unassigned_items,
            "missing_manual_payers": sheet.missing_manual_payers,
            "missing_receipt_payers": sheet.missing_receipt_payers,
        },
        "events": [
            {
                "event_id": event.event_id,
                "label": event.label,
                "kind": event.kind,
                "total": format_amount(event.total),
                "payer_id": event.payer_id,
                "shares": _amounts(event.shares),
            }
            for event in report.events
        ],
    }
