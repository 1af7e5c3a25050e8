"""Expense settlement: balances, greedy transfers and the raw obligation view."""

from dutchie.settlement.balances import build_payment_events, compute_balances, raw_obligations, transfer_matrix
from dutchie.settlement.engine import net_flow, settle
from dutchie.settlement.formatter import format_settlement_report, report_to_dict
from dutchie.settlement.report import build_settlement_report

__all__ = [
    "build_payment_events",
    "build_settlement_report",
    "compute_balances",
    "format_settlement_report",
    "net_flow",
    "raw_obligations",
    "report_to_dict",
    "settle",
    "transfer_matrix",
]
