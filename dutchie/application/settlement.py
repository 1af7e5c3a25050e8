"""Settlement workflow orchestration."""

from __future__ import annotations

from dutchie.domain.amounts import ZERO
from dutchie.domain.ledger import Ledger
from dutchie.domain.settlement import SettlementReport
from dutchie.runtime import get_logger
from dutchie.settlement import build_settlement_report

logger = get_logger(__name__)


def run_settlement(ledger: Ledger) -> SettlementReport:
    """Settle ``ledger`` and log the selections that were left out of the math."""
    report = build_settlement_report(ledger)
    sheet = report.sheet

    if sheet.unassigned_items:
        logger.warning("%d receipt item(s) have no assignees and are excluded from owed", sheet.unassigned_items)
    if sheet.missing_manual_payers:
        logger.warning("%d manual item(s) have no payer and are excluded from paid", sheet.missing_manual_payers)
    if sheet.missing_receipt_payers:
        logger.warning("%d receipt(s) have no payer and are excluded from paid", sheet.missing_receipt_payers)
    if sheet.unsettled != ZERO:
        logger.warning("Paid and owed totals differ by %s; the difference stays unsettled", sheet.unsettled)

    logger.info("Settled %d people with %d transfer(s)", len(report.person_ids), len(report.transfers))
    return report
