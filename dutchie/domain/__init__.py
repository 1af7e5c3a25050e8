"""Core domain models for dutchie.

This module provides the core data models used throughout the project:
- Ledger, Person, ManualItem, ReceiptItem: shared expense state
- OcrResult, ExtractedItem, ReceiptExtraction: receipt extraction models
- Transfer, BalanceSheet, SettlementReport: settlement models

Usage:
    from dutchie.domain import Ledger, ReceiptExtraction, Transfer
"""

from dutchie.domain.ledger import Item, Ledger, ManualItem, Person, ReceiptGroup, ReceiptItem
from dutchie.domain.receipt import ExtractedItem, ExtractionStrategy, OcrResult, OcrWord, ReceiptExtraction
from dutchie.domain.settlement import BalanceSheet, PaymentEvent, SettlementReport, Transfer

__all__ = [
    "BalanceSheet",
    "ExtractedItem",
    "ExtractionStrategy",
    "Item",
    "Ledger",
    "ManualItem",
    "OcrResult",
    "OcrWord",
    "PaymentEvent",
    "Person",
    "ReceiptExtraction",
    "ReceiptGroup",
    "ReceiptItem",
    "SettlementReport",
    "Transfer",
]
