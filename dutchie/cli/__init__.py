"""Unified command-line interface for dutchie.

Usage:
    dutchie extract <file|-> [--strategy itemized|prices_only] [--words]
    dutchie scan <image> [--ocr-url URL] [--strategy ...]
    dutchie settle <ledger.json>
    dutchie serve [--host] [--port]
"""
