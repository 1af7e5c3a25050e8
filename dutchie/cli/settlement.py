"""Settlement command handler used by the unified CLI."""

import argparse
import json
from pathlib import Path

from dutchie.application.settlement import run_settlement
from dutchie.domain.ledger import Ledger
from dutchie.settlement import format_settlement_report, report_to_dict


def cmd_settle(args: argparse.Namespace) -> int:
    """Settle a ledger snapshot (JSON) and print who pays whom."""
    path = Path(args.ledger)
    if not path.exists():
        print(f"Error: ledger file not found: {path}")
        return 1

    try:
        snapshot = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(snapshot, dict):
            raise ValueError("ledger snapshot must be a JSON object")
        ledger = Ledger.from_dict(snapshot)
    except (json.JSONDecodeError, KeyError, ValueError) as exc:
        print(f"Error: invalid ledger file {path}: {exc}")
        return 1

    report = run_settlement(ledger)
    if args.json:
        print(json.dumps(report_to_dict(report), indent=2))
    else:
        print(format_settlement_report(report, ledger.display_name))
    return 0
