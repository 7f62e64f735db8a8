"""
CLI Allocate Command

Allocate one payment among split rules and print the reconciled ledger.

Usage:
    splitaudit allocate --amount 100 --rules '[{"address": "0xA", "percent": 50}, ...]'
    splitaudit allocate --amount 100 --currency USD --fx 0.98 --rules @rules.json --json
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from core.allocation.allocator import allocate_request, build_request
from core.schemas.allocation import AllocationRequest, Ledger
from core.schemas.errors import InputException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_rules_arg(value: str | None, fallback: list[dict[str, Any]] | None = None) -> Any:
    """
    Resolve a --rules argument.

    "@path" or an existing file path is read from disk; anything else is
    treated as inline JSON. None falls back to the configured rules.
    """
    if value is None:
        return list(fallback or [])

    candidate = value[1:] if value.startswith("@") else value
    path = Path(candidate)
    if value.startswith("@") or (value.lstrip()[:1] not in ("[", "{") and path.is_file()):
        if not path.is_file():
            raise InputException(f"Rules file not found: {candidate}", field_path="rules")
        return path.read_text(encoding="utf-8")
    return value


def request_from_args(args: Namespace) -> AllocationRequest:
    """Build a validated AllocationRequest from parsed CLI arguments."""
    fallback = args.cli_config.runtime.batch.fallback_rules
    rules = load_rules_arg(args.rules, fallback)
    return build_request(args.amount, args.currency, args.fx, rules)


def print_ledger_human(ledger: Ledger) -> None:
    """Print a payment breakdown."""
    print("--- Payment Breakdown ---")
    print(f"USDC Amount: {ledger.usdc_amount}")
    print(f"Total Cents: {ledger.total_cents}")
    print(f"Rounding Correction: {ledger.rounding_correction}")
    for entry in ledger.entries:
        print(f"{entry.address}: {entry.usdc} USDC ({entry.cents} cents)")


def allocate_cmd(args: Namespace) -> int:
    """
    Execute the allocate command.

    Returns:
        Exit code
    """
    try:
        request = request_from_args(args)
    except InputException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        for err in e.details.get("errors", []):
            print(f"  {err['loc']}: {err['msg']}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not request.rules:
        logger.warning("No split rules given; nothing will be allocated")

    ledger = allocate_request(request)

    if args.json:
        print(json.dumps(ledger.to_report(), indent=2))
    else:
        print_ledger_human(ledger)

    return EXIT_SUCCESS
