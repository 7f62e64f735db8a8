"""
CLI Audit Command

Run an automated batch of allocation tests, hash every run, and commit
the batch to a Merkle root.

Usage:
    splitaudit audit --count 25 --random-fx --random-splits --seed 7 --out batch.json
    splitaudit audit --count 5 --rules @rules.json --json
"""

from __future__ import annotations

import json
import logging
import random
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.allocation.allocator import parse_split_rules
from core.audit.batch import run_batch
from core.schemas.audit import AuditBatch, BatchRequest
from core.schemas.errors import InputException

from splitaudit_cli.commands.allocate import load_rules_arg


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def batch_request_from_args(args: Namespace) -> BatchRequest:
    """Merge CLI flags over the configured batch defaults."""
    defaults = args.cli_config.runtime.batch
    rules = parse_split_rules(load_rules_arg(args.rules, defaults.fallback_rules))

    count = args.count if args.count is not None else defaults.test_count
    try:
        return BatchRequest(
            test_count=count,
            randomize_exchange_rate=args.random_fx or defaults.randomize_exchange_rate,
            randomize_splits=args.random_splits or defaults.randomize_splits,
            fallback_rules=rules,
        )
    except ValidationError as e:
        raise InputException(
            f"Invalid batch request: {e.errors()[0]['msg']}",
            field_path="count",
        ) from e


def save_report(report: dict[str, Any], out: str) -> Path:
    """Write a batch report as indented JSON."""
    path = Path(out)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report, indent=2) + "\n", encoding="utf-8")
    return path


def print_batch_human(batch: AuditBatch, saved_to: Path | None = None) -> None:
    print(f"total_tests: {batch.total_tests}")
    print(f"rounding_issues: {batch.rounding_issues}")
    print(f"merkle_root: {batch.merkle_root}")
    if batch.records:
        print("\naudits:")
        for record in batch.records[:20]:
            marker = " (corrected)" if record.rounding_correction else ""
            print(f"  #{record.sequence_number} {record.content_hash}{marker}")
        if len(batch.records) > 20:
            print(f"  ... {len(batch.records) - 20} more")
    if saved_to:
        print(f"\nsaved_to: {saved_to}")


def audit_cmd(args: Namespace) -> int:
    """
    Execute the audit command.

    Returns:
        Exit code
    """
    try:
        request = batch_request_from_args(args)
    except InputException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not request.randomize_splits and not request.fallback_rules and request.test_count:
        logger.warning("No fallback split rules configured; ledgers will be empty")

    seed = args.seed if args.seed is not None else args.cli_config.runtime.batch.seed
    batch = run_batch(request, rng=random.Random(seed))
    report = batch.to_report()

    saved_to = save_report(report, args.out) if args.out else None

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print_batch_human(batch, saved_to)

    return EXIT_SUCCESS
