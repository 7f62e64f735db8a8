"""
CLI Verify Command

Verify a saved audit batch report offline: recompute every record's
content hash and the batch Merkle root and compare them to the stored
values.

Usage:
    splitaudit verify batch.json [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.audit.recorder import verify_batch
from core.schemas.audit import BatchVerification
from core.schemas.errors import InputException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def print_verification_human(path: Path, result: BatchVerification) -> None:
    print(f"report: {path}")
    print(f"records: {result.total_records}")
    print(f"claimed_root: {result.claimed_root}")
    print(f"computed_root: {result.computed_root}")
    print(f"ok: {str(result.ok).lower()}")
    if result.errors:
        print(f"\nerrors ({len(result.errors)}):")
        for err in result.errors[:10]:
            print(f"  ✗ [{err.code}] {err.message}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code (2 when the report fails verification)
    """
    path = Path(args.report_path)
    if not path.exists():
        print(f"Error: Report not found: {path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        report = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"Error: Report is not valid JSON: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not isinstance(report, dict):
        print("Error: Report must be a JSON object", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        result = verify_batch(report)
    except InputException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        print_verification_human(path, result)

    if result.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
