"""
CLI Transfer Command (live mode)

Allocate a payment, then pay each ledger entry through a JSON-RPC wallet
and check every receipt with the best-effort verifier. Unverified or
failed transfers are reported as warnings; the run continues.

Usage:
    splitaudit transfer --amount 100 --rules @rules.json --rpc-url http://127.0.0.1:8545
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from core.allocation.allocator import allocate_request
from core.schemas.errors import InputException, WalletException
from core.schemas.transfer import TransferOutcome
from core.transfers.rpc_wallet import JsonRpcWallet
from core.transfers.session import TransferSession, execute_transfers

from splitaudit_cli.commands.allocate import print_ledger_human, request_from_args


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def print_outcomes_human(outcomes: list[TransferOutcome]) -> None:
    for outcome in outcomes:
        print(f"TX: {outcome.transaction_hash or '(not submitted)'}")
        print(f"Verified: {'YES' if outcome.verified else 'NO (WARNING)'}")
        if outcome.warning:
            print(f"Warning: {outcome.warning}")
        print("")


def transfer_cmd(args: Namespace) -> int:
    """
    Execute the transfer command.

    Returns:
        Exit code
    """
    runtime = args.cli_config.runtime

    try:
        request = request_from_args(args)
    except InputException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    endpoint = args.rpc_url or runtime.rpc.endpoint
    if not endpoint:
        print("Error: No RPC endpoint (use --rpc-url or SPLITAUDIT_RPC_URL)", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    ledger = allocate_request(request)
    if not args.json:
        print_ledger_human(ledger)
        print("")

    with JsonRpcWallet(endpoint, timeout=runtime.rpc.timeout, proxy=runtime.rpc.proxy) as wallet:
        try:
            session = TransferSession.connect(wallet, runtime.token)
        except WalletException as e:
            print(f"Error: Wallet connection failed: {e.message}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        outcomes = execute_transfers(session, ledger)

    if args.json:
        print(json.dumps(
            {
                "ledger": ledger.to_report(),
                "account": session.account,
                "transfers": [o.model_dump(mode="json") for o in outcomes],
            },
            indent=2,
        ))
    else:
        print_outcomes_human(outcomes)

    unverified = sum(1 for o in outcomes if not o.verified)
    if unverified:
        logger.warning(f"{unverified} of {len(outcomes)} transfers unverified")

    return EXIT_SUCCESS
