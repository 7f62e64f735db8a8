"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m splitaudit_cli allocate --amount AMOUNT [--currency USDC|USD] [--fx RATE] [--rules RULES] [--json]
    python -m splitaudit_cli audit [--count N] [--random-fx] [--random-splits] [--rules RULES] [--seed N] [--out PATH] [--json]
    python -m splitaudit_cli verify <report_path> [--json]
    python -m splitaudit_cli transfer --amount AMOUNT [--rules RULES] [--rpc-url URL] [--json]
    python -m splitaudit_cli config --init | --show

RULES is inline JSON, a file path, or @path.

Environment Variables:
    SPLITAUDIT_LOG_LEVEL        Log level (default: INFO)
    SPLITAUDIT_LOG_FILE         Also log to this file
    SPLITAUDIT_RPC_URL          Wallet JSON-RPC endpoint for transfers
    SPLITAUDIT_TOKEN_ADDRESS    ERC-20 token contract
    SPLITAUDIT_SEED             Random seed for audit batches
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from splitaudit_cli import __version__
from splitaudit_cli.commands import allocate, audit, transfer, verify
from splitaudit_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_allocation_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--amount", "-a",
        type=str,
        required=True,
        help="Payment amount",
    )
    parser.add_argument(
        "--currency",
        type=str,
        choices=["USDC", "USD"],
        default="USDC",
        help="USDC (accounting unit, default) or USD (converted with --fx)",
    )
    parser.add_argument(
        "--fx",
        type=str,
        default="1.0",
        help="Exchange rate, USDC per USD (default: 1.0)",
    )
    parser.add_argument(
        "--rules", "-r",
        type=str,
        default=None,
        help="Split rules: inline JSON, file path, or @path (default: configured fallback rules)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="splitaudit",
        description="SplitAudit CLI - Allocate split payments, run audit batches, and verify Merkle roots.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./splitaudit.json or ~/.config/splitaudit/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- allocate command ---
    allocate_parser = subparsers.add_parser(
        "allocate",
        help="Allocate one payment among split rules",
        description="Compute the rounding-reconciled ledger for one payment.",
    )
    _add_allocation_args(allocate_parser)
    allocate_parser.set_defaults(func=allocate.allocate_cmd)

    # --- audit command ---
    audit_parser = subparsers.add_parser(
        "audit",
        help="Run an automated allocation test batch",
        description="Allocate N generated payments, hash each run, and compute the batch Merkle root.",
    )
    audit_parser.add_argument(
        "--count", "-n",
        type=int,
        default=None,
        help="Number of test runs (default: from config)",
    )
    audit_parser.add_argument(
        "--random-fx",
        action="store_true",
        default=False,
        help="Draw exchange rates from [0.95, 1.05)",
    )
    audit_parser.add_argument(
        "--random-splits",
        action="store_true",
        default=False,
        help="Draw 3-5 random recipients per run",
    )
    audit_parser.add_argument(
        "--rules", "-r",
        type=str,
        default=None,
        help="Fallback split rules when splits are not randomized",
    )
    audit_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible batch",
    )
    audit_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the batch report JSON to this path",
    )
    audit_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output the full batch report as JSON",
    )
    audit_parser.set_defaults(func=audit.audit_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a saved audit batch report offline",
        description="Recompute record hashes and the Merkle root of a batch report.",
    )
    verify_parser.add_argument(
        "report_path",
        type=str,
        help="Path to a batch report written by 'audit --out'",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON result",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- transfer command ---
    transfer_parser = subparsers.add_parser(
        "transfer",
        help="Allocate a payment and send it through a JSON-RPC wallet",
        description="Live mode: one token transfer per ledger entry, each receipt checked best-effort.",
    )
    _add_allocation_args(transfer_parser)
    transfer_parser.add_argument(
        "--rpc-url",
        type=str,
        default=None,
        help="Wallet JSON-RPC endpoint (default: from config)",
    )
    transfer_parser.set_defaults(func=transfer.transfer_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="splitaudit.json",
        help="Path for config file (default: splitaudit.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (SPLITAUDIT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = args.cli_config
        config_dict = {
            "log_level": config.log_level,
            "log_file": config.log_file,
            "output_format": config.default_output_format,
            **config.runtime.to_dict(),
        }
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    print("Usage: splitaudit config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    args.cli_config = config
    if hasattr(args, "json") and config.default_output_format == "json":
        args.json = True

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if log_level.upper() == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
