"""CLI subcommands."""

from splitaudit_cli.commands import allocate, audit, transfer, verify

__all__ = ["allocate", "audit", "transfer", "verify"]
