"""
Split allocation.

Converts a payment into a rounding-reconciled ledger of integer cents.
"""
from .allocator import (
    allocate,
    allocate_request,
    build_request,
    check_conservation,
    format_usdc,
    parse_split_rules,
    round_half_away,
    to_accounting_units,
)

__all__ = [
    "allocate",
    "allocate_request",
    "build_request",
    "check_conservation",
    "format_usdc",
    "parse_split_rules",
    "round_half_away",
    "to_accounting_units",
]
