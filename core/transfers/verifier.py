"""
Transfer Verifier

Best-effort check that a transaction receipt shows the expected token
transfer. This is a heuristic, NOT a proof: it passes when any log of a
successful receipt mentions the recipient address in a topic or the
expected amount in its data, using plain case-sensitive substring
matching. A False result means "unverified", never "did not happen".
"""

from __future__ import annotations

from typing import Optional

from core.schemas.errors import InputException
from core.schemas.transfer import TransferReceipt


# USDC and most stablecoins
DEFAULT_TOKEN_DECIMALS = 6


def cents_to_token_units(cents: int, decimals: int = DEFAULT_TOKEN_DECIMALS) -> int:
    """
    Convert accounting-unit cents to the token's smallest unit.

    Example:
        >>> cents_to_token_units(1234, 6)
        12340000
    """
    if decimals < 2:
        raise InputException(
            f"Token decimals must be at least 2 to represent cents, got {decimals}",
            field_path="decimals",
        )
    return cents * 10 ** (decimals - 2)


def expected_amount_hex(cents: int, decimals: int = DEFAULT_TOKEN_DECIMALS) -> str:
    """Unprefixed lowercase hex of the expected on-chain amount."""
    return format(cents_to_token_units(cents, decimals), "x")


def verify_transfer_receipt(
    receipt: Optional[TransferReceipt],
    expected_recipient: str,
    expected_cents: int,
    decimals: int = DEFAULT_TOKEN_DECIMALS,
) -> bool:
    """
    Decide whether a receipt plausibly shows the expected transfer.

    Returns True only if the receipt exists, its status is successful, it
    has at least one log, and some log either has a topic containing the
    recipient address without its 2-character prefix, or has data
    containing the hex-encoded expected amount.
    """
    if receipt is None or not receipt.status:
        return False

    if not receipt.logs:
        return False

    recipient_fragment = expected_recipient[2:]
    amount_fragment = expected_amount_hex(expected_cents, decimals)

    return any(
        any(recipient_fragment in topic for topic in log.topics)
        or amount_fragment in log.data
        for log in receipt.logs
    )
