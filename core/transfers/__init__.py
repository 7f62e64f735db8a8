"""
Live transfer path.

Pays ledger entries through an external wallet client and applies the
best-effort receipt check to each transfer.
"""

from .verifier import (
    DEFAULT_TOKEN_DECIMALS,
    cents_to_token_units,
    expected_amount_hex,
    verify_transfer_receipt,
)
from .session import (
    TransferSession,
    WalletClient,
    execute_transfer,
    execute_transfers,
)
from .rpc_wallet import JsonRpcWallet, encode_transfer_call, parse_receipt

__all__ = [
    "DEFAULT_TOKEN_DECIMALS",
    "cents_to_token_units",
    "expected_amount_hex",
    "verify_transfer_receipt",
    "TransferSession",
    "WalletClient",
    "execute_transfer",
    "execute_transfers",
    "JsonRpcWallet",
    "encode_transfer_call",
    "parse_receipt",
]
