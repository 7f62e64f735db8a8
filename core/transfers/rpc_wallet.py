"""
JSON-RPC Wallet

WalletClient implementation that talks to an Ethereum JSON-RPC endpoint
holding an unlocked sending account (a local dev node or a signing proxy).
Key management stays with the node.

The ERC-20 transfer is sent as an opaque calldata blob:
    0xa9059cbb | recipient (32-byte word) | amount (32-byte word)
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from core.crypto.hashing import to_hex
from core.schemas.errors import WalletException
from core.schemas.transfer import ReceiptLog, TransferReceipt


logger = logging.getLogger(__name__)

# keccak256("transfer(address,uint256)")[:4]
TRANSFER_SELECTOR = "a9059cbb"

_WORD_HEX_CHARS = 64


def encode_transfer_call(recipient: str, amount_units: int) -> str:
    """
    Build calldata for transfer(recipient, amount_units).

    Raises:
        WalletException: If the recipient is not a 20-byte hex address or
            the amount is negative.
    """
    address = recipient[2:] if recipient.startswith("0x") else recipient
    if len(address) != 40 or any(c not in "0123456789abcdefABCDEF" for c in address):
        raise WalletException(f"Not a 20-byte hex address: {recipient}", method="transfer")
    if amount_units < 0:
        raise WalletException(f"Negative transfer amount: {amount_units}", method="transfer")

    return (
        "0x"
        + TRANSFER_SELECTOR
        + address.lower().rjust(_WORD_HEX_CHARS, "0")
        + format(amount_units, "x").rjust(_WORD_HEX_CHARS, "0")
    )


def parse_receipt(raw: Optional[dict[str, Any]]) -> Optional[TransferReceipt]:
    """
    Convert an eth_getTransactionReceipt result into a TransferReceipt.

    Raises:
        WalletException: If the node returned a receipt of the wrong shape.
    """
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise WalletException(
            f"Receipt is not an object: {type(raw).__name__}",
            method="eth_getTransactionReceipt",
        )

    try:
        status = raw.get("status")
        if isinstance(status, str):
            ok = int(status, 16) == 1
        else:
            ok = bool(status)

        raw_logs = raw.get("logs") or []
        if not isinstance(raw_logs, list) or not all(isinstance(log, dict) for log in raw_logs):
            raise ValueError("logs must be a list of objects")

        logs = [
            ReceiptLog(topics=list(log.get("topics") or []), data=log.get("data") or "")
            for log in raw_logs
        ]
        return TransferReceipt(status=ok, logs=logs)
    except (ValueError, TypeError, ValidationError) as e:
        raise WalletException(
            f"Malformed receipt: {e}",
            method="eth_getTransactionReceipt",
        ) from e


class JsonRpcWallet:
    """
    Wallet client over JSON-RPC.

    Usage:
        wallet = JsonRpcWallet("http://127.0.0.1:8545", timeout=30)
        session = TransferSession.connect(wallet, config.token)
        outcomes = execute_transfers(session, ledger)
    """

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = 30.0,
        proxy: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.proxy = proxy
        self._session = session
        self._ids = itertools.count(1)

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            if self.proxy:
                self._session.proxies = {"http": self.proxy, "https": self.proxy}
        return self._session

    def call(self, method: str, params: Optional[list[Any]] = None) -> Any:
        """
        Issue one JSON-RPC request and return its result.

        Raises:
            WalletException: On transport failure, HTTP error status,
                malformed response, or a JSON-RPC error object.
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        logger.debug(f"RPC {method} -> {self.endpoint}")

        try:
            response = self._get_session().post(
                self.endpoint, json=payload, timeout=self.timeout
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise WalletException(f"RPC request failed: {e}", method=method) from e
        except ValueError as e:
            raise WalletException(f"RPC response is not JSON: {e}", method=method) from e

        if not isinstance(body, dict):
            raise WalletException("RPC response is not an object", method=method)

        if body.get("error"):
            error = body["error"]
            message = error.get("message", "unknown error") if isinstance(error, dict) else str(error)
            raise WalletException(
                f"RPC error: {message}",
                method=method,
                details={"rpc_error": error},
            )

        return body.get("result")

    def request_accounts(self) -> list[str]:
        result = self.call("eth_accounts")
        return list(result or [])

    def submit_transfer(
        self,
        sender: str,
        token_address: str,
        recipient: str,
        amount_units: int,
    ) -> str:
        tx = {
            "from": sender,
            "to": token_address,
            "value": to_hex(0),
            "data": encode_transfer_call(recipient, amount_units),
        }
        tx_hash = self.call("eth_sendTransaction", [tx])
        if not isinstance(tx_hash, str):
            raise WalletException("eth_sendTransaction returned no hash", method="eth_sendTransaction")
        return tx_hash

    def get_transaction_receipt(self, transaction_hash: str) -> Optional[TransferReceipt]:
        return parse_receipt(self.call("eth_getTransactionReceipt", [transaction_hash]))

    def close(self) -> None:
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "JsonRpcWallet":
        return self

    def __exit__(self, *args) -> None:
        self.close()
