"""
Live Transfer Session

The live-transfer path pays each ledger entry through an external wallet
client and checks the resulting receipt with the best-effort verifier.

Wallet state (client handle, sending account, token settings) lives on an
explicit TransferSession passed into execute_transfers; the allocation and
audit code never touches it.

Failure policy:
- A WalletException during broadcast or receipt fetch becomes a warning on
  that entry's TransferOutcome; remaining entries are still paid.
- An unverified receipt is a warning, not an error.
- Nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from core.config.runtime import TokenConfig
from core.schemas.allocation import Ledger
from core.schemas.errors import ErrorCodes, WalletException
from core.schemas.transfer import TransferOutcome, TransferReceipt

from .verifier import cents_to_token_units, verify_transfer_receipt


logger = logging.getLogger(__name__)


@runtime_checkable
class WalletClient(Protocol):
    """Interface of the external wallet/chain client."""

    def request_accounts(self) -> list[str]:
        """Return the accounts the wallet exposes, preferred account first."""
        ...

    def submit_transfer(
        self,
        sender: str,
        token_address: str,
        recipient: str,
        amount_units: int,
    ) -> str:
        """Broadcast a token transfer and return its transaction hash."""
        ...

    def get_transaction_receipt(self, transaction_hash: str) -> Optional[TransferReceipt]:
        """Fetch a receipt, or None if the transaction is not yet mined."""
        ...


@dataclass
class TransferSession:
    """A connected wallet plus the account and token it pays from."""

    wallet: WalletClient
    account: str
    token: TokenConfig

    @classmethod
    def connect(cls, wallet: WalletClient, token: TokenConfig) -> "TransferSession":
        """
        Ask the wallet for accounts and bind the first one.

        Raises:
            WalletException: If the wallet exposes no accounts.
        """
        accounts = wallet.request_accounts()
        if not accounts:
            raise WalletException("Wallet returned no accounts", method="request_accounts")
        logger.info(f"Connected: {accounts[0]}")
        return cls(wallet=wallet, account=accounts[0], token=token)


def execute_transfer(
    session: TransferSession,
    recipient: str,
    cents: int,
) -> TransferOutcome:
    """Pay one recipient and verify the receipt."""
    amount_units = cents_to_token_units(cents, session.token.decimals)
    outcome = TransferOutcome(recipient=recipient, cents=cents, amount_units=amount_units)

    try:
        tx_hash = session.wallet.submit_transfer(
            session.account,
            session.token.address,
            recipient,
            amount_units,
        )
    except WalletException as e:
        logger.warning(f"Transfer to {recipient} was not submitted: {e.message}")
        outcome.warning = f"Transfer not submitted: {e.message}"
        outcome.warning_code = e.code
        return outcome

    outcome.transaction_hash = tx_hash

    try:
        receipt = session.wallet.get_transaction_receipt(tx_hash)
    except WalletException as e:
        logger.warning(f"Receipt for {tx_hash} could not be fetched: {e.message}")
        outcome.warning = f"Receipt unavailable: {e.message}"
        outcome.warning_code = e.code
        return outcome

    outcome.verified = verify_transfer_receipt(
        receipt, recipient, cents, session.token.decimals
    )
    if not outcome.verified:
        logger.warning(f"TX {tx_hash} to {recipient} could not be verified")
        outcome.warning = "Transfer unverified"
        outcome.warning_code = ErrorCodes.UNVERIFIED_TRANSFER

    return outcome


def execute_transfers(session: TransferSession, ledger: Ledger) -> list[TransferOutcome]:
    """Pay every ledger entry in order, one transfer each."""
    return [
        execute_transfer(session, entry.address, entry.cents)
        for entry in ledger.entries
    ]
