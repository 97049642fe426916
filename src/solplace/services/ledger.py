"""Lamport balances, value transfer and rent accounting."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from solplace.core.constants import (
    ACCOUNT_STORAGE_OVERHEAD,
    LAMPORTS_PER_BYTE_YEAR,
    PUBKEY_LENGTH_BYTES,
    RENT_EXEMPTION_YEARS,
)
from solplace.core.errors import InsufficientFunds
from solplace.models.ledger import LedgerAccount

logger = logging.getLogger(__name__)


def minimum_balance(space: int) -> int:
    """Return the rent-exempt deposit for a record of `space` bytes."""
    return (ACCOUNT_STORAGE_OVERHEAD + space) * LAMPORTS_PER_BYTE_YEAR * RENT_EXEMPTION_YEARS


class LedgerService:
    """Balance bookkeeping inside the caller's transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _get(self, identity: bytes, *, for_update: bool = False) -> LedgerAccount | None:
        stmt = select(LedgerAccount).where(LedgerAccount.identity == identity)
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalars().first()

    def _get_or_create(self, identity: bytes) -> LedgerAccount:
        account = self._get(identity, for_update=True)
        if account is None:
            if len(identity) != PUBKEY_LENGTH_BYTES:
                raise ValueError("Ledger identities must be 32 bytes")
            account = LedgerAccount(identity=identity, lamports=0)
            self.session.add(account)
            self.session.flush()
        return account

    def balance(self, identity: bytes) -> int:
        """Return the current balance of `identity` (0 if unknown)."""
        account = self._get(identity)
        return 0 if account is None else account.lamports

    def airdrop(self, identity: bytes, lamports: int) -> int:
        """Credit `identity` out of thin air. Development and test helper."""
        if lamports < 0:
            raise ValueError("Airdrop amount must be non-negative")
        account = self._get_or_create(identity)
        account.lamports += lamports
        self.session.flush()
        logger.debug("Airdropped %d lamports to %s", lamports, identity.hex())
        return account.lamports

    def ensure_funds(self, identity: bytes, amount: int) -> None:
        """Raise `InsufficientFunds` unless `identity` can pay `amount`."""
        available = self.balance(identity)
        if available < amount:
            raise InsufficientFunds(
                f"Insufficient funds: {amount} lamports required, {available} available"
            )

    def debit(self, identity: bytes, amount: int) -> None:
        """Remove `amount` from `identity`, e.g. a rent deposit moving into a record."""
        account = self._get(identity, for_update=True)
        if account is None or account.lamports < amount:
            raise InsufficientFunds()
        account.lamports -= amount

    def transfer(self, source: bytes, destination: bytes, amount: int) -> None:
        """Move `amount` lamports from `source` to `destination`."""
        if amount < 0:
            raise ValueError("Transfer amount must be non-negative")
        self.debit(source, amount)
        self._get_or_create(destination).lamports += amount
