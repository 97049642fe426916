"""Data access helpers for records stored at derived addresses."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from solplace.models.account import RecordAccount

__all__ = ["AccountRepository"]


class AccountRepository:
    """Thin wrapper around database access for record accounts."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get(self, address: bytes, *, for_update: bool = False) -> RecordAccount | None:
        """Return the record stored at `address`, if any.

        With `for_update` the row is locked for the rest of the host
        transaction on backends that support row locks.
        """
        stmt = select(RecordAccount).where(RecordAccount.address == address)
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalars().first()

    def list_by_kind(self, kind: str) -> list[RecordAccount]:
        """Return every record of the given family."""
        result = self.session.execute(
            select(RecordAccount).where(RecordAccount.kind == kind).order_by(RecordAccount.address)
        )
        return list(result.scalars())

    def create(
        self,
        *,
        address: bytes,
        kind: str,
        owner: bytes,
        data: bytes,
        lamports: int,
    ) -> RecordAccount:
        """Allocate a new record sized to `data`."""
        account = RecordAccount(
            address=address,
            kind=kind,
            owner=owner,
            lamports=lamports,
            space=len(data),
            data=data,
        )
        self.session.add(account)
        return account

    def write(self, account: RecordAccount, data: bytes) -> None:
        """Overwrite a record's bytes in place; the footprint never changes."""
        if len(data) != account.space:
            raise ValueError(
                f"Record at {account.address_hex} is {account.space} bytes, got {len(data)}"
            )
        account.data = data
