# src/solplace/models/replay_protection.py
"""Replay protection for signed placement requests."""


from sqlalchemy import BigInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from solplace.db.session import Base


class PlacementNonce(Base):
    """A client nonce that already authorised one committed placement.

    Rows are only written in the same transaction as the placement they
    authorised, so a rejected attempt leaves its nonce reusable.
    """

    __tablename__ = "placement_nonce"

    # (placer pubkey, BLAKE3 of the client nonce) -> existence means "already used".
    pubkey_hex: Mapped[str] = mapped_column(Text, primary_key=True)
    nonce_hash_hex: Mapped[str] = mapped_column(Text, primary_key=True)
    # Unix time of the placement the nonce authorised.
    used_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
