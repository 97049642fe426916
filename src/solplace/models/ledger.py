"""SQLAlchemy model for participant and treasury balances."""

from sqlalchemy import BigInteger, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from solplace.db.session import Base


class LedgerAccount(Base):
    """Lamport balance held by an identity."""

    __tablename__ = "ledger_account"

    identity: Mapped[bytes] = mapped_column(LargeBinary(32), primary_key=True)
    lamports: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    @property
    def identity_hex(self) -> str:
        return self.identity.hex()
