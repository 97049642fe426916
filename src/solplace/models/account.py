"""SQLAlchemy model for records stored at derived addresses."""

from sqlalchemy import BigInteger, LargeBinary, Text
from sqlalchemy.orm import Mapped, mapped_column

from solplace.db.session import Base

KIND_PLACEMENT = "placement"
KIND_CLUSTER = "cluster"
KIND_COOLDOWN = "cooldown"


class RecordAccount(Base):
    """Opaque fixed-size record owned by the registry program.

    The row is addressed only by its derived key; `data` holds the exact
    binary layout of a placement, cluster or cooldown record, padded to the
    space allocated when the row was created.
    """

    __tablename__ = "record_account"

    address: Mapped[bytes] = mapped_column(LargeBinary(32), primary_key=True)
    # Record family, used for listing queries such as the leaderboard.
    kind: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    owner: Mapped[bytes] = mapped_column(LargeBinary(32), nullable=False)
    # Rent deposit paid by the creator when the record was allocated.
    lamports: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    space: Mapped[int] = mapped_column(BigInteger, nullable=False)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    @property
    def address_hex(self) -> str:
        return self.address.hex()
