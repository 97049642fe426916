"""SQLAlchemy model for known token mints."""

from sqlalchemy import BigInteger, Boolean, LargeBinary, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column

from solplace.db.session import Base


class TokenMint(Base):
    """A token mint that placements may reference."""

    __tablename__ = "token_mint"

    address: Mapped[bytes] = mapped_column(LargeBinary(32), primary_key=True)
    decimals: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    supply: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    is_initialized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    mint_authority: Mapped[bytes | None] = mapped_column(LargeBinary(32), nullable=True)
