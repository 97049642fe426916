"""SQLAlchemy model for emitted placement events."""

from datetime import datetime

from sqlalchemy import CHAR, BigInteger, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from solplace.db.session import Base
from solplace.db.time import utcnow


class PlacementEventLog(Base):
    """Outbox row written in the same transaction as the placement it describes."""

    __tablename__ = "placement_event"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    event_type: Mapped[str] = mapped_column(Text, nullable=False)  # e.g. 'LogoPlacedEvent'
    event_hash: Mapped[str] = mapped_column(CHAR(64), unique=True, nullable=False)  # BLAKE3 of payload
    payload: Mapped[str] = mapped_column(Text, nullable=False)  # canonical JSON
    placed_at: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
