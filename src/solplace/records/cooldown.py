"""Per-participant rate-limit record."""

from __future__ import annotations

from dataclasses import dataclass

from solplace.core.constants import PUBKEY_LENGTH_BYTES
from solplace.records.layout import (
    DISCRIMINATOR_LENGTH,
    LayoutReader,
    LayoutWriter,
    account_discriminator,
)


@dataclass(slots=True)
class CooldownRecord:
    """Last placement time and running placement count of one participant.

    ``last_placement == 0`` means the participant has never placed.
    """

    TYPE_NAME = "UserCooldown"
    # discriminator + user + last_placement + placement_count + bump
    SIZE = DISCRIMINATOR_LENGTH + 32 + 8 + 4 + 1

    user: bytes
    last_placement: int = 0
    placement_count: int = 0
    bump: int = 0

    @classmethod
    def discriminator(cls) -> bytes:
        return account_discriminator(cls.TYPE_NAME)

    def encode(self) -> bytes:
        return (
            LayoutWriter()
            .raw(self.discriminator())
            .fixed(self.user, PUBKEY_LENGTH_BYTES)
            .i64(self.last_placement)
            .u32(self.placement_count)
            .u8(self.bump)
            .getvalue(self.SIZE)
        )

    @classmethod
    def decode(cls, data: bytes) -> CooldownRecord:
        reader = LayoutReader(data)
        reader.expect_discriminator(cls.discriminator())
        return cls(
            user=reader.fixed(PUBKEY_LENGTH_BYTES),
            last_placement=reader.i64(),
            placement_count=reader.u32(),
            bump=reader.u8(),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "user": self.user.hex(),
            "last_placement": self.last_placement,
            "placement_count": self.placement_count,
            "bump": self.bump,
        }
