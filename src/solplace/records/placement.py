"""Flat-strategy record: one placement per coordinate."""

from __future__ import annotations

from dataclasses import dataclass, field

from solplace.core.constants import DIGEST_LENGTH_BYTES, MAX_LOGO_URI_LENGTH, PUBKEY_LENGTH_BYTES
from solplace.records.layout import (
    DISCRIMINATOR_LENGTH,
    LayoutReader,
    LayoutWriter,
    account_discriminator,
)

U16_MAX = 0xFFFF
EMPTY_KEY = bytes(PUBKEY_LENGTH_BYTES)


@dataclass(slots=True)
class PlacementRecord:
    """The latest placement at a single coordinate."""

    TYPE_NAME = "LogoPlacement"
    # discriminator + coordinates + token_mint + uri prefix + uri + logo_hash
    # + placed_by + placed_at + overwrite_count + bump
    SIZE = (
        DISCRIMINATOR_LENGTH + 8 + 32 + 4 + MAX_LOGO_URI_LENGTH + 32 + 32 + 8 + 2 + 1
    )

    lat: int
    lng: int
    token_mint: bytes = EMPTY_KEY
    logo_uri: str = ""
    logo_hash: bytes = bytes(DIGEST_LENGTH_BYTES)
    placed_by: bytes = EMPTY_KEY
    placed_at: int = 0
    overwrite_count: int = 0
    bump: int = field(default=0)

    @property
    def coordinates(self) -> tuple[int, int]:
        return self.lat, self.lng

    @classmethod
    def discriminator(cls) -> bytes:
        return account_discriminator(cls.TYPE_NAME)

    def encode(self) -> bytes:
        """Serialize to the fixed record footprint."""
        return (
            LayoutWriter()
            .raw(self.discriminator())
            .i32(self.lat)
            .i32(self.lng)
            .fixed(self.token_mint, PUBKEY_LENGTH_BYTES)
            .string(self.logo_uri)
            .fixed(self.logo_hash, DIGEST_LENGTH_BYTES)
            .fixed(self.placed_by, PUBKEY_LENGTH_BYTES)
            .i64(self.placed_at)
            .u16(self.overwrite_count)
            .u8(self.bump)
            .getvalue(self.SIZE)
        )

    @classmethod
    def decode(cls, data: bytes) -> PlacementRecord:
        reader = LayoutReader(data)
        reader.expect_discriminator(cls.discriminator())
        return cls(
            lat=reader.i32(),
            lng=reader.i32(),
            token_mint=reader.fixed(PUBKEY_LENGTH_BYTES),
            logo_uri=reader.string(MAX_LOGO_URI_LENGTH),
            logo_hash=reader.fixed(DIGEST_LENGTH_BYTES),
            placed_by=reader.fixed(PUBKEY_LENGTH_BYTES),
            placed_at=reader.i64(),
            overwrite_count=reader.u16(),
            bump=reader.u8(),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "coordinates": [self.lat, self.lng],
            "token_mint": self.token_mint.hex(),
            "logo_uri": self.logo_uri,
            "logo_hash": self.logo_hash.hex(),
            "placed_by": self.placed_by.hex(),
            "placed_at": self.placed_at,
            "overwrite_count": self.overwrite_count,
            "bump": self.bump,
        }
