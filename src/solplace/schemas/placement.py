# src/solplace/schemas/placement.py
"""Placement-related Pydantic schemas."""

from pydantic import BaseModel, Field, field_validator

HEX_KEY_LENGTH = 64
HEX_SIGNATURE_LENGTH = 128


def _check_hex(value: str, length: int) -> str:
    cleaned = value.strip().lower()
    if len(cleaned) != length:
        raise ValueError(f"expected {length} hex characters")
    try:
        bytes.fromhex(cleaned)
    except ValueError as err:
        raise ValueError("invalid hex encoding") from err
    return cleaned


class PlacementCreate(BaseModel):
    """Schema for a signed placement request.

    Coordinates and the logo URI are range-checked by the placement engine so
    callers receive the registry's own error kinds. Derived addresses may be
    omitted, in which case the server derives them.
    """

    lat: int = Field(..., description="Latitude in micro-degrees")
    lng: int = Field(..., description="Longitude in micro-degrees")
    token_mint: str = Field(..., description="Hex-encoded token mint address")
    logo_uri: str = Field(..., description="Resolved logo URL")
    placer: str = Field(..., description="Hex-encoded Ed25519 public key of the payer")
    client_nonce: str = Field(..., min_length=1, max_length=128)
    signature: str = Field(..., description="Hex Ed25519 signature over the placement message")
    record_address: str | None = None
    cooldown_address: str | None = None
    token_mint_account: str | None = None
    treasury: str | None = None

    @field_validator("token_mint", "placer")
    @classmethod
    def _validate_key(cls, value: str) -> str:
        return _check_hex(value, HEX_KEY_LENGTH)

    @field_validator("record_address", "cooldown_address", "token_mint_account", "treasury")
    @classmethod
    def _validate_optional_key(cls, value: str | None) -> str | None:
        return None if value is None else _check_hex(value, HEX_KEY_LENGTH)

    @field_validator("signature")
    @classmethod
    def _validate_signature(cls, value: str) -> str:
        return _check_hex(value, HEX_SIGNATURE_LENGTH)


class PlacementReceiptResponse(BaseModel):
    """Outcome of a successful placement."""

    fee_paid: int
    is_overwrite: bool
    timestamp: int
    overwrite_count: int
    record_address: str
    cluster_id: int | None = None


class PlacementResponse(BaseModel):
    """A placement as stored at a coordinate."""

    coordinates: list[int]
    token_mint: str
    logo_uri: str
    logo_hash: str
    placed_by: str
    placed_at: int
    overwrite_count: int
    bump: int | None = None
    cluster_id: int | None = None


class FeeQuoteResponse(BaseModel):
    amount: int
    is_overwrite: bool
    base_fee: int
    multiplier: int


class CooldownResponse(BaseModel):
    user: str
    last_placement: int
    placement_count: int
    bump: int
    remaining_cooldown: int
    can_place: bool


class ClusterResponse(BaseModel):
    cluster_id: int
    bounds: list[int]
    cell_count: int
    cells: list[PlacementResponse]
    last_updated: int
    bump: int
    max_cells: int


class LeaderboardEntry(BaseModel):
    rank: int
    user: str
    placement_count: int
    last_placement: int
