"""Immutable placement configuration.

`PlacementConfig` bundles the fixed protocol constants so the placement
engine, record stores and query services receive them by injection rather
than reading module globals.

Example:
    from solplace.core.config import DEFAULT_CONFIG
    fee = DEFAULT_CONFIG.base_fee * DEFAULT_CONFIG.overwrite_multiplier
"""

from __future__ import annotations

from dataclasses import dataclass, field

from solplace.core import constants


@dataclass(frozen=True, slots=True)
class PlacementConfig:
    """Fixed registry parameters.

    Attributes:
        program_id: Identity that owns every derived record (32 bytes).
        treasury: Sole destination of collected fees (32 bytes).
        base_fee: Fee for a first placement at a coordinate, in lamports.
        overwrite_multiplier: Factor applied to `base_fee` for overwrites.
        cooldown_period: Seconds a participant must wait between placements.
        max_logo_uri_length: Maximum UTF-8 byte length of a logo URI.
        cluster_resolution: Bucket edge length in micro-degrees.
        max_cells: Capacity of a single cluster record.
    """

    program_id: bytes = field(default=bytes.fromhex(constants.PROGRAM_ID_HEX))
    treasury: bytes = field(default=bytes.fromhex(constants.TREASURY_ADDRESS_HEX))
    base_fee: int = constants.BASE_PLACEMENT_FEE
    overwrite_multiplier: int = constants.OVERWRITE_MULTIPLIER
    cooldown_period: int = constants.COOLDOWN_PERIOD
    min_latitude: int = constants.MIN_LATITUDE
    max_latitude: int = constants.MAX_LATITUDE
    min_longitude: int = constants.MIN_LONGITUDE
    max_longitude: int = constants.MAX_LONGITUDE
    max_logo_uri_length: int = constants.MAX_LOGO_URI_LENGTH
    cluster_resolution: int = constants.CLUSTER_RESOLUTION
    max_cells: int = constants.MAX_CELLS_PER_CLUSTER

    def __post_init__(self) -> None:
        if len(self.program_id) != constants.PUBKEY_LENGTH_BYTES:
            raise ValueError("program_id must be 32 bytes")
        if len(self.treasury) != constants.PUBKEY_LENGTH_BYTES:
            raise ValueError("treasury must be 32 bytes")
        if self.max_cells <= 0:
            raise ValueError("max_cells must be positive")

    @property
    def overwrite_fee(self) -> int:
        """Return the fee charged when a coordinate is already occupied."""
        return self.base_fee * self.overwrite_multiplier

    def public_snapshot(self) -> dict[str, object]:
        """Return the configuration as JSON-friendly primitives."""
        return {
            "program_id": self.program_id.hex(),
            "treasury": self.treasury.hex(),
            "base_fee": self.base_fee,
            "overwrite_multiplier": self.overwrite_multiplier,
            "overwrite_fee": self.overwrite_fee,
            "cooldown_period": self.cooldown_period,
            "latitude_bounds": [self.min_latitude, self.max_latitude],
            "longitude_bounds": [self.min_longitude, self.max_longitude],
            "max_logo_uri_length": self.max_logo_uri_length,
            "cluster_resolution": self.cluster_resolution,
            "max_cells": self.max_cells,
        }


DEFAULT_CONFIG = PlacementConfig()
