"""Deterministic record addressing.

Records live at program-derived addresses: a SHA-256 over the derivation
seeds, a one-byte bump, the owning program id and a fixed marker. The bump is
searched downward from 255 and the first candidate that is *not* a valid
Ed25519 point wins, so no private key can ever sign for a record address.
Anyone holding the same seeds and program id reproduces the same address and
bump.
"""

from __future__ import annotations

import hashlib
from typing import NamedTuple

from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.constants import (
    CLUSTER_SEED,
    COOLDOWN_SEED,
    LOGO_PLACEMENT_SEED,
    PUBKEY_LENGTH_BYTES,
)
from solplace.core.coordinates import cluster_id_for
from solplace.core.errors import InvalidCluster

PDA_MARKER = b"ProgramDerivedAddress"
MAX_SEED_LENGTH = 32
MAX_SEEDS = 16
MAX_CLUSTER_ID = 2**64 - 1

# Curve25519 field prime and the twisted Edwards `d` constant.
_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P


class DerivedAddress(NamedTuple):
    """A derived record key and the bump that produced it."""

    key: bytes
    bump: int

    @property
    def hex(self) -> str:
        return self.key.hex()


class AddressDerivationError(ValueError):
    """Raised when seeds are malformed or no valid bump exists."""


def is_on_curve(candidate: bytes) -> bool:
    """Return True if `candidate` decompresses to a point on Ed25519.

    Mirrors the lenient decompression check: the sign bit is ignored and the
    y coordinate is reduced modulo p. A point exists iff
    (y^2 - 1) / (d*y^2 + 1) is a square (or zero) in the field.
    """
    if len(candidate) != PUBKEY_LENGTH_BYTES:
        return False
    y = (int.from_bytes(candidate, "little") & ((1 << 255) - 1)) % _P
    y2 = y * y % _P
    u = (y2 - 1) % _P
    v = (_D * y2 + 1) % _P
    x2 = u * pow(v, _P - 2, _P) % _P
    if x2 == 0:
        return True
    return pow(x2, (_P - 1) // 2, _P) == 1


def create_program_address(seeds: list[bytes], bump: int, program_id: bytes) -> bytes | None:
    """Return the address for an explicit bump, or None if it lands on the curve."""
    if len(seeds) + 1 > MAX_SEEDS:
        raise AddressDerivationError("Too many derivation seeds")
    hasher = hashlib.sha256()
    for seed in seeds:
        if len(seed) > MAX_SEED_LENGTH:
            raise AddressDerivationError("Derivation seed exceeds 32 bytes")
        hasher.update(seed)
    hasher.update(bytes([bump]))
    hasher.update(program_id)
    hasher.update(PDA_MARKER)
    candidate = hasher.digest()
    if is_on_curve(candidate):
        return None
    return candidate


def find_program_address(seeds: list[bytes], program_id: bytes) -> DerivedAddress:
    """Return the canonical (highest-bump) derived address for `seeds`."""
    for bump in range(255, -1, -1):
        key = create_program_address(seeds, bump, program_id)
        if key is not None:
            return DerivedAddress(key, bump)
    raise AddressDerivationError("Unable to find a viable bump seed")


def placement_seeds(lat: int, lng: int) -> list[bytes]:
    return [
        LOGO_PLACEMENT_SEED,
        lat.to_bytes(4, "little", signed=True),
        lng.to_bytes(4, "little", signed=True),
    ]


def cooldown_seeds(participant: bytes) -> list[bytes]:
    if len(participant) != PUBKEY_LENGTH_BYTES:
        raise AddressDerivationError("Participant identity must be 32 bytes")
    return [COOLDOWN_SEED, participant]


def cluster_seeds(cluster_id: int) -> list[bytes]:
    if not 0 <= cluster_id <= MAX_CLUSTER_ID:
        raise InvalidCluster(f"Invalid cluster address: id {cluster_id} is not a u64")
    return [CLUSTER_SEED, cluster_id.to_bytes(8, "little", signed=False)]


def derive_placement_address(
    lat: int, lng: int, config: PlacementConfig = DEFAULT_CONFIG
) -> DerivedAddress:
    """Flat strategy: one record key per coordinate."""
    return find_program_address(placement_seeds(lat, lng), config.program_id)


def derive_cooldown_address(
    participant: bytes, config: PlacementConfig = DEFAULT_CONFIG
) -> DerivedAddress:
    """Per-participant cooldown record key."""
    return find_program_address(cooldown_seeds(participant), config.program_id)


def derive_cluster_address(
    cluster_id: int, config: PlacementConfig = DEFAULT_CONFIG
) -> DerivedAddress:
    """Clustered strategy: one record key per bucket id."""
    return find_program_address(cluster_seeds(cluster_id), config.program_id)


def derive_cluster_address_for(
    lat: int, lng: int, config: PlacementConfig = DEFAULT_CONFIG
) -> tuple[int, DerivedAddress]:
    """Return the bucket id covering (`lat`, `lng`) and its record key."""
    cluster_id = cluster_id_for(lat, lng, config)
    return cluster_id, derive_cluster_address(cluster_id, config)
