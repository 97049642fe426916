"""Fixed protocol constants for the Solplace registry.

Coordinates are signed micro-degrees (degrees * 1_000_000). Fees are in
lamports. None of these values are runtime-configurable; they are bundled
into :class:`solplace.core.config.PlacementConfig` for injection.
"""

from typing import Final

# Derivation tags
LOGO_PLACEMENT_SEED: Final[bytes] = b"logo_placement"
COOLDOWN_SEED: Final[bytes] = b"cooldown"
CLUSTER_SEED: Final[bytes] = b"cluster"

# Registry program identity (owner of every derived record) and fee sink.
PROGRAM_ID_HEX: Final[str] = (
    "de0a6c1b" "7f2e4d39" "a8c5b3f1" "e6d7c2a9" "4b8e1f3d" "5c7a9b2e" "4f6a8c1d" "3e5f7a9b"
)
TREASURY_ADDRESS_HEX: Final[str] = (
    "27a1c8e4" "5b9d03f6" "c2e87a14" "9f6b3d50" "e1a47c29" "8d5f0b36" "a7c4e912" "5f8b2d6e"
)

# Fee configuration
BASE_PLACEMENT_FEE: Final[int] = 1_000_000  # 0.001 SOL
OVERWRITE_MULTIPLIER: Final[int] = 5

# Rate limiting
COOLDOWN_PERIOD: Final[int] = 30  # seconds

# Coordinate constraints
MICRODEGREES_PER_DEGREE: Final[int] = 1_000_000
MIN_LATITUDE: Final[int] = -90_000_000
MAX_LATITUDE: Final[int] = 90_000_000
MIN_LONGITUDE: Final[int] = -180_000_000
MAX_LONGITUDE: Final[int] = 180_000_000

# Logo constraints
MAX_LOGO_URI_LENGTH: Final[int] = 200

# Clustered storage
CLUSTER_RESOLUTION: Final[int] = 100_000  # ~10km
MAX_CELLS_PER_CLUSTER: Final[int] = 10

# Identity widths
PUBKEY_LENGTH_BYTES: Final[int] = 32
DIGEST_LENGTH_BYTES: Final[int] = 32

# Rent accounting used by the ledger when new records are allocated.
ACCOUNT_STORAGE_OVERHEAD: Final[int] = 128
LAMPORTS_PER_BYTE_YEAR: Final[int] = 3_480
RENT_EXEMPTION_YEARS: Final[int] = 2
