"""Hashing helpers.

Logo URIs are fingerprinted with SHA-256 so the stored digest matches what any
client computes over the same UTF-8 bytes. Event identifiers in the outbox use
BLAKE3.
"""

from __future__ import annotations

import hashlib

from blake3 import blake3

from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.errors import LogoUriTooLong


def logo_uri_length(logo_uri: str) -> int:
    """Return the stored length of `logo_uri` (UTF-8 bytes)."""
    return len(logo_uri.encode("utf-8"))


def validate_logo_uri(logo_uri: str, config: PlacementConfig = DEFAULT_CONFIG) -> None:
    """Raise `LogoUriTooLong` if the URI does not fit in its record slot."""
    if logo_uri_length(logo_uri) > config.max_logo_uri_length:
        raise LogoUriTooLong()


def hash_logo_uri(logo_uri: str, config: PlacementConfig = DEFAULT_CONFIG) -> bytes:
    """Return the 32-byte SHA-256 digest of a logo URI.

    The length limit is enforced before hashing.
    """
    validate_logo_uri(logo_uri, config)
    return hashlib.sha256(logo_uri.encode("utf-8")).digest()


def blake3_digest(data: bytes) -> bytes:
    """Return the byte digest of the supplied data."""
    return blake3(data).digest()


def blake3_hexdigest(data: bytes) -> str:
    """Return the hexadecimal digest of the supplied data."""
    return blake3(data).hexdigest()
