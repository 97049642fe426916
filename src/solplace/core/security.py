"""Signature utilities built on Ed25519 primitives."""
from __future__ import annotations

import binascii

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

PLACEMENT_MESSAGE_PREFIX = "solplace:place"


def verify_signature(pubkey_hex: str, message: bytes, signature_hex: str) -> bool:
    """Verify an Ed25519 signature.

    Args:
        pubkey_hex: Hex-encoded 32-byte public key.
        message: Exact bytes that were signed on the client.
        signature_hex: Hex-encoded 64-byte signature.

    Returns:
        True if the signature is valid for `message` under `pubkey_hex`; False otherwise.
    """
    try:
        pubkey = VerifyKey(binascii.unhexlify(pubkey_hex))
        signature = binascii.unhexlify(signature_hex)
        pubkey.verify(message, signature)
        return True
    except (BadSignatureError, binascii.Error, ValueError, TypeError):
        return False


def placement_message(
    *,
    lat: int,
    lng: int,
    token_mint_hex: str,
    logo_uri: str,
    client_nonce: str,
) -> bytes:
    """Return the canonical bytes a participant signs to request a placement."""
    return (
        f"{PLACEMENT_MESSAGE_PREFIX}:{lat}:{lng}:{token_mint_hex.lower()}:"
        f"{client_nonce}:{logo_uri}"
    ).encode("utf-8")
