# src/solplace/models/__init__.py
"""SQLAlchemy models for the Solplace registry."""

from .account import KIND_CLUSTER, KIND_COOLDOWN, KIND_PLACEMENT, RecordAccount
from .event_log import PlacementEventLog
from .ledger import LedgerAccount
from .replay_protection import PlacementNonce
from .token_mint import TokenMint

__all__ = [
    "RecordAccount", "KIND_PLACEMENT", "KIND_CLUSTER", "KIND_COOLDOWN",
    "PlacementEventLog",
    "LedgerAccount",
    "PlacementNonce",
    "TokenMint",
]
