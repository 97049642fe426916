"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .placement import (
    ClusterResponse,
    CooldownResponse,
    FeeQuoteResponse,
    LeaderboardEntry,
    PlacementCreate,
    PlacementReceiptResponse,
    PlacementResponse,
)

__all__ = [
    "PlacementCreate", "PlacementReceiptResponse", "PlacementResponse",
    "FeeQuoteResponse",
    "CooldownResponse",
    "ClusterResponse",
    "LeaderboardEntry",
]
