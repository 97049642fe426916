"""Placement fee computation."""

from __future__ import annotations

from dataclasses import dataclass

from solplace.core.config import DEFAULT_CONFIG, PlacementConfig


@dataclass(frozen=True, slots=True)
class FeeQuote:
    """Fee owed for a placement and how it was derived."""

    amount: int
    is_overwrite: bool
    base_fee: int
    multiplier: int

    def to_dict(self) -> dict[str, object]:
        return {
            "amount": self.amount,
            "is_overwrite": self.is_overwrite,
            "base_fee": self.base_fee,
            "multiplier": self.multiplier,
        }


def calculate_fee(is_overwrite: bool, config: PlacementConfig = DEFAULT_CONFIG) -> FeeQuote:
    """Return the base fee for a fresh coordinate, the surcharged fee otherwise."""
    multiplier = config.overwrite_multiplier if is_overwrite else 1
    return FeeQuote(
        amount=config.base_fee * multiplier,
        is_overwrite=is_overwrite,
        base_fee=config.base_fee,
        multiplier=multiplier,
    )
