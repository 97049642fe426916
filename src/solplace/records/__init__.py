"""Binary record types persisted at derived addresses."""

from .cluster import CellEntry, ClusterRecord
from .cooldown import CooldownRecord
from .layout import account_discriminator
from .placement import PlacementRecord

__all__ = [
    "CellEntry", "ClusterRecord",
    "CooldownRecord",
    "PlacementRecord",
    "account_discriminator",
]
