# src/solplace/services/__init__.py
"""Business logic services for the Solplace registry."""

from .events import EventPublisher, LogoPlacedEvent
from .ledger import LedgerService
from .placement import PlacementEngine, PlacementReceipt, PlacementRequest
from .registry_query import RegistryQueryService
from .stores import ClusterStore, CooldownStore, FlatStore, RecordStore, build_store
from .tokens import TokenRegistry

__all__ = [
    "EventPublisher", "LogoPlacedEvent",
    "LedgerService",
    "PlacementEngine", "PlacementReceipt", "PlacementRequest",
    "RegistryQueryService",
    "RecordStore", "FlatStore", "ClusterStore", "CooldownStore", "build_store",
    "TokenRegistry",
]
