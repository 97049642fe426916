"""Record schema export for client code generation.

This is introspection only: it reads class-level layout metadata and never
touches storage.
"""

from __future__ import annotations

from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.constants import MAX_LOGO_URI_LENGTH
from solplace.core.errors import ALL_ERRORS
from solplace.records.cluster import CellEntry, ClusterRecord
from solplace.records.cooldown import CooldownRecord
from solplace.records.placement import PlacementRecord

_CELL_FIELDS: list[dict[str, object]] = [
    {"name": "coordinates", "type": {"array": ["i32", 2]}},
    {"name": "token_mint", "type": "pubkey"},
    {"name": "logo_uri", "type": "string", "max_length": MAX_LOGO_URI_LENGTH},
    {"name": "logo_hash", "type": {"array": ["u8", 32]}},
    {"name": "placed_by", "type": "pubkey"},
    {"name": "placed_at", "type": "i64"},
    {"name": "overwrite_count", "type": "u16"},
]


def export_record_schemas(config: PlacementConfig = DEFAULT_CONFIG) -> dict[str, object]:
    """Describe every record layout, the event shape and the error table."""
    return {
        "accounts": [
            {
                "name": PlacementRecord.TYPE_NAME,
                "discriminator": PlacementRecord.discriminator().hex(),
                "space": PlacementRecord.SIZE,
                "fields": [*_CELL_FIELDS, {"name": "bump", "type": "u8"}],
            },
            {
                "name": ClusterRecord.TYPE_NAME,
                "discriminator": ClusterRecord.discriminator().hex(),
                "space": ClusterRecord.space_for(config.max_cells),
                "max_cells": config.max_cells,
                "fields": [
                    {"name": "cluster_id", "type": "u64"},
                    {"name": "bounds", "type": {"array": ["i32", 4]}},
                    {"name": "cell_count", "type": "u32"},
                    {"name": "cells", "type": {"vec": "CellData"}},
                    {"name": "last_updated", "type": "i64"},
                    {"name": "bump", "type": "u8"},
                ],
            },
            {
                "name": CooldownRecord.TYPE_NAME,
                "discriminator": CooldownRecord.discriminator().hex(),
                "space": CooldownRecord.SIZE,
                "fields": [
                    {"name": "user", "type": "pubkey"},
                    {"name": "last_placement", "type": "i64"},
                    {"name": "placement_count", "type": "u32"},
                    {"name": "bump", "type": "u8"},
                ],
            },
        ],
        "types": [{"name": "CellData", "size": CellEntry.SIZE, "fields": list(_CELL_FIELDS)}],
        "events": [
            {
                "name": "LogoPlacedEvent",
                "fields": [
                    {"name": "user", "type": "pubkey"},
                    {"name": "cluster_id", "type": {"option": "u64"}},
                    {"name": "lat", "type": "i32"},
                    {"name": "lng", "type": "i32"},
                    {"name": "token_mint", "type": "pubkey"},
                    {"name": "logo_uri", "type": "string"},
                    {"name": "fee_paid", "type": "u64"},
                    {"name": "is_overwrite", "type": "bool"},
                    {"name": "timestamp", "type": "i64"},
                ],
            }
        ],
        "errors": [
            {"code": err.code, "name": err.__name__, "msg": err.default_message}
            for err in ALL_ERRORS
        ],
        "constants": config.public_snapshot(),
    }
