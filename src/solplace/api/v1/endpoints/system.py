"""System and transparency endpoints for the Solplace API."""

from __future__ import annotations

from fastapi import APIRouter

from solplace.core.settings import settings
from solplace.services.schema_export import export_record_schemas

from ..dependencies import ConfigDep, StoreDep

router = APIRouter(prefix="/system", tags=["system", "transparency"])


@router.get("/config")
async def get_public_config(config: ConfigDep, store: StoreDep) -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes connection strings; suitable for transparency UIs.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
        "store_strategy": store.strategy,
        "placement": config.public_snapshot(),
    }


@router.get("/schema")
async def get_record_schema(config: ConfigDep) -> dict[str, object]:
    """Export record layouts, event shape and error codes for client tooling."""
    return export_record_schemas(config)
