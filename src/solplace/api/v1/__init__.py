# src/solplace/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import placements_router, registry_router, system_router

__all__ = [
    "placements_router",
    "registry_router",
    "system_router",
]
