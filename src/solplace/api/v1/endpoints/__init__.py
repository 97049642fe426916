# src/solplace/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .placements import router as placements_router
from .registry import router as registry_router
from .system import router as system_router

__all__ = [
    "placements_router",
    "registry_router",
    "system_router",
]
