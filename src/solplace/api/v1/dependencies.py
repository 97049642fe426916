"""Shared API dependencies for the registry endpoints."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.constants import PUBKEY_LENGTH_BYTES
from solplace.core.errors import PlacementError
from solplace.core.settings import settings
from solplace.db.session import get_db
from solplace.db.time import unix_now
from solplace.services.placement import Clock
from solplace.services.stores import RecordStore, build_store


def get_config() -> PlacementConfig:
    """Return the fixed placement configuration."""
    return DEFAULT_CONFIG


def get_record_store() -> RecordStore:
    """Return the record store selected by `STORE_STRATEGY`."""
    return build_store(settings.store_strategy, DEFAULT_CONFIG)


def get_clock() -> Clock:
    """Return the wall clock used to timestamp placements."""
    return unix_now


# Type aliases for dependency injection
SessionDep = Annotated[Session, Depends(get_db)]
ConfigDep = Annotated[PlacementConfig, Depends(get_config)]
StoreDep = Annotated[RecordStore, Depends(get_record_store)]
ClockDep = Annotated[Clock, Depends(get_clock)]


def decode_key(value: str, field: str = "key") -> bytes:
    """Decode a hex-encoded 32-byte identity or address.

    Raises:
        HTTPException: 400 if the value is not 64 hex characters
    """
    try:
        decoded = bytes.fromhex(value)
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {field}: not hex encoded",
        ) from err
    if len(decoded) != PUBKEY_LENGTH_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {field}: expected 32 bytes",
        )
    return decoded


def placement_http_error(exc: PlacementError) -> HTTPException:
    """Translate a placement failure into an HTTP error with a structured detail."""
    return HTTPException(status_code=exc.http_status, detail=exc.to_dict())
