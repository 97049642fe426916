# src/solplace/api/v1/endpoints/placements.py
"""Placement endpoints for the Solplace API."""

import logging

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from solplace.core.errors import PlacementError
from solplace.core.security import placement_message, verify_signature
from solplace.models import PlacementNonce
from solplace.schemas.placement import (
    FeeQuoteResponse,
    PlacementCreate,
    PlacementReceiptResponse,
    PlacementResponse,
)
from solplace.services.placement import PlacementEngine, PlacementRequest
from solplace.services.registry_query import RegistryQueryService
from solplace.utils.hash import blake3_hexdigest

from ..dependencies import (
    ClockDep,
    ConfigDep,
    SessionDep,
    StoreDep,
    placement_http_error,
)

router = APIRouter(prefix="/placements", tags=["placements"])
logger = logging.getLogger(__name__)


def _nonce_hash(client_nonce: str) -> str:
    return blake3_hexdigest(client_nonce.encode("utf-8"))


def _require_utf8(payload: PlacementCreate) -> None:
    # Detail omits the value: a lone surrogate cannot be rendered in the response.
    for field in ("logo_uri", "client_nonce"):
        try:
            getattr(payload, field).encode("utf-8")
        except UnicodeEncodeError as err:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{field} must be valid UTF-8",
            ) from err


def _verify_request(db: Session, payload: PlacementCreate) -> None:
    _require_utf8(payload)
    message = placement_message(
        lat=payload.lat,
        lng=payload.lng,
        token_mint_hex=payload.token_mint,
        logo_uri=payload.logo_uri,
        client_nonce=payload.client_nonce,
    )
    if not verify_signature(payload.placer, message, payload.signature):
        logger.info("Rejected placement with invalid signature from %s", payload.placer)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid placement signature",
        )

    seen = db.execute(
        select(PlacementNonce).where(
            PlacementNonce.pubkey_hex == payload.placer,
            PlacementNonce.nonce_hash_hex == _nonce_hash(payload.client_nonce),
        )
    ).scalars().first()
    if seen is not None:
        logger.info("Rejected replayed placement nonce from %s", payload.placer)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Placement request has already been processed",
        )


def _build_request(
    payload: PlacementCreate,
    query: RegistryQueryService,
    treasury: bytes,
) -> PlacementRequest:
    placer = bytes.fromhex(payload.placer)
    token_mint = bytes.fromhex(payload.token_mint)

    # Addresses the client omitted are derived here; supplied ones are
    # verified by the engine.
    derived: dict[str, object] = {}
    if payload.record_address is None or payload.cooldown_address is None:
        try:
            derived = query.addresses_for(payload.lat, payload.lng, placer)
        except PlacementError as exc:
            raise placement_http_error(exc) from exc

    def _pick(supplied: str | None, fallback: object) -> bytes:
        return bytes.fromhex(supplied if supplied is not None else str(fallback))

    return PlacementRequest(
        placer=placer,
        lat=payload.lat,
        lng=payload.lng,
        token_mint=token_mint,
        logo_uri=payload.logo_uri,
        record_address=_pick(payload.record_address, derived.get("record_address")),
        cooldown_address=_pick(payload.cooldown_address, derived.get("cooldown_address")),
        token_mint_account=_pick(payload.token_mint_account, payload.token_mint),
        treasury=_pick(payload.treasury, treasury.hex()),
    )


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=PlacementReceiptResponse)
async def create_placement(
    payload: PlacementCreate,
    db: SessionDep,
    store: StoreDep,
    config: ConfigDep,
    clock: ClockDep,
) -> dict[str, object]:
    """Place a logo at a coordinate, paying the base or overwrite fee."""
    _verify_request(db, payload)
    query = RegistryQueryService(db, store, config=config, clock=clock)
    request = _build_request(payload, query, config.treasury)

    engine = PlacementEngine(db, store, config=config, clock=clock)
    try:
        receipt = engine.place(request)
    except PlacementError as exc:
        db.rollback()
        raise placement_http_error(exc) from exc

    db.add(
        PlacementNonce(
            pubkey_hex=payload.placer,
            nonce_hash_hex=_nonce_hash(payload.client_nonce),
            used_at=receipt.timestamp,
        )
    )
    db.commit()
    return receipt.to_dict()


@router.get("/fee", response_model=FeeQuoteResponse)
async def get_fee(
    db: SessionDep,
    store: StoreDep,
    config: ConfigDep,
    lat: int = Query(..., description="Latitude in micro-degrees"),
    lng: int = Query(..., description="Longitude in micro-degrees"),
) -> dict[str, object]:
    """Quote the fee for placing at a coordinate right now."""
    query = RegistryQueryService(db, store, config=config)
    try:
        return query.fee_for(lat, lng).to_dict()
    except PlacementError as exc:
        raise placement_http_error(exc) from exc


@router.get("/{lat}/{lng}", response_model=PlacementResponse)
async def get_placement(
    lat: int,
    lng: int,
    db: SessionDep,
    store: StoreDep,
    config: ConfigDep,
) -> dict[str, object]:
    """Return the placement currently stored at a coordinate."""
    query = RegistryQueryService(db, store, config=config)
    try:
        placement = query.placement_at(lat, lng)
    except PlacementError as exc:
        raise placement_http_error(exc) from exc
    if placement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No placement at coordinate")
    return placement
