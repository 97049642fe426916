# src/solplace/api/v1/endpoints/registry.py
"""Read-only registry endpoints: cooldowns, clusters, addresses and rankings."""

from fastapi import APIRouter, HTTPException, Path, Query, status

from solplace.core.addresses import MAX_CLUSTER_ID
from solplace.core.errors import PlacementError
from solplace.schemas.placement import ClusterResponse, CooldownResponse, LeaderboardEntry
from solplace.services.events import EventPublisher
from solplace.services.ledger import LedgerService
from solplace.services.registry_query import RegistryQueryService

from ..dependencies import (
    ClockDep,
    ConfigDep,
    SessionDep,
    StoreDep,
    decode_key,
    placement_http_error,
)

router = APIRouter(tags=["registry"])


@router.get("/cooldowns/{participant}", response_model=CooldownResponse)
async def get_cooldown(
    participant: str,
    db: SessionDep,
    store: StoreDep,
    config: ConfigDep,
    clock: ClockDep,
) -> dict[str, object]:
    """Return a participant's cooldown state and whether they may place now."""
    query = RegistryQueryService(db, store, config=config, clock=clock)
    try:
        return query.cooldown_for(decode_key(participant, "participant"))
    except PlacementError as exc:
        raise placement_http_error(exc) from exc


@router.get("/clusters")
async def describe_cluster(
    db: SessionDep,
    store: StoreDep,
    config: ConfigDep,
    lat: int = Query(...),
    lng: int = Query(...),
) -> dict[str, object]:
    """Return the bucket id, bounds and record key covering a coordinate."""
    try:
        return RegistryQueryService(db, store, config=config).cluster_for(lat, lng)
    except PlacementError as exc:
        raise placement_http_error(exc) from exc


@router.get("/clusters/{cluster_id}", response_model=ClusterResponse)
async def get_cluster(
    db: SessionDep,
    store: StoreDep,
    config: ConfigDep,
    cluster_id: int = Path(..., ge=0, le=MAX_CLUSTER_ID),
) -> dict[str, object]:
    """Return every cell stored in a cluster bucket (clustered strategy only)."""
    query = RegistryQueryService(db, store, config=config)
    try:
        cluster = query.cluster(cluster_id)
    except PlacementError as exc:
        raise placement_http_error(exc) from exc
    if cluster is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cluster not found")
    return cluster.to_dict()


@router.get("/addresses")
async def get_addresses(
    db: SessionDep,
    store: StoreDep,
    config: ConfigDep,
    lat: int = Query(...),
    lng: int = Query(...),
    participant: str | None = Query(None),
) -> dict[str, object]:
    """Return the derived keys a placement at a coordinate would touch."""
    query = RegistryQueryService(db, store, config=config)
    identity = decode_key(participant, "participant") if participant is not None else None
    try:
        return query.addresses_for(lat, lng, identity)
    except PlacementError as exc:
        raise placement_http_error(exc) from exc


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    db: SessionDep,
    store: StoreDep,
    config: ConfigDep,
    limit: int = Query(10, ge=1, le=100),
) -> list[dict[str, object]]:
    """Rank participants by lifetime placement count."""
    return RegistryQueryService(db, store, config=config).leaderboard(limit)


@router.get("/events")
async def get_events(
    db: SessionDep,
    limit: int = Query(50, ge=1, le=500),
) -> list[dict[str, object]]:
    """Return the most recent placement events, newest first."""
    return EventPublisher(db).recent(limit)


@router.get("/ledger/{identity}")
async def get_balance(identity: str, db: SessionDep) -> dict[str, object]:
    """Return the lamport balance of an identity."""
    key = decode_key(identity, "identity")
    return {"identity": key.hex(), "lamports": LedgerService(db).balance(key)}
