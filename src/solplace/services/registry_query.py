"""Read-only views over the registry for clients."""

from __future__ import annotations

from sqlalchemy.orm import Session

from solplace.core.addresses import derive_cluster_address_for
from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.coordinates import cluster_bounds, cluster_id_for, validate_coordinates
from solplace.core.fees import FeeQuote, calculate_fee
from solplace.core.rate_limit import RateLimiter
from solplace.db.time import unix_now
from solplace.models.account import KIND_COOLDOWN
from solplace.records.cluster import ClusterRecord
from solplace.records.cooldown import CooldownRecord
from solplace.repositories.account_repo import AccountRepository
from solplace.services.placement import Clock
from solplace.services.stores import ClusterStore, CooldownStore, RecordStore


class RegistryQueryService:
    """Lookups, fee estimates and cooldown status. Never writes."""

    def __init__(
        self,
        session: Session,
        store: RecordStore,
        *,
        config: PlacementConfig = DEFAULT_CONFIG,
        clock: Clock = unix_now,
    ) -> None:
        self.store = store
        self.config = config
        self.clock = clock
        self.accounts = AccountRepository(session)
        self.cooldowns = CooldownStore(config)
        self.rate_limiter = RateLimiter(config)

    def placement_at(self, lat: int, lng: int) -> dict[str, object] | None:
        validate_coordinates(lat, lng, self.config)
        return self.store.lookup(self.accounts, lat, lng)

    def placements_at(self, coordinates: list[tuple[int, int]]) -> list[dict[str, object]]:
        """Return the occupied subset of `coordinates`, in request order."""
        found = []
        for lat, lng in coordinates:
            placement = self.placement_at(lat, lng)
            if placement is not None:
                found.append(placement)
        return found

    def fee_for(self, lat: int, lng: int) -> FeeQuote:
        """Quote the fee a placement at (`lat`, `lng`) would be charged now."""
        return calculate_fee(self.placement_at(lat, lng) is not None, self.config)

    def cooldown_for(self, participant: bytes) -> dict[str, object]:
        record = self.cooldowns.lookup(self.accounts, participant)
        if record is None:
            record = CooldownRecord(user=participant)
        now = self.clock()
        remaining = self.rate_limiter.remaining(now, record)
        return {
            **record.to_dict(),
            "remaining_cooldown": remaining,
            "can_place": not self.rate_limiter.is_on_cooldown(now, record),
        }

    def cluster(self, cluster_id: int) -> ClusterRecord | None:
        if not isinstance(self.store, ClusterStore):
            return None
        return self.store.get_cluster(self.accounts, cluster_id)

    def cluster_for(self, lat: int, lng: int) -> dict[str, object]:
        """Describe the bucket covering (`lat`, `lng`) and its record key."""
        validate_coordinates(lat, lng, self.config)
        cluster_id, derived = derive_cluster_address_for(lat, lng, self.config)
        return {
            "cluster_id": cluster_id,
            "bounds": cluster_bounds(cluster_id, self.config).as_list(),
            "address": derived.hex,
            "bump": derived.bump,
        }

    def addresses_for(self, lat: int, lng: int, participant: bytes | None = None) -> dict[str, object]:
        """Return every derived key a placement at (`lat`, `lng`) touches."""
        validate_coordinates(lat, lng, self.config)
        record = self.store.derive(lat, lng)
        payload: dict[str, object] = {
            "strategy": self.store.strategy,
            "record_address": record.hex,
            "record_bump": record.bump,
            "treasury": self.config.treasury.hex(),
        }
        if self.store.strategy == ClusterStore.strategy:
            payload["cluster_id"] = cluster_id_for(lat, lng, self.config)
        if participant is not None:
            cooldown = self.cooldowns.derive(participant)
            payload["cooldown_address"] = cooldown.hex
            payload["cooldown_bump"] = cooldown.bump
        return payload

    def leaderboard(self, limit: int = 10) -> list[dict[str, object]]:
        """Rank participants by lifetime placement count."""
        records = [
            CooldownRecord.decode(account.data)
            for account in self.accounts.list_by_kind(KIND_COOLDOWN)
        ]
        records.sort(key=lambda rec: (-rec.placement_count, -rec.last_placement, rec.user))
        return [
            {
                "rank": rank,
                "user": rec.user.hex(),
                "placement_count": rec.placement_count,
                "last_placement": rec.last_placement,
            }
            for rank, rec in enumerate(records[:limit], start=1)
        ]
