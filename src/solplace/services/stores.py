"""Record store strategies behind the placement engine.

Both strategies expose the same two capabilities: read-or-create a record by
derived key, then mutate it and hand back the bytes to persist. The engine
never needs to know whether a coordinate lives in its own record (flat) or
shares a bucket record with its neighbours (clustered).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar

from solplace.core.addresses import (
    DerivedAddress,
    derive_cluster_address,
    derive_cluster_address_for,
    derive_cooldown_address,
    derive_placement_address,
)
from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.coordinates import cluster_bounds
from solplace.core.errors import (
    ClusterFull,
    InvalidAccount,
    InvalidCluster,
    InvalidCooldown,
    InvalidLogoPlacement,
    PlacementError,
)
from solplace.core.settings import StoreStrategy
from solplace.models.account import KIND_CLUSTER, KIND_COOLDOWN, KIND_PLACEMENT, RecordAccount
from solplace.records.cluster import CellEntry, ClusterRecord
from solplace.records.cooldown import CooldownRecord
from solplace.records.placement import U16_MAX, PlacementRecord
from solplace.repositories.account_repo import AccountRepository

logger = logging.getLogger(__name__)


def _check_account(account: RecordAccount, kind: str, config: PlacementConfig) -> None:
    if account.kind != kind or account.owner != config.program_id:
        raise InvalidAccount(f"Invalid account: {account.address_hex} is not a {kind} record")


def _check_bump(bump: int, derived: DerivedAddress) -> None:
    if bump != derived.bump:
        raise InvalidAccount("Invalid account: stored bump does not match the derived address")


class PlacementSlot(ABC):
    """A loaded or freshly initialised record about to receive one placement."""

    kind: ClassVar[str]
    cluster_id: int | None = None

    def __init__(self, address: DerivedAddress, account: RecordAccount | None) -> None:
        self.address = address
        self.account = account

    @property
    def is_new_account(self) -> bool:
        return self.account is None

    @property
    @abstractmethod
    def space(self) -> int:
        """Fixed footprint allocated for this record."""

    @property
    @abstractmethod
    def is_overwrite(self) -> bool:
        """True if the target coordinate already holds a placement."""

    def check_capacity(self) -> None:
        """Raise `ClusterFull` if the placement cannot fit in this record."""

    @abstractmethod
    def apply(
        self,
        *,
        token_mint: bytes,
        logo_uri: str,
        logo_hash: bytes,
        placed_by: bytes,
        now: int,
    ) -> int:
        """Write the placement into the in-memory record; return its overwrite count."""

    @abstractmethod
    def encode(self) -> bytes:
        """Return the record bytes to persist."""


class FlatSlot(PlacementSlot):
    kind = KIND_PLACEMENT

    def __init__(
        self,
        address: DerivedAddress,
        account: RecordAccount | None,
        record: PlacementRecord,
    ) -> None:
        super().__init__(address, account)
        self.record = record

    @property
    def space(self) -> int:
        return PlacementRecord.SIZE

    @property
    def is_overwrite(self) -> bool:
        return self.account is not None

    def apply(
        self,
        *,
        token_mint: bytes,
        logo_uri: str,
        logo_hash: bytes,
        placed_by: bytes,
        now: int,
    ) -> int:
        record = self.record
        record.token_mint = token_mint
        record.logo_uri = logo_uri
        record.logo_hash = logo_hash
        record.placed_by = placed_by
        record.placed_at = now
        if self.is_overwrite:
            record.overwrite_count = min(record.overwrite_count + 1, U16_MAX)
        return record.overwrite_count

    def encode(self) -> bytes:
        return self.record.encode()


class ClusterSlot(PlacementSlot):
    kind = KIND_CLUSTER

    def __init__(
        self,
        address: DerivedAddress,
        account: RecordAccount | None,
        record: ClusterRecord,
        lat: int,
        lng: int,
    ) -> None:
        super().__init__(address, account)
        self.record = record
        self.cluster_id = record.cluster_id
        self.lat = lat
        self.lng = lng

    @property
    def space(self) -> int:
        return self.record.space

    @property
    def is_overwrite(self) -> bool:
        return self.record.find_cell_index(self.lat, self.lng) is not None

    def check_capacity(self) -> None:
        if not self.is_overwrite and self.record.is_full:
            raise ClusterFull()

    def apply(
        self,
        *,
        token_mint: bytes,
        logo_uri: str,
        logo_hash: bytes,
        placed_by: bytes,
        now: int,
    ) -> int:
        overwrite_count = 0
        if self.is_overwrite:
            # Counter follows the coordinate, not the list position.
            existing = self.record.find_cell(self.lat, self.lng)
            overwrite_count = 1 if existing is None else min(existing.overwrite_count + 1, U16_MAX)
        self.record.add_or_update_cell(
            CellEntry(
                lat=self.lat,
                lng=self.lng,
                token_mint=token_mint,
                logo_uri=logo_uri,
                logo_hash=logo_hash,
                placed_by=placed_by,
                placed_at=now,
                overwrite_count=overwrite_count,
            )
        )
        self.record.last_updated = now
        return overwrite_count

    def encode(self) -> bytes:
        return self.record.encode()


class RecordStore(ABC):
    """Strategy for mapping a coordinate to the record that stores it."""

    strategy: ClassVar[StoreStrategy]
    kind: ClassVar[str]
    address_error: ClassVar[type[PlacementError]]

    def __init__(self, config: PlacementConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    @abstractmethod
    def derive(self, lat: int, lng: int) -> DerivedAddress:
        """Return the derived key of the record holding (`lat`, `lng`)."""

    def verify_address(self, lat: int, lng: int, supplied: bytes) -> DerivedAddress:
        """Recompute the record key and require the caller's to match exactly."""
        derived = self.derive(lat, lng)
        if supplied != derived.key:
            raise self.address_error()
        return derived

    @abstractmethod
    def open(
        self,
        accounts: AccountRepository,
        lat: int,
        lng: int,
        derived: DerivedAddress,
        now: int,
    ) -> PlacementSlot:
        """Load the record at `derived` (locking it) or initialise a fresh one."""

    @abstractmethod
    def lookup(self, accounts: AccountRepository, lat: int, lng: int) -> dict[str, object] | None:
        """Return the placement currently at (`lat`, `lng`) without mutating anything."""


class FlatStore(RecordStore):
    """One record per coordinate."""

    strategy = "flat"
    kind = KIND_PLACEMENT
    address_error = InvalidLogoPlacement

    def derive(self, lat: int, lng: int) -> DerivedAddress:
        return derive_placement_address(lat, lng, self.config)

    def _load(
        self, account: RecordAccount, lat: int, lng: int, derived: DerivedAddress
    ) -> PlacementRecord:
        _check_account(account, self.kind, self.config)
        record = PlacementRecord.decode(account.data)
        _check_bump(record.bump, derived)
        if record.coordinates != (lat, lng):
            raise InvalidAccount("Invalid account: stored coordinates do not match the address")
        return record

    def open(
        self,
        accounts: AccountRepository,
        lat: int,
        lng: int,
        derived: DerivedAddress,
        now: int,
    ) -> FlatSlot:
        account = accounts.get(derived.key, for_update=True)
        if account is None:
            record = PlacementRecord(lat=lat, lng=lng, bump=derived.bump)
        else:
            record = self._load(account, lat, lng, derived)
        return FlatSlot(derived, account, record)

    def lookup(self, accounts: AccountRepository, lat: int, lng: int) -> dict[str, object] | None:
        derived = self.derive(lat, lng)
        account = accounts.get(derived.key)
        if account is None:
            return None
        return self._load(account, lat, lng, derived).to_dict()


class ClusterStore(RecordStore):
    """A bounded list of coordinates per grid bucket."""

    strategy = "clustered"
    kind = KIND_CLUSTER
    address_error = InvalidCluster

    def derive(self, lat: int, lng: int) -> DerivedAddress:
        _, derived = derive_cluster_address_for(lat, lng, self.config)
        return derived

    def load_cluster(
        self, account: RecordAccount, cluster_id: int, derived: DerivedAddress
    ) -> ClusterRecord:
        _check_account(account, self.kind, self.config)
        record = ClusterRecord.decode(account.data, max_cells=self.config.max_cells)
        _check_bump(record.bump, derived)
        if record.cluster_id != cluster_id:
            raise InvalidAccount("Invalid account: stored cluster id does not match the address")
        return record

    def open(
        self,
        accounts: AccountRepository,
        lat: int,
        lng: int,
        derived: DerivedAddress,
        now: int,
    ) -> ClusterSlot:
        cluster_id, _ = derive_cluster_address_for(lat, lng, self.config)
        account = accounts.get(derived.key, for_update=True)
        if account is None:
            record = ClusterRecord(
                cluster_id=cluster_id,
                bounds=cluster_bounds(cluster_id, self.config).as_list(),
                last_updated=now,
                bump=derived.bump,
                max_cells=self.config.max_cells,
            )
        else:
            record = self.load_cluster(account, cluster_id, derived)
        return ClusterSlot(derived, account, record, lat, lng)

    def get_cluster(self, accounts: AccountRepository, cluster_id: int) -> ClusterRecord | None:
        """Return the whole bucket record for `cluster_id`, if allocated."""
        derived = derive_cluster_address(cluster_id, self.config)
        account = accounts.get(derived.key)
        if account is None:
            return None
        return self.load_cluster(account, cluster_id, derived)

    def lookup(self, accounts: AccountRepository, lat: int, lng: int) -> dict[str, object] | None:
        cluster_id, derived = derive_cluster_address_for(lat, lng, self.config)
        account = accounts.get(derived.key)
        if account is None:
            return None
        cell = self.load_cluster(account, cluster_id, derived).find_cell(lat, lng)
        if cell is None:
            return None
        return {"cluster_id": cluster_id, **cell.to_dict()}


class CooldownStore:
    """Per-participant cooldown records."""

    kind = KIND_COOLDOWN

    def __init__(self, config: PlacementConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def derive(self, participant: bytes) -> DerivedAddress:
        return derive_cooldown_address(participant, self.config)

    def verify_address(self, participant: bytes, supplied: bytes) -> DerivedAddress:
        derived = self.derive(participant)
        if supplied != derived.key:
            raise InvalidCooldown()
        return derived

    def decode(
        self, account: RecordAccount, participant: bytes, derived: DerivedAddress
    ) -> CooldownRecord:
        _check_account(account, self.kind, self.config)
        record = CooldownRecord.decode(account.data)
        _check_bump(record.bump, derived)
        if record.user != participant:
            raise InvalidAccount("Invalid account: cooldown belongs to another participant")
        return record

    def open(
        self, accounts: AccountRepository, participant: bytes, derived: DerivedAddress
    ) -> tuple[RecordAccount | None, CooldownRecord]:
        account = accounts.get(derived.key, for_update=True)
        if account is None:
            return None, CooldownRecord(user=participant, bump=derived.bump)
        return account, self.decode(account, participant, derived)

    def lookup(self, accounts: AccountRepository, participant: bytes) -> CooldownRecord | None:
        derived = self.derive(participant)
        account = accounts.get(derived.key)
        if account is None:
            return None
        return self.decode(account, participant, derived)


_STRATEGIES: dict[str, type[RecordStore]] = {
    FlatStore.strategy: FlatStore,
    ClusterStore.strategy: ClusterStore,
}


def build_store(strategy: StoreStrategy, config: PlacementConfig = DEFAULT_CONFIG) -> RecordStore:
    """Return the record store implementing `strategy`."""
    try:
        store_cls = _STRATEGIES[strategy]
    except KeyError as err:
        raise ValueError(f"Unknown store strategy: {strategy!r}") from err
    logger.debug("Using %s record store", store_cls.strategy)
    return store_cls(config)
