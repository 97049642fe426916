"""Placement engine.

`PlacementEngine.place` runs one placement attempt through the stages
Validating -> Addressing -> RateChecking -> FeeCollecting -> Mutating ->
Persisting -> Completed. Any `PlacementError` ends the attempt.

No row is written until every check has passed: records are loaded and
mutated in memory, the fee and rent are validated against the payer's
balance, and only then are the ledger transfer, record writes and outbox
event staged on the session. The caller owns the session and commits (or
rolls back) the host transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.orm import Session

from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.constants import PUBKEY_LENGTH_BYTES
from solplace.core.coordinates import validate_coordinates
from solplace.core.errors import InvalidTreasury, PlacementError
from solplace.core.fees import FeeQuote, calculate_fee
from solplace.core.rate_limit import RateLimiter
from solplace.db.time import unix_now
from solplace.models.account import RecordAccount
from solplace.records.cooldown import CooldownRecord
from solplace.repositories.account_repo import AccountRepository
from solplace.services.events import EventPublisher, LogoPlacedEvent
from solplace.services.ledger import LedgerService, minimum_balance
from solplace.services.stores import CooldownStore, PlacementSlot, RecordStore
from solplace.services.tokens import TokenRegistry
from solplace.utils.hash import hash_logo_uri, validate_logo_uri

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


class PlacementStage(str, Enum):
    VALIDATING = "validating"
    ADDRESSING = "addressing"
    RATE_CHECKING = "rate_checking"
    FEE_COLLECTING = "fee_collecting"
    MUTATING = "mutating"
    PERSISTING = "persisting"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PlacementRequest:
    """Everything a participant supplies for one placement.

    `record_address`, `cooldown_address` and `treasury` are the storage
    locations the caller claims; the engine recomputes each and rejects any
    mismatch. `token_mint_account` is the mint account the caller resolved.
    """

    placer: bytes
    lat: int
    lng: int
    token_mint: bytes
    logo_uri: str
    record_address: bytes
    cooldown_address: bytes
    token_mint_account: bytes
    treasury: bytes


@dataclass(frozen=True, slots=True)
class PlacementReceipt:
    fee_paid: int
    is_overwrite: bool
    timestamp: int
    overwrite_count: int
    record_address: bytes
    cluster_id: int | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "fee_paid": self.fee_paid,
            "is_overwrite": self.is_overwrite,
            "timestamp": self.timestamp,
            "overwrite_count": self.overwrite_count,
            "record_address": self.record_address.hex(),
        }
        if self.cluster_id is not None:
            payload["cluster_id"] = self.cluster_id
        return payload


class PlacementEngine:
    """Apply placements against a record store inside a caller-owned session."""

    def __init__(
        self,
        session: Session,
        store: RecordStore,
        *,
        config: PlacementConfig = DEFAULT_CONFIG,
        clock: Clock = unix_now,
    ) -> None:
        self.session = session
        self.store = store
        self.config = config
        self.clock = clock
        self.accounts = AccountRepository(session)
        self.cooldowns = CooldownStore(config)
        self.rate_limiter = RateLimiter(config)
        self.ledger = LedgerService(session)
        self.tokens = TokenRegistry(session)
        self.events = EventPublisher(session)
        self._stage = PlacementStage.VALIDATING

    @property
    def stage(self) -> PlacementStage:
        """Stage reached by the most recent attempt."""
        return self._stage

    def _enter(self, stage: PlacementStage) -> None:
        self._stage = stage
        logger.debug("placement stage -> %s", stage.value)

    def place(self, request: PlacementRequest) -> PlacementReceipt:
        """Run one placement attempt.

        Raises:
            PlacementError: the specific failure kind; nothing has been staged
                on the session when this is raised.
        """
        try:
            receipt = self._place(request)
        except PlacementError as exc:
            failed_at = self._stage
            self._stage = PlacementStage.FAILED
            logger.info(
                "Placement rejected at %s: %s (%s) lat=%d lng=%d",
                failed_at.value,
                exc.name,
                exc.code,
                request.lat,
                request.lng,
            )
            raise
        self._enter(PlacementStage.COMPLETED)
        return receipt

    def _place(self, request: PlacementRequest) -> PlacementReceipt:
        config = self.config
        now = self.clock()

        self._enter(PlacementStage.VALIDATING)
        if len(request.placer) != PUBKEY_LENGTH_BYTES:
            raise ValueError("Placer identity must be 32 bytes")
        validate_coordinates(request.lat, request.lng, config)
        validate_logo_uri(request.logo_uri, config)
        self.tokens.resolve(request.token_mint_account, request.token_mint)

        self._enter(PlacementStage.ADDRESSING)
        record_key = self.store.verify_address(request.lat, request.lng, request.record_address)
        cooldown_key = self.cooldowns.verify_address(request.placer, request.cooldown_address)
        slot = self.store.open(self.accounts, request.lat, request.lng, record_key, now)
        cooldown_account, cooldown = self.cooldowns.open(self.accounts, request.placer, cooldown_key)

        self._enter(PlacementStage.RATE_CHECKING)
        self.rate_limiter.check(now, cooldown)

        self._enter(PlacementStage.FEE_COLLECTING)
        slot.check_capacity()
        is_overwrite = slot.is_overwrite
        quote = calculate_fee(is_overwrite, config)
        if request.treasury != config.treasury:
            raise InvalidTreasury()
        rent = self._rent_due(slot, cooldown_account)
        self.ledger.ensure_funds(request.placer, quote.amount + rent)

        self._enter(PlacementStage.MUTATING)
        logo_hash = hash_logo_uri(request.logo_uri, config)
        overwrite_count = slot.apply(
            token_mint=request.token_mint,
            logo_uri=request.logo_uri,
            logo_hash=logo_hash,
            placed_by=request.placer,
            now=now,
        )
        self.rate_limiter.record_placement(now, cooldown)
        record_bytes = slot.encode()
        cooldown_bytes = cooldown.encode()

        self._enter(PlacementStage.PERSISTING)
        self._persist(
            request.placer,
            quote,
            slot,
            record_bytes,
            cooldown_key.key,
            cooldown_account,
            cooldown_bytes,
        )
        self.events.emit(
            LogoPlacedEvent(
                user=request.placer.hex(),
                lat=request.lat,
                lng=request.lng,
                token_mint=request.token_mint.hex(),
                logo_uri=request.logo_uri,
                fee_paid=quote.amount,
                is_overwrite=is_overwrite,
                timestamp=now,
                cluster_id=slot.cluster_id,
            )
        )
        self.session.flush()

        return PlacementReceipt(
            fee_paid=quote.amount,
            is_overwrite=is_overwrite,
            timestamp=now,
            overwrite_count=overwrite_count,
            record_address=slot.address.key,
            cluster_id=slot.cluster_id,
        )

    def _rent_due(self, slot: PlacementSlot, cooldown_account: RecordAccount | None) -> int:
        rent = 0
        if slot.is_new_account:
            rent += minimum_balance(slot.space)
        if cooldown_account is None:
            rent += minimum_balance(CooldownRecord.SIZE)
        return rent

    def _persist(
        self,
        payer: bytes,
        quote: FeeQuote,
        slot: PlacementSlot,
        record_bytes: bytes,
        cooldown_address: bytes,
        cooldown_account: RecordAccount | None,
        cooldown_bytes: bytes,
    ) -> None:
        self.ledger.transfer(payer, self.config.treasury, quote.amount)
        self._write(payer, slot.account, slot.address.key, slot.kind, record_bytes)
        self._write(payer, cooldown_account, cooldown_address, self.cooldowns.kind, cooldown_bytes)

    def _write(
        self,
        payer: bytes,
        account: RecordAccount | None,
        address: bytes,
        kind: str,
        data: bytes,
    ) -> None:
        if account is not None:
            self.accounts.write(account, data)
            return
        deposit = minimum_balance(len(data))
        self.ledger.debit(payer, deposit)
        self.accounts.create(
            address=address,
            kind=kind,
            owner=self.config.program_id,
            data=data,
            lamports=deposit,
        )
