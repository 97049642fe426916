"""Tests for ledger, token registry, events and read-only queries."""

from __future__ import annotations

import json

import pytest

from solplace.core.errors import InsufficientFunds, InvalidTokenMint, UninitializedMint
from solplace.services.events import EventPublisher, LogoPlacedEvent
from solplace.services.ledger import LedgerService, minimum_balance
from solplace.services.registry_query import RegistryQueryService
from solplace.services.stores import ClusterStore, FlatStore, build_store
from solplace.services.tokens import TokenRegistry

KEY_A = bytes([1]) * 32
KEY_B = bytes([2]) * 32


def test_minimum_balance() -> None:
    assert minimum_balance(0) == 128 * 3480 * 2
    assert minimum_balance(327) == (128 + 327) * 3480 * 2


def test_ledger_transfer(db_session) -> None:
    ledger = LedgerService(db_session)
    ledger.airdrop(KEY_A, 100)
    ledger.transfer(KEY_A, KEY_B, 40)
    assert ledger.balance(KEY_A) == 60
    assert ledger.balance(KEY_B) == 40

    with pytest.raises(InsufficientFunds):
        ledger.transfer(KEY_A, KEY_B, 61)
    with pytest.raises(InsufficientFunds):
        ledger.ensure_funds(KEY_A, 61)
    with pytest.raises(ValueError):
        ledger.airdrop(KEY_A, -1)


def test_repeated_transfers_to_new_identity(db_session) -> None:
    ledger = LedgerService(db_session)
    ledger.airdrop(KEY_A, 100)
    ledger.transfer(KEY_A, KEY_B, 10)
    ledger.transfer(KEY_A, KEY_B, 15)
    assert ledger.balance(KEY_B) == 25
    assert ledger.balance(KEY_A) == 75


def test_token_registry(db_session) -> None:
    tokens = TokenRegistry(db_session)
    tokens.register(KEY_A, decimals=9)
    assert tokens.resolve(KEY_A, KEY_A).decimals == 9

    with pytest.raises(InvalidTokenMint):
        tokens.resolve(KEY_B, KEY_B)
    with pytest.raises(InvalidTokenMint):
        tokens.resolve(KEY_A, KEY_B)

    tokens.register(KEY_B, is_initialized=False)
    with pytest.raises(UninitializedMint):
        tokens.resolve(KEY_B, KEY_B)


def test_event_publisher(db_session) -> None:
    publisher = EventPublisher(db_session)
    event = LogoPlacedEvent(
        user=KEY_A.hex(),
        lat=1,
        lng=2,
        token_mint=KEY_B.hex(),
        logo_uri="https://example.com/a.png",
        fee_paid=1_000_000,
        is_overwrite=False,
        timestamp=10,
    )
    row = publisher.emit(event)
    db_session.flush()

    assert "cluster_id" not in json.loads(row.payload)
    recent = publisher.recent()
    assert recent[0]["event"] == "LogoPlacedEvent"
    assert recent[0]["lat"] == 1
    assert recent[0]["event_hash"] == row.event_hash


def test_build_store() -> None:
    assert isinstance(build_store("flat"), FlatStore)
    assert isinstance(build_store("clustered"), ClusterStore)
    with pytest.raises(ValueError):
        build_store("sharded")  # type: ignore[arg-type]


@pytest.mark.usefixtures("funded")
def test_query_service(
    db_session, flat_engine, flat_store, build_request, placer, other_placer, clock
) -> None:
    query = RegistryQueryService(db_session, flat_store, clock=clock)
    assert query.placement_at(10, 10) is None
    assert query.fee_for(10, 10).amount == 1_000_000

    flat_engine.place(build_request(flat_store, placer, 10, 10))
    flat_engine.place(build_request(flat_store, other_placer, 20, 20))
    clock.advance(30)
    flat_engine.place(build_request(flat_store, placer, 30, 30))

    assert query.placement_at(10, 10)["placed_by"] == placer.pubkey_hex
    assert query.fee_for(10, 10).amount == 5_000_000
    assert [p["coordinates"] for p in query.placements_at([(10, 10), (11, 11), (30, 30)])] == [
        [10, 10],
        [30, 30],
    ]

    status = query.cooldown_for(placer.pubkey)
    assert status["placement_count"] == 2
    assert status["remaining_cooldown"] == 30
    assert status["can_place"] is False

    fresh = query.cooldown_for(KEY_A)
    assert fresh["can_place"] is True
    assert fresh["placement_count"] == 0

    board = query.leaderboard()
    assert [entry["user"] for entry in board] == [placer.pubkey_hex, other_placer.pubkey_hex]
    assert board[0]["rank"] == 1

    addresses = query.addresses_for(10, 10, placer.pubkey)
    assert addresses["strategy"] == "flat"
    assert addresses["record_address"] == flat_store.derive(10, 10).hex
    assert "cooldown_address" in addresses
    assert query.cluster(0) is None


def test_cluster_for(db_session, cluster_store) -> None:
    query = RegistryQueryService(db_session, cluster_store)
    described = query.cluster_for(250_000, 150_000)
    assert described["bounds"] == [200_000, 299_999, 100_000, 199_999]
    assert described["address"] == cluster_store.derive(250_000, 150_000).hex
    assert query.cluster(described["cluster_id"]) is None
