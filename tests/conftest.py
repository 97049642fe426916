# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from dataclasses import dataclass
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from nacl.signing import SigningKey
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from solplace.api.v1.dependencies import get_clock, get_record_store
from solplace.core.addresses import derive_cooldown_address
from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.security import placement_message
from solplace.db.session import Base
from solplace.db.session import get_db as app_get_session
from solplace.main import app as fastapi_app
from solplace.services.ledger import LedgerService
from solplace.services.placement import PlacementEngine, PlacementRequest
from solplace.services.stores import ClusterStore, FlatStore, RecordStore
from solplace.services.tokens import TokenRegistry

TEST_DB_URL = "sqlite://"
START_TIME = 1_700_000_000
STARTING_BALANCE = 1_000_000_000


class FakeClock:
    """Settable clock standing in for wall time."""

    def __init__(self, now: int = START_TIME) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        self.now += seconds
        return self.now


@dataclass
class Identity:
    signing_key: SigningKey

    @property
    def pubkey(self) -> bytes:
        return self.signing_key.verify_key.encode()

    @property
    def pubkey_hex(self) -> str:
        return self.pubkey.hex()


def _generate_identity() -> Identity:
    return Identity(SigningKey.generate())


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # Let SQLAlchemy own BEGIN so savepoints nest inside the outer test transaction.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:  # pragma: no cover
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:  # pragma: no cover
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # commit() and rollback() inside the test only touch savepoints; the outer
    # transaction is discarded afterwards so every test sees an empty database.
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if a savepoint escaped.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def config() -> PlacementConfig:
    return DEFAULT_CONFIG


@pytest.fixture()
def flat_store(config: PlacementConfig) -> FlatStore:
    return FlatStore(config)


@pytest.fixture()
def cluster_store(config: PlacementConfig) -> ClusterStore:
    return ClusterStore(config)


@pytest.fixture()
def placer() -> Identity:
    """Primary participant."""
    return _generate_identity()


@pytest.fixture()
def other_placer() -> Identity:
    """Second participant."""
    return _generate_identity()


@pytest.fixture()
def token_mint(db_session: Session) -> bytes:
    """Register an initialised mint and return its address."""
    address = _generate_identity().pubkey
    TokenRegistry(db_session).register(address, decimals=6, supply=1_000_000)
    db_session.commit()
    return address


@pytest.fixture()
def funded(db_session: Session, placer: Identity, other_placer: Identity) -> None:
    """Give both participants a comfortable balance."""
    ledger = LedgerService(db_session)
    ledger.airdrop(placer.pubkey, STARTING_BALANCE)
    ledger.airdrop(other_placer.pubkey, STARTING_BALANCE)
    db_session.commit()


@pytest.fixture()
def build_request(
    config: PlacementConfig, token_mint: bytes
) -> Callable[..., PlacementRequest]:
    """Return a factory for well-formed placement requests against a store."""

    def _build(
        store: RecordStore,
        identity: Identity,
        lat: int,
        lng: int,
        logo_uri: str = "https://example.com/logo.png",
        **overrides: Any,
    ) -> PlacementRequest:
        fields: dict[str, Any] = {
            "placer": identity.pubkey,
            "lat": lat,
            "lng": lng,
            "token_mint": token_mint,
            "logo_uri": logo_uri,
            "record_address": store.derive(lat, lng).key,
            "cooldown_address": derive_cooldown_address(identity.pubkey, config).key,
            "token_mint_account": token_mint,
            "treasury": config.treasury,
        }
        fields.update(overrides)
        return PlacementRequest(**fields)

    return _build


@pytest.fixture()
def flat_engine(
    db_session: Session, flat_store: FlatStore, config: PlacementConfig, clock: FakeClock
) -> PlacementEngine:
    return PlacementEngine(db_session, flat_store, config=config, clock=clock)


@pytest.fixture()
def cluster_engine(
    db_session: Session, cluster_store: ClusterStore, config: PlacementConfig, clock: FakeClock
) -> PlacementEngine:
    return PlacementEngine(db_session, cluster_store, config=config, clock=clock)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def store_strategy() -> str:
    """Record store used by API tests; override per module for clustered runs."""
    return "flat"


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    clock: FakeClock,
    config: PlacementConfig,
    store_strategy: str,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    store = ClusterStore(config) if store_strategy == "clustered" else FlatStore(config)
    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_record_store] = lambda: store
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_clock, None)
        app.dependency_overrides.pop(get_record_store, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def signed_payload(token_mint: bytes) -> Callable[..., dict[str, Any]]:
    """Return a factory for signed placement request bodies."""

    def _build(
        identity: Identity,
        lat: int,
        lng: int,
        *,
        logo_uri: str = "https://example.com/logo.png",
        client_nonce: str = "nonce-1",
        **extra: Any,
    ) -> dict[str, Any]:
        message = placement_message(
            lat=lat,
            lng=lng,
            token_mint_hex=token_mint.hex(),
            logo_uri=logo_uri,
            client_nonce=client_nonce,
        )
        payload = {
            "lat": lat,
            "lng": lng,
            "token_mint": token_mint.hex(),
            "logo_uri": logo_uri,
            "placer": identity.pubkey_hex,
            "client_nonce": client_nonce,
            "signature": identity.signing_key.sign(message).signature.hex(),
        }
        payload.update(extra)
        return payload

    return _build
