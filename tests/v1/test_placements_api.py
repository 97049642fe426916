"""Tests for the placement endpoints."""

from __future__ import annotations

import json

from fastapi import status
from fastapi.testclient import TestClient

import pytest

BASE_FEE = 1_000_000
LAT, LNG = 48_858_370, 2_294_481

pytestmark = pytest.mark.usefixtures("funded")


def test_create_placement(client: TestClient, signed_payload, placer) -> None:
    r = client.post("/api/v1/placements/", json=signed_payload(placer, LAT, LNG))
    assert r.status_code == status.HTTP_201_CREATED
    data = r.json()
    assert data["fee_paid"] == BASE_FEE
    assert data["is_overwrite"] is False
    assert data["overwrite_count"] == 0

    r = client.get(f"/api/v1/placements/{LAT}/{LNG}")
    assert r.status_code == status.HTTP_200_OK
    stored = r.json()
    assert stored["coordinates"] == [LAT, LNG]
    assert stored["placed_by"] == placer.pubkey_hex


def test_overwrite_fee_quote(client: TestClient, signed_payload, placer, other_placer) -> None:
    r = client.get("/api/v1/placements/fee", params={"lat": LAT, "lng": LNG})
    assert r.json()["amount"] == BASE_FEE

    client.post("/api/v1/placements/", json=signed_payload(placer, LAT, LNG))

    r = client.get("/api/v1/placements/fee", params={"lat": LAT, "lng": LNG})
    assert r.json() == {"amount": BASE_FEE * 5, "is_overwrite": True, "base_fee": BASE_FEE, "multiplier": 5}

    r = client.post("/api/v1/placements/", json=signed_payload(other_placer, LAT, LNG))
    assert r.status_code == status.HTTP_201_CREATED
    assert r.json()["fee_paid"] == BASE_FEE * 5
    assert r.json()["overwrite_count"] == 1


def test_missing_placement_returns_404(client: TestClient) -> None:
    r = client.get("/api/v1/placements/0/0")
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_negative_coordinates_in_path(client: TestClient, signed_payload, placer) -> None:
    client.post("/api/v1/placements/", json=signed_payload(placer, -33_868_820, -151_209_296))
    r = client.get("/api/v1/placements/-33868820/-151209296")
    assert r.status_code == status.HTTP_200_OK


def test_bad_signature_is_rejected(client: TestClient, signed_payload, placer) -> None:
    payload = signed_payload(placer, LAT, LNG)
    payload["logo_uri"] = "https://example.com/other.png"
    r = client.post("/api/v1/placements/", json=payload)
    assert r.status_code == status.HTTP_401_UNAUTHORIZED


def test_replayed_nonce_is_rejected(client: TestClient, signed_payload, placer, clock) -> None:
    payload = signed_payload(placer, LAT, LNG, client_nonce="once")
    assert client.post("/api/v1/placements/", json=payload).status_code == status.HTTP_201_CREATED
    clock.advance(60)
    r = client.post("/api/v1/placements/", json=payload)
    assert r.status_code == status.HTTP_409_CONFLICT


def test_cooldown_error_is_structured(client: TestClient, signed_payload, placer, clock) -> None:
    client.post("/api/v1/placements/", json=signed_payload(placer, LAT, LNG, client_nonce="a"))
    clock.advance(10)
    r = client.post("/api/v1/placements/", json=signed_payload(placer, LAT, LNG + 1, client_nonce="b"))
    assert r.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    detail = r.json()["detail"]
    assert detail["error"] == "UserOnCooldown"
    assert detail["code"] == 6005

    # The rejected nonce was rolled back and can be used once the window passes.
    clock.advance(20)
    r = client.post("/api/v1/placements/", json=signed_payload(placer, LAT, LNG + 1, client_nonce="b"))
    assert r.status_code == status.HTTP_201_CREATED


def test_invalid_latitude(client: TestClient, signed_payload, placer) -> None:
    r = client.post("/api/v1/placements/", json=signed_payload(placer, 90_000_001, 0))
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"]["error"] == "InvalidLatitude"


def test_logo_uri_too_long(client: TestClient, signed_payload, placer) -> None:
    r = client.post("/api/v1/placements/", json=signed_payload(placer, LAT, LNG, logo_uri="a" * 201))
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"]["error"] == "LogoUriTooLong"


def test_supplied_address_must_match(client: TestClient, signed_payload, placer) -> None:
    r = client.post(
        "/api/v1/placements/",
        json=signed_payload(placer, LAT, LNG, record_address="00" * 32),
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"]["error"] == "InvalidLogoPlacement"

    r = client.post(
        "/api/v1/placements/",
        json=signed_payload(placer, LAT, LNG, client_nonce="t", treasury="00" * 32),
    )
    assert r.json()["detail"]["error"] == "InvalidTreasury"


def test_malformed_keys_fail_validation(client: TestClient, signed_payload, placer) -> None:
    payload = signed_payload(placer, LAT, LNG)
    payload["placer"] = "zz"
    r = client.post("/api/v1/placements/", json=payload)
    assert r.status_code == 422


def test_failed_placement_writes_nothing(client: TestClient, signed_payload, placer) -> None:
    client.post(
        "/api/v1/placements/",
        json=signed_payload(placer, LAT, LNG, treasury="00" * 32),
    )
    assert client.get(f"/api/v1/placements/{LAT}/{LNG}").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/v1/events").json() == []
    r = client.get(f"/api/v1/ledger/{placer.pubkey_hex}")
    assert r.json()["lamports"] == 1_000_000_000


@pytest.mark.parametrize("field", ["logo_uri", "client_nonce"])
def test_lone_surrogate_is_rejected(client: TestClient, signed_payload, placer, field) -> None:
    payload = signed_payload(placer, LAT, LNG)
    payload[field] = "\ud800"
    # json.dumps escapes the surrogate, so the body itself is valid JSON.
    r = client.post(
        "/api/v1/placements/",
        content=json.dumps(payload),
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"] == f"{field} must be valid UTF-8"
    assert client.get(f"/api/v1/placements/{LAT}/{LNG}").status_code == status.HTTP_404_NOT_FOUND
