"""Tests for the binary record layouts."""

from __future__ import annotations

import hashlib

import pytest

from solplace.core.errors import ClusterFull, InvalidAccount
from solplace.records import (
    CellEntry,
    ClusterRecord,
    CooldownRecord,
    PlacementRecord,
    account_discriminator,
)

KEY_A = bytes([1]) * 32
KEY_B = bytes([2]) * 32


def _cell(lat: int, lng: int, uri: str = "https://example.com/a.png") -> CellEntry:
    return CellEntry(
        lat=lat,
        lng=lng,
        token_mint=KEY_A,
        logo_uri=uri,
        logo_hash=hashlib.sha256(uri.encode()).digest(),
        placed_by=KEY_B,
        placed_at=1_700_000_000,
    )


def test_record_sizes() -> None:
    assert PlacementRecord.SIZE == 327
    assert CellEntry.SIZE == 318
    assert ClusterRecord.BASE_SIZE == 49
    assert ClusterRecord.space_for(10) == 49 + 318 * 10
    assert CooldownRecord.SIZE == 53


def test_discriminator_is_type_name_hash() -> None:
    expected = hashlib.sha256(b"account:LogoPlacement").digest()[:8]
    assert account_discriminator("LogoPlacement") == expected
    assert PlacementRecord.discriminator() == expected
    assert CooldownRecord.discriminator() != ClusterRecord.discriminator()


def test_placement_record_layout() -> None:
    record = PlacementRecord(
        lat=-1,
        lng=2,
        token_mint=KEY_A,
        logo_uri="ipfs://logo",
        logo_hash=bytes(32),
        placed_by=KEY_B,
        placed_at=42,
        overwrite_count=3,
        bump=254,
    )
    data = record.encode()
    assert len(data) == PlacementRecord.SIZE
    assert data[8:12] == (-1).to_bytes(4, "little", signed=True)
    assert data[48:52] == len("ipfs://logo").to_bytes(4, "little")
    assert PlacementRecord.decode(data) == record


def test_decode_rejects_wrong_discriminator() -> None:
    data = CooldownRecord(user=KEY_A, last_placement=1, placement_count=1, bump=200).encode()
    with pytest.raises(InvalidAccount):
        PlacementRecord.decode(data)


def test_decode_rejects_truncated_data() -> None:
    data = PlacementRecord(lat=0, lng=0).encode()
    with pytest.raises(InvalidAccount):
        PlacementRecord.decode(data[:20])


def test_cluster_add_or_update() -> None:
    cluster = ClusterRecord(cluster_id=7, bounds=[0, 99_999, 0, 99_999], max_cells=2)
    assert cluster.add_or_update_cell(_cell(1, 1)) is False
    assert cluster.add_or_update_cell(_cell(2, 2)) is False
    assert cluster.cell_count == 2
    assert cluster.is_full

    with pytest.raises(ClusterFull):
        cluster.add_or_update_cell(_cell(3, 3))

    assert cluster.add_or_update_cell(_cell(1, 1, "https://example.com/b.png")) is True
    assert cluster.cell_count == 2
    assert [cell.coordinates for cell in cluster.cells] == [(1, 1), (2, 2)]
    assert cluster.find_cell(1, 1).logo_uri == "https://example.com/b.png"


def test_cluster_record_layout() -> None:
    cluster = ClusterRecord(cluster_id=2**63 + 5, bounds=[1, 2, 3, 4], last_updated=9, bump=250)
    cluster.add_or_update_cell(_cell(10, 20))
    data = cluster.encode()
    assert len(data) == cluster.space
    decoded = ClusterRecord.decode(data)
    assert decoded == cluster


def test_cluster_decode_rejects_oversized_list() -> None:
    cluster = ClusterRecord(cluster_id=1, bounds=[0, 0, 0, 0], max_cells=3)
    for index in range(3):
        cluster.add_or_update_cell(_cell(index, index))
    with pytest.raises(InvalidAccount):
        ClusterRecord.decode(cluster.encode(), max_cells=2)
