"""Clustered-strategy record: a bounded list of cells per grid bucket."""

from __future__ import annotations

from dataclasses import dataclass, field

from solplace.core.constants import (
    DIGEST_LENGTH_BYTES,
    MAX_CELLS_PER_CLUSTER,
    MAX_LOGO_URI_LENGTH,
    PUBKEY_LENGTH_BYTES,
)
from solplace.core.errors import ClusterFull, InvalidAccount
from solplace.records.layout import (
    DISCRIMINATOR_LENGTH,
    LayoutReader,
    LayoutWriter,
    account_discriminator,
)


@dataclass(slots=True)
class CellEntry:
    """One placement inside a cluster."""

    # coordinates + token_mint + uri prefix + uri + logo_hash + placed_by
    # + placed_at + overwrite_count
    SIZE = 8 + 32 + 4 + MAX_LOGO_URI_LENGTH + 32 + 32 + 8 + 2

    lat: int
    lng: int
    token_mint: bytes
    logo_uri: str
    logo_hash: bytes
    placed_by: bytes
    placed_at: int
    overwrite_count: int = 0

    @property
    def coordinates(self) -> tuple[int, int]:
        return self.lat, self.lng

    def write(self, writer: LayoutWriter) -> None:
        (
            writer.i32(self.lat)
            .i32(self.lng)
            .fixed(self.token_mint, PUBKEY_LENGTH_BYTES)
            .string(self.logo_uri)
            .fixed(self.logo_hash, DIGEST_LENGTH_BYTES)
            .fixed(self.placed_by, PUBKEY_LENGTH_BYTES)
            .i64(self.placed_at)
            .u16(self.overwrite_count)
        )

    @classmethod
    def read(cls, reader: LayoutReader) -> CellEntry:
        return cls(
            lat=reader.i32(),
            lng=reader.i32(),
            token_mint=reader.fixed(PUBKEY_LENGTH_BYTES),
            logo_uri=reader.string(MAX_LOGO_URI_LENGTH),
            logo_hash=reader.fixed(DIGEST_LENGTH_BYTES),
            placed_by=reader.fixed(PUBKEY_LENGTH_BYTES),
            placed_at=reader.i64(),
            overwrite_count=reader.u16(),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "coordinates": [self.lat, self.lng],
            "token_mint": self.token_mint.hex(),
            "logo_uri": self.logo_uri,
            "logo_hash": self.logo_hash.hex(),
            "placed_by": self.placed_by.hex(),
            "placed_at": self.placed_at,
            "overwrite_count": self.overwrite_count,
        }


@dataclass(slots=True)
class ClusterRecord:
    """All placements inside one grid bucket.

    Invariants: ``len(cells) <= max_cells``, at most one cell per coordinate,
    cells kept in placement order.
    """

    TYPE_NAME = "CellCluster"
    # discriminator + cluster_id + bounds + cell_count + vec prefix
    # + last_updated + bump
    BASE_SIZE = DISCRIMINATOR_LENGTH + 8 + 16 + 4 + 4 + 8 + 1

    cluster_id: int
    bounds: list[int]
    cell_count: int = 0
    cells: list[CellEntry] = field(default_factory=list)
    last_updated: int = 0
    bump: int = 0
    max_cells: int = MAX_CELLS_PER_CLUSTER

    @classmethod
    def space_for(cls, max_cells: int = MAX_CELLS_PER_CLUSTER) -> int:
        return cls.BASE_SIZE + CellEntry.SIZE * max_cells

    @property
    def space(self) -> int:
        return self.space_for(self.max_cells)

    @property
    def is_full(self) -> bool:
        return len(self.cells) >= self.max_cells

    @classmethod
    def discriminator(cls) -> bytes:
        return account_discriminator(cls.TYPE_NAME)

    def find_cell_index(self, lat: int, lng: int) -> int | None:
        for index, cell in enumerate(self.cells):
            if cell.lat == lat and cell.lng == lng:
                return index
        return None

    def find_cell(self, lat: int, lng: int) -> CellEntry | None:
        index = self.find_cell_index(lat, lng)
        return None if index is None else self.cells[index]

    def add_or_update_cell(self, cell: CellEntry) -> bool:
        """Insert `cell` or replace the one at the same coordinate.

        Returns True when an existing cell was replaced. Raises `ClusterFull`
        when a new coordinate does not fit.
        """
        index = self.find_cell_index(cell.lat, cell.lng)
        if index is not None:
            self.cells[index] = cell
            return True
        if self.is_full:
            raise ClusterFull()
        self.cells.append(cell)
        self.cell_count += 1
        return False

    def encode(self) -> bytes:
        writer = (
            LayoutWriter()
            .raw(self.discriminator())
            .u64(self.cluster_id)
        )
        for bound in self.bounds:
            writer.i32(bound)
        writer.u32(self.cell_count).u32(len(self.cells))
        for cell in self.cells:
            cell.write(writer)
        writer.i64(self.last_updated).u8(self.bump)
        return writer.getvalue(self.space)

    @classmethod
    def decode(cls, data: bytes, max_cells: int = MAX_CELLS_PER_CLUSTER) -> ClusterRecord:
        reader = LayoutReader(data)
        reader.expect_discriminator(cls.discriminator())
        cluster_id = reader.u64()
        bounds = [reader.i32() for _ in range(4)]
        cell_count = reader.u32()
        length = reader.u32()
        if length > max_cells:
            raise InvalidAccount("Invalid account: cluster holds more cells than its capacity")
        cells = [CellEntry.read(reader) for _ in range(length)]
        return cls(
            cluster_id=cluster_id,
            bounds=bounds,
            cell_count=cell_count,
            cells=cells,
            last_updated=reader.i64(),
            bump=reader.u8(),
            max_cells=max_cells,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "cluster_id": self.cluster_id,
            "bounds": list(self.bounds),
            "cell_count": self.cell_count,
            "cells": [cell.to_dict() for cell in self.cells],
            "last_updated": self.last_updated,
            "bump": self.bump,
            "max_cells": self.max_cells,
        }
