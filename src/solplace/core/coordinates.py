"""Coordinate validation and the coarse cluster grid.

Coordinates are signed 32-bit micro-degrees. Cluster ids use truncating
division (toward zero), so bucket 0 spans both sides of the equator and the
prime meridian. Program clients derive the same ids, so this must not
change to floor division.
"""

from __future__ import annotations

from typing import NamedTuple

from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.constants import MICRODEGREES_PER_DEGREE
from solplace.core.errors import InvalidCoordinates, InvalidLatitude, InvalidLongitude

_U32_MASK = 0xFFFF_FFFF
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class ClusterBounds(NamedTuple):
    """Inclusive micro-degree bounds of a cluster bucket."""

    min_lat: int
    max_lat: int
    min_lng: int
    max_lng: int

    def as_list(self) -> list[int]:
        return [self.min_lat, self.max_lat, self.min_lng, self.max_lng]


def validate_coordinates(lat: int, lng: int, config: PlacementConfig = DEFAULT_CONFIG) -> None:
    """Raise if `lat`/`lng` fall outside the accepted micro-degree ranges.

    Latitude is checked before longitude, so a pair that is wrong on both
    axes reports `InvalidLatitude`.
    """
    if not config.min_latitude <= lat <= config.max_latitude:
        raise InvalidLatitude()
    if not config.min_longitude <= lng <= config.max_longitude:
        raise InvalidLongitude()


def to_microdegrees(lat: float, lng: float, config: PlacementConfig = DEFAULT_CONFIG) -> tuple[int, int]:
    """Convert decimal degrees to validated micro-degrees."""
    lat_micro = round(lat * MICRODEGREES_PER_DEGREE)
    lng_micro = round(lng * MICRODEGREES_PER_DEGREE)
    validate_coordinates(lat_micro, lng_micro, config)
    return lat_micro, lng_micro


def to_degrees(lat_micro: int, lng_micro: int) -> tuple[float, float]:
    """Convert micro-degrees back to decimal degrees."""
    return lat_micro / MICRODEGREES_PER_DEGREE, lng_micro / MICRODEGREES_PER_DEGREE


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def _to_i32(value: int) -> int:
    value &= _U32_MASK
    return value - (1 << 32) if value & 0x8000_0000 else value


def cluster_id_for(lat: int, lng: int, config: PlacementConfig = DEFAULT_CONFIG) -> int:
    """Return the 64-bit bucket id: latitude bucket high, longitude bucket low."""
    if not (_I32_MIN <= lat <= _I32_MAX and _I32_MIN <= lng <= _I32_MAX):
        raise InvalidCoordinates()
    cluster_lat = _trunc_div(lat, config.cluster_resolution)
    cluster_lng = _trunc_div(lng, config.cluster_resolution)
    return ((cluster_lat & _U32_MASK) << 32) | (cluster_lng & _U32_MASK)


def split_cluster_id(cluster_id: int) -> tuple[int, int]:
    """Return the signed (lat bucket, lng bucket) pair packed in `cluster_id`."""
    return _to_i32(cluster_id >> 32), _to_i32(cluster_id)


def cluster_bounds(cluster_id: int, config: PlacementConfig = DEFAULT_CONFIG) -> ClusterBounds:
    """Return the bucket bounds recorded in a new cluster record."""
    resolution = config.cluster_resolution
    cluster_lat, cluster_lng = split_cluster_id(cluster_id)
    return ClusterBounds(
        min_lat=cluster_lat * resolution,
        max_lat=cluster_lat * resolution + resolution - 1,
        min_lng=cluster_lng * resolution,
        max_lng=cluster_lng * resolution + resolution - 1,
    )
