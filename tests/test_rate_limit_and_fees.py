"""Tests for the cooldown window and fee schedule."""

from __future__ import annotations

import pytest

from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.errors import UserOnCooldown
from solplace.core.fees import calculate_fee
from solplace.core.rate_limit import U32_MAX, RateLimiter
from solplace.records.cooldown import CooldownRecord

NOW = 1_700_000_000
BASE_FEE = 1_000_000


def test_fresh_record_is_never_on_cooldown() -> None:
    limiter = RateLimiter()
    record = CooldownRecord(user=bytes(32))
    assert not limiter.is_on_cooldown(0, record)
    assert not limiter.is_on_cooldown(5, record)
    assert limiter.remaining(5, record) == 0


def test_cooldown_window_boundary() -> None:
    limiter = RateLimiter()
    record = CooldownRecord(user=bytes(32), last_placement=NOW)

    with pytest.raises(UserOnCooldown):
        limiter.check(NOW + 29, record)
    assert limiter.remaining(NOW + 29, record) == 1

    limiter.check(NOW + 30, record)
    limiter.check(NOW + 3600, record)
    assert limiter.remaining(NOW + 30, record) == 0


def test_record_placement_saturates() -> None:
    limiter = RateLimiter()
    record = CooldownRecord(user=bytes(32), placement_count=U32_MAX)
    limiter.record_placement(NOW, record)
    assert record.placement_count == U32_MAX
    assert record.last_placement == NOW


def test_custom_period() -> None:
    limiter = RateLimiter(PlacementConfig(cooldown_period=5))
    record = CooldownRecord(user=bytes(32), last_placement=NOW)
    assert limiter.is_on_cooldown(NOW + 4, record)
    assert not limiter.is_on_cooldown(NOW + 5, record)


def test_fee_schedule() -> None:
    fresh = calculate_fee(False)
    assert fresh.amount == BASE_FEE
    assert fresh.multiplier == 1

    overwrite = calculate_fee(True)
    assert overwrite.amount == BASE_FEE * 5 == DEFAULT_CONFIG.overwrite_fee
    assert overwrite.to_dict()["is_overwrite"] is True
