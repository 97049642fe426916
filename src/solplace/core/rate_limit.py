"""Per-participant placement cooldown."""

from __future__ import annotations

from solplace.core.config import DEFAULT_CONFIG, PlacementConfig
from solplace.core.errors import UserOnCooldown
from solplace.records.cooldown import CooldownRecord

U32_MAX = 0xFFFF_FFFF


class RateLimiter:
    """Enforce a fixed cooldown window between a participant's placements."""

    def __init__(self, config: PlacementConfig = DEFAULT_CONFIG) -> None:
        self._period = config.cooldown_period

    @property
    def period(self) -> int:
        return self._period

    def is_on_cooldown(self, now: int, record: CooldownRecord) -> bool:
        """Return True if `record` forbids a placement at `now`.

        A record that has never been used (``last_placement == 0``) is never
        on cooldown, whatever `now` is.
        """
        if record.last_placement == 0:
            return False
        return now - record.last_placement < self._period

    def check(self, now: int, record: CooldownRecord) -> None:
        if self.is_on_cooldown(now, record):
            raise UserOnCooldown(
                f"User is still on cooldown for {self.remaining(now, record)} more seconds"
            )

    def remaining(self, now: int, record: CooldownRecord) -> int:
        """Return seconds left before the participant may place again."""
        if record.last_placement == 0:
            return 0
        return max(0, self._period - (now - record.last_placement))

    def record_placement(self, now: int, record: CooldownRecord) -> None:
        record.last_placement = now
        record.placement_count = min(record.placement_count + 1, U32_MAX)
