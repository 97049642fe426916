"""Placement event emission.

Events are written to an outbox table inside the placement's own
transaction, so an event exists if and only if the placement committed.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from solplace.models.event_log import PlacementEventLog
from solplace.utils.hash import blake3_hexdigest

logger = logging.getLogger(__name__)

LOGO_PLACED_EVENT = "LogoPlacedEvent"


@dataclass(frozen=True, slots=True)
class LogoPlacedEvent:
    """Structured record of one successful placement."""

    user: str
    lat: int
    lng: int
    token_mint: str
    logo_uri: str
    fee_paid: int
    is_overwrite: bool
    timestamp: int
    cluster_id: int | None = None

    def to_dict(self) -> dict[str, object]:
        payload = asdict(self)
        if self.cluster_id is None:
            payload.pop("cluster_id")
        return payload

    def canonical_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


class EventPublisher:
    """Append events to the outbox and expose recent history."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def emit(self, event: LogoPlacedEvent) -> PlacementEventLog:
        payload = event.canonical_json()
        row = PlacementEventLog(
            event_type=LOGO_PLACED_EVENT,
            event_hash=blake3_hexdigest(payload.encode("utf-8")),
            payload=payload,
            placed_at=event.timestamp,
        )
        self.session.add(row)
        logger.info(
            "%s user=%s lat=%d lng=%d fee=%d overwrite=%s",
            LOGO_PLACED_EVENT,
            event.user,
            event.lat,
            event.lng,
            event.fee_paid,
            event.is_overwrite,
        )
        return row

    def recent(self, limit: int = 50) -> list[dict[str, object]]:
        """Return the newest events first, decoded from the outbox."""
        rows = self.session.execute(
            select(PlacementEventLog).order_by(PlacementEventLog.id.desc()).limit(limit)
        ).scalars()
        return [
            {"event": row.event_type, "event_hash": row.event_hash, **json.loads(row.payload)}
            for row in rows
        ]
