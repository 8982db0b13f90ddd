from __future__ import annotations

import threading
import time

from drhub.schemas.dr import DRRecord, MarketOverview, Rankings, Snapshot

RANKING_LIMIT = 10


def aggregate_overview(records: list[DRRecord]) -> MarketOverview:
    return MarketOverview(
        gainers=sum(1 for r in records if r.change_percent > 0),
        losers=sum(1 for r in records if r.change_percent < 0),
        unchanged=sum(1 for r in records if r.change_percent == 0),
        total_value=sum(r.value for r in records),
        total_volume=sum(r.volume for r in records),
        source="aggregated",
    )


def aggregate_rankings(records: list[DRRecord], limit: int = RANKING_LIMIT) -> Rankings:
    return Rankings(
        top_gainers=sorted(records, key=lambda r: r.change_percent, reverse=True)[:limit],
        top_losers=sorted(records, key=lambda r: r.change_percent)[:limit],
        most_active_value=sorted(records, key=lambda r: r.value, reverse=True)[:limit],
        source="aggregated",
    )


class SnapshotStore:
    """Holds the current snapshot; replace() swaps the whole generation at once."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: Snapshot | None = None
        self._generation = 0

    def build(
        self,
        records: list[DRRecord],
        *,
        source: str,
        overview: MarketOverview | None = None,
        rankings: Rankings | None = None,
        ranking_limit: int = RANKING_LIMIT,
        now: int | None = None,
    ) -> Snapshot:
        """Assemble a snapshot, aggregating overview/rankings from records when missing."""
        return Snapshot(
            generation=self.next_generation(),
            source=source,
            updated_at=int(time.time()) if now is None else now,
            records=list(records),
            overview=overview if overview is not None else aggregate_overview(records),
            rankings=rankings if rankings is not None else aggregate_rankings(records, ranking_limit),
        )

    def next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def replace(self, snapshot: Snapshot) -> None:
        with self._lock:
            self._snapshot = snapshot

    def current(self) -> Snapshot | None:
        with self._lock:
            return self._snapshot

    def last_update_time(self) -> int | None:
        snapshot = self.current()
        return snapshot.updated_at if snapshot else None
