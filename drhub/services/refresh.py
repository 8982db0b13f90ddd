from __future__ import annotations

import threading
import time
from typing import Callable, Iterable

from drhub.schemas.dr import DRRecord, Rankings, Snapshot
from drhub.services.record_builder import build_records
from drhub.services.snapshot_store import RANKING_LIMIT, SnapshotStore
from drhub.services.source_chain import SourceChain

PRICE_FIELDS = ("price", "change", "change_percent", "volume", "value", "high", "low", "open")


class RefreshService:
    """Full and price-only refresh cycles; at most one cycle runs at a time."""

    def __init__(
        self,
        *,
        store: SnapshotStore,
        source_chain: SourceChain,
        price_source=None,
        stats_source=None,
        fallback_sources: Iterable[str] = ("static",),
        stale_after_sec: int = 6 * 3600,
        ranking_limit: int = RANKING_LIMIT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.source_chain = source_chain
        self.price_source = price_source
        self.stats_source = stats_source
        self.fallback_sources = frozenset(fallback_sources)
        self.stale_after_sec = stale_after_sec
        self.ranking_limit = ranking_limit
        self.clock = clock
        self._refresh_lock = threading.Lock()
        self.last_result: dict | None = None
        self.metrics_counters = {
            "full_runs": 0,
            "price_runs": 0,
            "coalesced": 0,
            "failed": 0,
            "kept_last_good": 0,
            "price_matched": 0,
            "stats_live": 0,
            "stats_aggregated": 0,
        }

    def _inc(self, key: str, value: int = 1) -> None:
        self.metrics_counters[key] = self.metrics_counters.get(key, 0) + value

    def _mark_freshness(self, records: list[DRRecord], now: int) -> list[DRRecord]:
        out: list[DRRecord] = []
        for record in records:
            age = float(max(now - record.last_update, 0))
            state = "HEALTHY" if age <= self.stale_after_sec else "STALE"
            out.append(record.model_copy(update={"freshness_sec": age, "state": state}))
        return out

    def _age_current(self, current: Snapshot | None, now: int) -> Snapshot | None:
        """Re-mark freshness on the served snapshot without touching its data."""
        if current is None:
            return None
        records = self._mark_freshness(current.records, now)
        by_symbol = {record.symbol: record for record in records}

        def remap(rows: list[DRRecord]) -> list[DRRecord]:
            return [by_symbol.get(row.symbol, row) for row in rows]

        snapshot = self.store.build(
            records,
            source=current.source,
            overview=current.overview,
            rankings=Rankings(
                top_gainers=remap(current.rankings.top_gainers),
                top_losers=remap(current.rankings.top_losers),
                most_active_value=remap(current.rankings.most_active_value),
                source=current.rankings.source,
            ),
            now=current.updated_at,
        )
        self.store.replace(snapshot)
        stale = sum(1 for record in records if record.state == "STALE")
        print(
            f"[REFRESH][freshness_marked] generation={snapshot.generation} stale={stale}",
            flush=True,
        )
        return snapshot

    def _single_flight(self, kind: str, run: Callable[[], dict], wait: bool) -> dict:
        if not self._refresh_lock.acquire(blocking=wait):
            self._inc("coalesced")
            print(f"[REFRESH][coalesced] kind={kind} reason=REFRESH_IN_PROGRESS", flush=True)
            return {"kind": kind, "status": "skipped", "reason": "REFRESH_IN_PROGRESS"}
        try:
            result = run()
        finally:
            self._refresh_lock.release()
        self.last_result = result
        return result

    def full_refresh(self, *, wait: bool = False) -> dict:
        return self._single_flight("full", self._run_full, wait)

    def price_refresh(self, *, wait: bool = False) -> dict:
        return self._single_flight("price", self._run_price, wait)

    def seed(self, source) -> bool:
        """Fill an empty store from an I/O-free source so reads never wait on the first live refresh."""
        with self._refresh_lock:
            if self.store.current() is not None:
                return False
            now = int(self.clock())
            result = source.fetch()
            records = build_records(result.rows, source=result.source, now=now) if result.ok else []
            if not records:
                print(f"[REFRESH][seed_failed] source={result.source} error={result.error}", flush=True)
                return False
            snapshot = self.store.build(
                self._mark_freshness(records, now),
                source=result.source,
                ranking_limit=self.ranking_limit,
                now=now,
            )
            self.store.replace(snapshot)
        print(
            f"[REFRESH][seeded] source={snapshot.source} records={len(snapshot.records)} "
            f"generation={snapshot.generation}",
            flush=True,
        )
        return True

    def _fetch_stats(self, records: list[DRRecord]):
        if self.stats_source is None:
            return None, None
        try:
            return self.stats_source.fetch(records)
        except Exception as exc:
            print(f"[REFRESH][stats_error] error={exc}", flush=True)
            return None, None

    def _run_full(self) -> dict:
        now = int(self.clock())
        self._inc("full_runs")
        print("[REFRESH][full_start]", flush=True)

        result = self.source_chain.fetch()
        records = build_records(result.rows, source=result.source, now=now) if result.ok else []
        current = self.store.current()
        if not records:
            self._inc("failed")
            print(f"[REFRESH][full_failed] error={result.error}", flush=True)
            self._age_current(current, now)
            return {"kind": "full", "status": "failed", "error": result.error}

        if (
            result.source in self.fallback_sources
            and current is not None
            and current.source not in self.fallback_sources
        ):
            self._inc("kept_last_good")
            print(
                f"[REFRESH][kept_last_good] live_source={current.source} "
                f"generation={current.generation}",
                flush=True,
            )
            self._age_current(current, now)
            return {"kind": "full", "status": "kept_last_good", "source": current.source}

        records = self._mark_freshness(records, now)
        overview, rankings = self._fetch_stats(records)
        self._inc("stats_live" if overview is not None or rankings is not None else "stats_aggregated")

        snapshot = self.store.build(
            records,
            source=result.source,
            overview=overview,
            rankings=rankings,
            ranking_limit=self.ranking_limit,
            now=now,
        )
        self.store.replace(snapshot)
        print(
            f"[REFRESH][full_done] source={snapshot.source} records={len(snapshot.records)} "
            f"generation={snapshot.generation} overview={snapshot.overview.source} "
            f"rankings={snapshot.rankings.source}",
            flush=True,
        )
        return {
            "kind": "full",
            "status": "ok",
            "source": snapshot.source,
            "records": len(snapshot.records),
            "generation": snapshot.generation,
        }

    def _run_price(self) -> dict:
        now = int(self.clock())
        current = self.store.current()
        if current is None or self.price_source is None:
            return {"kind": "price", "status": "skipped", "reason": "NO_SNAPSHOT_OR_SOURCE"}

        self._inc("price_runs")
        result = self.price_source.fetch()
        if not result.ok:
            self._inc("failed")
            print(f"[REFRESH][price_failed] status={result.status} error={result.error}", flush=True)
            self._age_current(current, now)
            return {"kind": "price", "status": "failed", "error": result.error}

        live = {record.symbol: record for record in build_records(result.rows, source=result.source, now=now)}
        matched = 0
        updated: list[DRRecord] = []
        for record in current.records:
            row = live.get(record.symbol)
            if row is None:
                updated.append(record)
                continue
            matched += 1
            changes = {field: getattr(row, field) for field in PRICE_FIELDS}
            changes["last_update"] = now
            updated.append(record.model_copy(update=changes))

        snapshot = self.store.build(
            self._mark_freshness(updated, now),
            source=current.source,
            ranking_limit=self.ranking_limit,
            now=now,
        )
        self.store.replace(snapshot)
        self._inc("price_matched", matched)
        print(
            f"[REFRESH][price_done] matched={matched} total={len(updated)} "
            f"generation={snapshot.generation}",
            flush=True,
        )
        return {"kind": "price", "status": "ok", "matched": matched, "generation": snapshot.generation}

    def metrics(self) -> dict:
        snapshot = self.store.current()
        now = int(self.clock())
        stale = 0
        if snapshot is not None:
            stale = sum(1 for r in snapshot.records if now - r.last_update > self.stale_after_sec)
        return {
            **self.metrics_counters,
            **self.source_chain.metrics(),
            "stale_records": stale,
            "snapshot_generation": snapshot.generation if snapshot else None,
            "snapshot_source": snapshot.source if snapshot else None,
            "last_update_time": self.store.last_update_time(),
            "last_result": self.last_result,
        }
