from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable

from drhub.services.market_hours import DEFAULT_REFRESH_WINDOWS, RefreshWindow, active_refresh_window, to_bangkok
from drhub.services.refresh import RefreshService


class RefreshScheduler:
    """Runs one full refresh at start, then session-aware refreshes on a fixed tick."""

    def __init__(
        self,
        refresh_service: RefreshService,
        *,
        interval_sec: float = 300.0,
        auto_refresh: bool = True,
        windows: tuple[RefreshWindow, ...] = DEFAULT_REFRESH_WINDOWS,
        now_fn: Callable[[], datetime] | None = None,
    ) -> None:
        self.refresh_service = refresh_service
        self.interval_sec = interval_sec
        self.auto_refresh = auto_refresh
        self.windows = windows
        self.now_fn = now_fn or to_bangkok
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.ticks = 0

    def tick(self, now: datetime | None = None) -> dict | None:
        self.ticks += 1
        window = active_refresh_window(now or self.now_fn(), self.windows)
        if window is None:
            return None
        print(f"[SCHED][tick] kind={window.kind}", flush=True)
        if window.kind == "full":
            return self.refresh_service.full_refresh()
        return self.refresh_service.price_refresh()

    def _loop(self) -> None:
        try:
            self.refresh_service.full_refresh(wait=True)
        except Exception as exc:
            print(f"[SCHED][initial_refresh_error] error={exc}", flush=True)

        if not self.auto_refresh:
            return
        while not self._stop_event.wait(self.interval_sec):
            try:
                self.tick()
            except Exception as exc:
                print(f"[SCHED][tick_error] error={exc}", flush=True)

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, daemon=True, name="dr-refresh-scheduler")
        self._thread.start()
        print(
            f"[SCHED][start] auto_refresh={int(self.auto_refresh)} interval_sec={self.interval_sec}",
            flush=True,
        )

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=1.0)
        print("[SCHED][stop]", flush=True)
