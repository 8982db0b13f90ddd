from __future__ import annotations

from datetime import datetime, time
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from drhub.schemas.dr import TradingSession

BKK = ZoneInfo("Asia/Bangkok")
DAY_OPEN_TIME = time(10, 0)
DAY_CLOSE_TIME = time(16, 30)
NIGHT_OPEN_TIME = time(19, 0)
NIGHT_CLOSE_TIME = time(3, 0)

RefreshKind = Literal["full", "price"]


class RefreshWindow(BaseModel):
    kind: RefreshKind
    weekdays: frozenset[int]
    start: time
    end: time

    def contains(self, current: datetime) -> bool:
        return current.weekday() in self.weekdays and self.start <= current.time() <= self.end


# Monday=0. The night price window is split at midnight so each part stays a
# plain same-day range: Mon-Fri evenings, then Tue-Sat early mornings.
DEFAULT_REFRESH_WINDOWS: tuple[RefreshWindow, ...] = (
    RefreshWindow(kind="full", weekdays=frozenset({0, 1, 2, 3, 4}), start=time(10, 0), end=time(16, 59, 59)),
    RefreshWindow(kind="price", weekdays=frozenset({0, 1, 2, 3, 4}), start=time(19, 0), end=time(23, 59, 59)),
    RefreshWindow(kind="price", weekdays=frozenset({1, 2, 3, 4, 5}), start=time(0, 0), end=time(3, 59, 59)),
)


def to_bangkok(now: datetime | None = None) -> datetime:
    current = now or datetime.now(BKK)
    if current.tzinfo is None:
        return current.replace(tzinfo=BKK)
    return current.astimezone(BKK)


def session_status(session: TradingSession, now: datetime | None = None) -> Literal["day", "night"] | None:
    """Return which session of a DR is open at ``now`` (Bangkok time), if any."""
    current_time = to_bangkok(now).time()

    if DAY_OPEN_TIME <= current_time <= DAY_CLOSE_TIME:
        return "day"
    # night window crosses midnight
    if session.has_night_trading and (current_time >= NIGHT_OPEN_TIME or current_time <= NIGHT_CLOSE_TIME):
        return "night"
    return None


def is_session_open(session: TradingSession, now: datetime | None = None) -> bool:
    return session_status(session, now) is not None


def active_refresh_window(
    now: datetime | None = None,
    windows: tuple[RefreshWindow, ...] = DEFAULT_REFRESH_WINDOWS,
) -> RefreshWindow | None:
    current = to_bangkok(now)
    for window in windows:
        if window.contains(current):
            return window
    return None
