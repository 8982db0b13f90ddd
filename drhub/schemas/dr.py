from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class TradingSession(BaseModel):
    label: str
    day_session: str
    night_session: str | None = None
    has_night_trading: bool


class DRRecord(BaseModel):
    symbol: str
    underlying: str
    name: str
    market: str
    country: str
    sector: str
    issuer_code: str
    issuer: str
    ratio: str
    price: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    volume: float = 0.0
    value: float = 0.0
    high: float = 0.0
    low: float = 0.0
    open: float = 0.0
    prev_close: float = 0.0
    bid: float | None = None
    ask: float | None = None
    market_cap: float = 0.0
    pe: float = 0.0
    dividend: float = 0.0
    trading_session: TradingSession
    logo: str = "📊"
    source: str
    last_update: int
    freshness_sec: float = 0.0
    state: Literal["HEALTHY", "STALE"] = "HEALTHY"


class MarketOverview(BaseModel):
    gainers: int
    losers: int
    unchanged: int
    total_value: float
    total_volume: float
    source: Literal["live", "aggregated"] = "aggregated"


class Rankings(BaseModel):
    top_gainers: list[DRRecord] = Field(default_factory=list)
    top_losers: list[DRRecord] = Field(default_factory=list)
    most_active_value: list[DRRecord] = Field(default_factory=list)
    source: Literal["live", "aggregated"] = "aggregated"


class Snapshot(BaseModel):
    generation: int
    source: str
    updated_at: int
    records: list[DRRecord]
    overview: MarketOverview
    rankings: Rankings

    def get(self, symbol: str) -> DRRecord | None:
        for record in self.records:
            if record.symbol == symbol:
                return record
        return None


class NewsItem(BaseModel):
    symbol: str
    headline: str
    url: str | None = None
    source: str | None = None
    published_at: str | None = None
    news_id: str | None = None
