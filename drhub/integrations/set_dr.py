from __future__ import annotations

import re
from typing import Any

from drhub.errors import SourceShapeError
from drhub.integrations.set_browser import SetBrowserClient
from drhub.schemas.dr import DRRecord, MarketOverview, Rankings
from drhub.schemas.source import SourceResult
from drhub.services.field_parser import parse_price, parse_volume

SET_DR_SEARCH_URL = "https://www.set.or.th/api/set/dr/search?symbols=&tradeDateType=C&lang=th"
SET_DR_OVERVIEW_URL = "https://www.set.or.th/api/set/dr/market-overview"
SET_RANKING_URL = "https://www.set.or.th/api/set/ranking/{ranking}/SET/X?count={count}"

_TRAILING_DIGITS = re.compile(r"\d+$")


class SetDrSource:
    """Primary source: the SET DR search endpoint, read through a headless browser."""

    name = "set"

    def __init__(self, browser: SetBrowserClient, *, url: str = SET_DR_SEARCH_URL) -> None:
        self.browser = browser
        self.url = url

    @staticmethod
    def _to_row(item: dict[str, Any]) -> dict[str, Any]:
        symbol = str(item.get("symbol") or "").strip()
        return {
            "symbol": symbol,
            "name": item.get("securityName") or symbol,
            "underlying": item.get("underlyingName") or _TRAILING_DIGITS.sub("", symbol),
            "market": item.get("exchange") or "N/A",
            "price": item.get("last"),
            "change": item.get("change"),
            "change_percent": item.get("percentChange"),
            "volume": item.get("volume"),
            # endpoint reports value in thousands of baht and market cap in millions
            "value": parse_volume(item.get("value")) * 1000,
            "high": item.get("high"),
            "low": item.get("low"),
            "open": item.get("open"),
            "prev_close": item.get("prior"),
            "bid": item.get("bid"),
            "ask": item.get("offer"),
            "ratio": item.get("drRatio") or "100:1",
            "market_cap": parse_price(item.get("marketCap")) * 1_000_000,
        }

    def fetch(self) -> SourceResult:
        print(f"[SOURCE][set_fetch] url={self.url}", flush=True)
        try:
            with self.browser.session() as page:
                payload = page.read_json(self.url)
            if not isinstance(payload, list):
                raise SourceShapeError(f"expected JSON array, got {type(payload).__name__}")
            rows = [self._to_row(item) for item in payload if isinstance(item, dict)]
        except Exception as exc:
            print(f"[SOURCE][set_fetch_error] error={exc}", flush=True)
            return SourceResult.failed(self.name, str(exc))

        print(f"[SOURCE][set_fetch_result] rows={len(rows)}", flush=True)
        return SourceResult.from_rows(self.name, rows)


def _first_present(payload: dict, *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def parse_overview(payload: Any) -> MarketOverview | None:
    if not isinstance(payload, dict):
        return None
    gainers = _first_present(payload, "gainer", "gainers", "advance")
    losers = _first_present(payload, "loser", "losers", "decline")
    if gainers is None or losers is None:
        return None
    return MarketOverview(
        gainers=int(parse_price(gainers)),
        losers=int(parse_price(losers)),
        unchanged=int(parse_price(_first_present(payload, "unchanged", "unchange"))),
        total_value=parse_volume(_first_present(payload, "totalValue", "value")),
        total_volume=parse_volume(_first_present(payload, "totalVolume", "volume")),
        source="live",
    )


def resolve_ranking(payload: Any, by_symbol: dict[str, DRRecord], limit: int) -> list[DRRecord]:
    """Map a ranking payload onto records of the current record set, in ranking order."""
    entries = payload.get("stocks") if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        return []

    out: list[DRRecord] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        record = by_symbol.get(str(entry.get("symbol") or "").strip().upper())
        if record is not None and record not in out:
            out.append(record)
        if len(out) >= limit:
            break
    return out


class SetMarketStatsSource:
    """Live DR market overview and rankings, resolved against a fresh record set."""

    RANKINGS = {
        "top_gainers": "topGainer",
        "top_losers": "topLoser",
        "most_active_value": "mostActiveValue",
    }

    def __init__(
        self,
        browser: SetBrowserClient,
        *,
        overview_url: str = SET_DR_OVERVIEW_URL,
        ranking_url: str = SET_RANKING_URL,
        limit: int = 10,
    ) -> None:
        self.browser = browser
        self.overview_url = overview_url
        self.ranking_url = ranking_url
        self.limit = limit

    def _read_optional(self, page, url: str) -> Any:
        try:
            return page.read_json(url, wait_until="networkidle")
        except Exception as exc:
            print(f"[STATS][fetch_error] url={url} error={exc}", flush=True)
            return None

    def fetch(self, records: list[DRRecord]) -> tuple[MarketOverview | None, Rankings | None]:
        by_symbol = {record.symbol: record for record in records}
        try:
            with self.browser.session() as page:
                overview = parse_overview(self._read_optional(page, self.overview_url))
                resolved = {
                    field: resolve_ranking(
                        self._read_optional(
                            page, self.ranking_url.format(ranking=ranking, count=self.limit)
                        ),
                        by_symbol,
                        self.limit,
                    )
                    for field, ranking in self.RANKINGS.items()
                }
        except Exception as exc:
            print(f"[STATS][session_error] error={exc}", flush=True)
            return None, None

        rankings = None
        if resolved["top_gainers"]:
            rankings = Rankings(**resolved, source="live")

        print(
            f"[STATS][fetch_result] overview={int(overview is not None)} "
            f"rankings={int(rankings is not None)}",
            flush=True,
        )
        return overview, rankings
