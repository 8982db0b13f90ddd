from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import requests

from drhub.integrations.set_browser import USER_AGENT
from drhub.schemas.dr import NewsItem

SET_NEWS_URL = "https://www.set.or.th/api/set/news/{symbol}/list"
SET_NEWS_REFERER = "https://www.set.or.th/th/market/product/dr/overview"


def _first_text(item: dict, *keys: str) -> str | None:
    for key in keys:
        value = item.get(key)
        if value not in (None, ""):
            return str(value)
    return None


def parse_news(symbol: str, payload: Any) -> list[NewsItem]:
    entries = payload
    if isinstance(payload, dict):
        entries = payload.get("newsInfoList") or payload.get("items") or payload.get("data") or []
    if not isinstance(entries, list):
        return []

    out: list[NewsItem] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        headline = _first_text(entry, "headline", "title")
        if headline is None:
            continue
        out.append(
            NewsItem(
                symbol=symbol,
                headline=headline,
                url=_first_text(entry, "url", "link"),
                source=_first_text(entry, "source"),
                published_at=_first_text(entry, "datetime", "publishedAt", "date"),
                news_id=_first_text(entry, "id", "newsId"),
            )
        )
    return out


class SetNewsClient:
    """Best-effort per-symbol news; every failure becomes an empty list."""

    def __init__(
        self,
        *,
        session: Optional[Any] = None,
        url: str = SET_NEWS_URL,
        timeout_sec: float = 10.0,
        limit: int = 10,
    ) -> None:
        self.session = session or requests
        self.url = url
        self.timeout_sec = timeout_sec
        self.limit = limit

    def get_news(self, symbol: str) -> list[NewsItem]:
        value = str(symbol).strip().upper()
        if not value:
            return []
        try:
            response = self.session.get(
                self.url.format(symbol=quote(value, safe="")),
                headers={"User-Agent": USER_AGENT, "Referer": SET_NEWS_REFERER},
                params={"lang": "th", "limit": self.limit},
                timeout=self.timeout_sec,
            )
            response.raise_for_status()
            return parse_news(value, response.json())
        except Exception as exc:
            print(f"[NEWS][fetch_error] symbol={value} error={exc}", flush=True)
            return []
