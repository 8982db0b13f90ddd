from __future__ import annotations

from typing import Any, Optional

import requests
from bs4 import BeautifulSoup

from drhub.errors import SourceShapeError
from drhub.integrations.set_browser import USER_AGENT
from drhub.schemas.source import SourceResult
from drhub.services.field_parser import parse_price, parse_volume

THAIWARRANT_DR_URL = "https://www.thaiwarrant.com/dr/search"
RESULTS_TABLE_ID = "MainContent_gvDRSearch"
MIN_COLUMNS = 8


class ThaiWarrantSource:
    """Secondary source: the public ThaiWarrant DR search results table."""

    name = "thaiwarrant"

    def __init__(
        self,
        *,
        session: Optional[Any] = None,
        url: str = THAIWARRANT_DR_URL,
        timeout_sec: float = 30.0,
    ) -> None:
        self.session = session or requests
        self.url = url
        self.timeout_sec = timeout_sec

    def _get_html(self) -> str:
        response = self.session.get(
            self.url,
            headers={
                "User-Agent": USER_AGENT,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            },
            timeout=self.timeout_sec,
        )
        response.raise_for_status()
        return response.text

    @staticmethod
    def parse_table(html: str) -> list[dict[str, Any]]:
        soup = BeautifulSoup(html, "html.parser")
        table = soup.find(id=RESULTS_TABLE_ID)
        if table is None:
            raise SourceShapeError(f"table #{RESULTS_TABLE_ID} not found")

        rows: list[dict[str, Any]] = []
        for index, tr in enumerate(table.find_all("tr")):
            if index == 0:
                continue
            cells = [td.get_text(strip=True) for td in tr.find_all("td")]
            if len(cells) < MIN_COLUMNS:
                continue

            symbol = cells[0]
            underlying = cells[6]
            price = parse_price(cells[1])
            value = parse_volume(cells[3])
            rows.append(
                {
                    "symbol": symbol,
                    "name": f"{symbol} ({underlying})",
                    "underlying": underlying,
                    "market": cells[7],
                    "description": cells[5],
                    "price": price,
                    "change_percent": cells[2],
                    "value": value,
                    "volume": round(value / price) if price else 0,
                    "ratio": cells[4],
                }
            )
        return rows

    def fetch(self) -> SourceResult:
        print(f"[SOURCE][thaiwarrant_fetch] url={self.url}", flush=True)
        try:
            rows = self.parse_table(self._get_html())
        except Exception as exc:
            print(f"[SOURCE][thaiwarrant_fetch_error] error={exc}", flush=True)
            return SourceResult.failed(self.name, str(exc))

        print(f"[SOURCE][thaiwarrant_fetch_result] rows={len(rows)}", flush=True)
        return SourceResult.from_rows(self.name, rows)
