from __future__ import annotations

import re
import time
from typing import Any, Iterable

from drhub.schemas.dr import DRRecord
from drhub.services.classifier import (
    company_logo,
    detect_country,
    detect_sector,
    detect_trading_session,
    issuer_code_from_symbol,
    issuer_name,
)
from drhub.services.field_parser import parse_price, parse_volume

_TRAILING_DIGITS = re.compile(r"\d+$")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _pick(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) not in (None, ""):
            return raw[key]
    return None


def _optional_price(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return parse_price(value)


def build_record(raw: dict[str, Any], *, source: str, now: int | None = None) -> DRRecord | None:
    """Normalize one raw source row into a DRRecord.

    Every source goes through here so the output shape never depends on where a
    row came from. Rows without a symbol are dropped (returns None).

    Raw rows use snake_case keys (``change_percent``, ``prev_close``,
    ``market_cap``); the camelCase spellings of those three
    (``changePercent``, ``prevClose``, ``marketCap``) are accepted as well.
    """
    symbol = _text(raw.get("symbol")).upper()
    if not symbol:
        return None

    ts = int(time.time()) if now is None else now
    underlying = _text(raw.get("underlying")) or _TRAILING_DIGITS.sub("", symbol)
    name = _text(raw.get("name")) or symbol
    market = _text(raw.get("market"))

    country = detect_country(market, underlying, symbol)
    code = issuer_code_from_symbol(symbol)

    price = parse_price(raw.get("price"))
    volume = parse_volume(raw.get("volume"))
    if raw.get("value") in (None, ""):
        value = price * volume
    else:
        value = parse_volume(raw.get("value"))

    return DRRecord(
        symbol=symbol,
        underlying=underlying,
        name=name,
        market=market or "N/A",
        country=country,
        sector=detect_sector(_text(raw.get("description")) or name, underlying),
        issuer_code=code,
        issuer=issuer_name(code),
        ratio=_text(raw.get("ratio")) or "1:1",
        price=price,
        change=parse_price(raw.get("change")),
        change_percent=parse_price(_pick(raw, "change_percent", "changePercent")),
        volume=volume,
        value=value,
        high=parse_price(raw.get("high")),
        low=parse_price(raw.get("low")),
        open=parse_price(raw.get("open")),
        prev_close=parse_price(_pick(raw, "prev_close", "prevClose")),
        bid=_optional_price(raw.get("bid")),
        ask=_optional_price(raw.get("ask")),
        market_cap=parse_volume(_pick(raw, "market_cap", "marketCap")),
        pe=parse_price(raw.get("pe")),
        dividend=parse_price(raw.get("dividend")),
        trading_session=detect_trading_session(market, country, underlying),
        logo=company_logo(name, symbol),
        source=source,
        last_update=ts,
    )


def build_records(rows: Iterable[dict[str, Any]], *, source: str, now: int | None = None) -> list[DRRecord]:
    """Normalize rows, keeping the first occurrence of each symbol."""
    ts = int(time.time()) if now is None else now
    out: list[DRRecord] = []
    seen: set[str] = set()
    for raw in rows:
        if not isinstance(raw, dict):
            continue
        record = build_record(raw, source=source, now=ts)
        if record is None or record.symbol in seen:
            continue
        seen.add(record.symbol)
        out.append(record)
    return out
