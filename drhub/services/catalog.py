from __future__ import annotations

from collections import Counter

from drhub.schemas.dr import DRRecord

COUNTRY_NAMES: dict[str, str] = {
    "US": "สหรัฐอเมริกา",
    "CN": "จีน",
    "HK": "ฮ่องกง",
    "JP": "ญี่ปุ่น",
    "SG": "สิงคโปร์",
    "VN": "เวียดนาม",
    "EU": "ยุโรป",
    "TW": "ไต้หวัน",
    "KR": "เกาหลีใต้",
    "TH": "ไทย",
}


def country_name(code: str) -> str:
    return COUNTRY_NAMES.get(code, code)


def dr_stats(records: list[DRRecord]) -> dict:
    """Totals plus per-country, per-sector and per-issuer counts over one record set."""
    return {
        "total_dr": len(records),
        "total_volume": sum(r.volume for r in records),
        "total_value": sum(r.value for r in records),
        "gainers": sum(1 for r in records if r.change_percent > 0),
        "losers": sum(1 for r in records if r.change_percent < 0),
        "unchanged": sum(1 for r in records if r.change_percent == 0),
        "by_country": dict(Counter(r.country for r in records)),
        "by_sector": dict(Counter(r.sector for r in records)),
        "by_issuer": dict(Counter(r.issuer_code for r in records if r.issuer_code)),
    }


def list_countries(records: list[DRRecord]) -> list[dict]:
    counts = Counter(r.country for r in records)
    return [{"code": code, "name": country_name(code), "count": counts[code]} for code in sorted(counts)]


def list_sectors(records: list[DRRecord]) -> list[dict]:
    counts = Counter(r.sector for r in records)
    return [{"name": name, "count": counts[name]} for name in sorted(counts)]
