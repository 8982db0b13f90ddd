"""Heuristic classification of DR rows.

Every table here is an ordered list of ``(predicate, result)`` pairs and the
first matching rule wins. The underlying and DR-symbol patterns only decide a
country when the venue string says nothing.
"""

from __future__ import annotations

import re
from typing import Callable

from drhub.schemas.dr import TradingSession

DEFAULT_COUNTRY = "US"
DEFAULT_SECTOR = "Technology"
UNSPECIFIED_ISSUER = "ไม่ระบุ"

DAY_SESSION = "10:00-16:30"
NIGHT_SESSION = "19:00-03:00"

CountryPredicate = Callable[[str, str, str], bool]


def _market_has(*tokens: str) -> CountryPredicate:
    return lambda market, underlying, symbol: any(token in market for token in tokens)


def _underlying_matches(pattern: str) -> CountryPredicate:
    compiled = re.compile(pattern)
    return lambda market, underlying, symbol: compiled.match(underlying) is not None


def _symbol_matches(pattern: str) -> CountryPredicate:
    compiled = re.compile(pattern)
    return lambda market, underlying, symbol: compiled.match(symbol) is not None


COUNTRY_RULES: list[tuple[CountryPredicate, str]] = [
    # venue tokens
    (_market_has("NASDAQ", "NYSE", "US"), "US"),
    (_market_has("HKEX", "HK"), "HK"),
    (_market_has("SSE", "SZSE", "SHANGHAI", "SHENZHEN"), "CN"),
    (_market_has("TSE", "TOKYO", "JP"), "JP"),
    (_market_has("SGX", "SINGAPORE"), "SG"),
    (_market_has("HOSE", "HNX", "VN"), "VN"),
    (
        _market_has(
            "EURONEXT", "LSE", "XETRA", "CPH", "OMX", "XLON",
            "COPENHAGEN", "PARIS", "AMSTERDAM",
        ),
        "EU",
    ),
    (_market_has("TWSE", "TPEX"), "TW"),
    (_market_has("KRX", "KOSPI"), "KR"),
    # underlying prefixes
    (_underlying_matches(r"(AAPL|MSFT|GOOGL|META|AMZN|NVDA|TSLA|NFLX|AMD|INTC)"), "US"),
    (_underlying_matches(r"(BABA|JD|PDD|BIDU|NIO)"), "CN"),
    (_underlying_matches(r"(TENCENT|XIAOMI|MEITUAN|BYD)"), "HK"),
    (_underlying_matches(r"(TOYOTA|SONY|NINTENDO|HONDA)"), "JP"),
    (_underlying_matches(r"(NOVOB|NOVO|NVO|ASML|MC|RMS|LVMH|HERMES)"), "EU"),
    # DR symbols such as NOVOB80 or ASML01
    (_symbol_matches(r"(NOVOB|ASML|LVMH|HERMES)"), "EU"),
]

NIGHT_TRADING_MARKETS = ("NASDAQ", "NYSE", "US", "EURONEXT", "LSE", "XETRA", "PARIS", "AMSTERDAM")
NIGHT_TRADING_COUNTRIES = frozenset({"US", "EU"})
LIQUID_US_UNDERLYINGS = re.compile(
    r"(AAPL|MSFT|GOOGL|GOOG|META|AMZN|NVDA|TSLA|NFLX|AMD|INTC|COIN|PLTR|UBER|SHOP|SQ|PYPL"
    r"|CRM|ORCL|ADBE|DIS|V|MA|JPM|BAC|WMT|PG|JNJ|UNH|HD|KO|PEP|MCD|NKE|SBUX|COST|TGT|CVS"
    r"|WBA|XOM|CVX|COP|MRK|PFE|ABBV|LLY|TMO|ABT|BMY|GILD)"
)

SessionPredicate = Callable[[str, str, str], bool]

NIGHT_TRADING_RULES: list[SessionPredicate] = [
    lambda market, country, underlying: any(token in market for token in NIGHT_TRADING_MARKETS),
    lambda market, country, underlying: country in NIGHT_TRADING_COUNTRIES,
    lambda market, country, underlying: LIQUID_US_UNDERLYINGS.match(underlying) is not None,
]

SECTOR_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"ETF|INDEX|FUND"), "ETF"),
    (re.compile(r"BANK|FINANCE|INSURANCE|CREDIT"), "Finance"),
    (re.compile(r"TECH|SOFTWARE|SEMICONDUCTOR|CHIP|COMPUTER|CLOUD|AI"), "Technology"),
    (re.compile(r"AUTO|CAR|MOTOR|EV|ELECTRIC VEHICLE"), "Auto"),
    (re.compile(r"RETAIL|ECOMMERCE|CONSUMER|SHOP|AMAZON|ALIBABA|JD"), "Consumer"),
    (re.compile(r"PHARMA|HEALTH|MEDICAL|BIOTECH|DRUG"), "Healthcare"),
    (re.compile(r"LUXURY|LVMH|HERMES|GUCCI|FASHION"), "Luxury"),
    (re.compile(r"GAME|ENTERTAINMENT|MEDIA|NETFLIX|DISNEY|STREAM"), "Entertainment"),
    (re.compile(r"OIL|GAS|ENERGY|POWER|SOLAR|WIND"), "Energy"),
    (re.compile(r"REAL ESTATE|REIT|PROPERTY"), "Real Estate"),
    (re.compile(r"TELECOM|COMMUNICATION|5G"), "Telecom"),
]

ISSUER_SUFFIXES: dict[str, str] = {
    "80": "KTB",
    "01": "BLS",
    "13": "KGI",
    "19": "YUANTA",
    "06": "KKP",
    "24": "FSS",
    "29": "PI",
    "03": "PI",
    "23": "INVX",
    "27": "INVX",
    "41": "JPM",
    "28": "MQ",
    "08": "ASPS",
    "16": "TNS",
    "42": "CITI",
    "11": "KS",
}

ISSUER_NAMES: dict[str, str] = {
    "KTB": "ธ.กรุงไทย",
    "BLS": "บล.บัวหลวง",
    "INVX": "บล.อินโนเวสท์ เอกซ์",
    "KGI": "บล.เคจีไอ",
    "YUANTA": "บล.หยวนต้า",
    "JPM": "JPMorgan",
    "KKP": "บล.เกียรตินาคินภัทร",
    "MQ": "Macquarie",
    "FSS": "บล.ฟินันเซีย ไซรัส",
    "ASPS": "บล.เอเซีย พลัส",
    "TNS": "บล.ธนชาต",
    "PI": "บล.พาย",
    "CITI": "Citibank",
    "KS": "KS Securities",
}

_TRAILING_DIGITS = re.compile(r"\d+$")

LogoPredicate = Callable[[str, str], bool]


def _text_has(*keywords: str) -> LogoPredicate:
    return lambda text, symbol: any(keyword in text for keyword in keywords)


LOGO_RULES: list[tuple[LogoPredicate, str]] = [
    (_text_has("APPLE", "AAPL"), "🍎"),
    (_text_has("MICROSOFT", "MSFT"), "🪟"),
    (_text_has("GOOGLE", "ALPHABET", "GOOGL"), "🔍"),
    (_text_has("AMAZON", "AMZN"), "📦"),
    (_text_has("META", "FACEBOOK"), "📱"),
    (_text_has("NVIDIA", "NVDA"), "🎮"),
    (_text_has("TESLA", "TSLA"), "🚗"),
    (_text_has("NETFLIX", "NFLX"), "🎬"),
    (_text_has("ALIBABA", "BABA"), "🛍️"),
    (_text_has("TENCENT"), "💬"),
    (_text_has("XIAOMI"), "📲"),
    (_text_has("BYD"), "🔋"),
    (_text_has("MEITUAN"), "🍜"),
    (_text_has("JD"), "🏪"),
    (_text_has("TOYOTA"), "🚙"),
    (_text_has("SONY"), "🎮"),
    (_text_has("NINTENDO"), "🍄"),
    (_text_has("HONDA"), "🏍️"),
    (_text_has("LVMH"), "👜"),
    (_text_has("HERMES"), "🧣"),
    (_text_has("ASML"), "🔬"),
    (_text_has("BANK", "DBS", "UOB"), "🏦"),
    (_text_has("ETF", "INDEX"), "📈"),
    (lambda text, symbol: "VN" in symbol, "🇻🇳"),
]
DEFAULT_LOGO = "📊"


def _upper(value: str | None) -> str:
    return (value or "").upper()


def detect_country(market: str | None, underlying: str | None, symbol: str | None) -> str:
    args = (_upper(market), _upper(underlying), _upper(symbol))
    for predicate, country in COUNTRY_RULES:
        if predicate(*args):
            return country
    return DEFAULT_COUNTRY


def detect_trading_session(market: str | None, country: str, underlying: str | None) -> TradingSession:
    args = (_upper(market), country, _upper(underlying))
    if any(rule(*args) for rule in NIGHT_TRADING_RULES):
        return TradingSession(
            label="กลางวัน+กลางคืน",
            day_session=DAY_SESSION,
            night_session=NIGHT_SESSION,
            has_night_trading=True,
        )
    return TradingSession(
        label="กลางวันเท่านั้น",
        day_session=DAY_SESSION,
        night_session=None,
        has_night_trading=False,
    )


def detect_sector(name: str | None, underlying: str | None) -> str:
    text = f"{name or ''} {underlying or ''}".upper()
    for pattern, sector in SECTOR_RULES:
        if pattern.search(text):
            return sector
    return DEFAULT_SECTOR


def issuer_code_from_symbol(symbol: str | None) -> str:
    match = _TRAILING_DIGITS.search((symbol or "").strip())
    if match is None:
        return "OTHER"
    digits = match.group(0)
    return ISSUER_SUFFIXES.get(digits[-2:], f"CODE{digits}")


def issuer_name(code: str | None) -> str:
    if code in ISSUER_NAMES:
        return ISSUER_NAMES[code]
    if code and code.startswith("CODE"):
        return f"รหัส {code[len('CODE'):]}"
    return UNSPECIFIED_ISSUER


def company_logo(name: str | None, symbol: str | None) -> str:
    symbol_upper = _upper(symbol)
    text = f"{_upper(name)} {symbol_upper}"
    for predicate, logo in LOGO_RULES:
        if predicate(text, symbol_upper):
            return logo
    return DEFAULT_LOGO
