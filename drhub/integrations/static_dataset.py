from __future__ import annotations

from typing import Any

from drhub.schemas.source import SourceResult

_COLUMNS = (
    "symbol", "name", "underlying", "market", "ratio",
    "price", "change", "change_percent", "volume", "market_cap", "pe", "dividend",
)

# representative listings across regions; value is derived from price * volume
_ROWS: tuple[tuple[Any, ...], ...] = (
    # US technology
    ("AAPL80", "Apple Inc.", "AAPL", "NASDAQ", "1:100", 6.45, 0.05, 0.78, 1250000, 3800, 31.2, 0.48),
    ("MSFT80", "Microsoft Corporation", "MSFT", "NASDAQ", "1:100", 14.85, -0.12, -0.80, 890000, 3200, 36.5, 0.72),
    ("NVDA80", "NVIDIA Corporation", "NVDA", "NASDAQ", "1:100", 4.72, 0.18, 3.96, 2100000, 3400, 65.2, 0.04),
    ("GOOGL01", "Alphabet Inc.", "GOOGL", "NASDAQ", "1:10", 61.20, 0.45, 0.74, 750000, 2200, 24.8, 0),
    ("META80", "Meta Platforms Inc.", "META", "NASDAQ", "1:100", 19.85, 0.32, 1.64, 520000, 1500, 28.3, 0.50),
    ("AMZN80", "Amazon.com Inc.", "AMZN", "NASDAQ", "1:100", 7.25, 0.08, 1.12, 680000, 2100, 42.5, 0),
    ("TSLA80", "Tesla Inc.", "TSLA", "NASDAQ", "1:100", 14.45, -0.35, -2.37, 1850000, 1350, 98.5, 0),
    ("NFLX80", "Netflix Inc.", "NFLX", "NASDAQ", "1:100", 29.65, 0.52, 1.79, 290000, 380, 48.7, 0),
    ("AMD80", "Advanced Micro Devices", "AMD", "NASDAQ", "1:100", 4.28, 0.15, 3.63, 980000, 220, 45.2, 0),
    ("AVGO80", "Broadcom Inc.", "AVGO", "NASDAQ", "1:100", 7.65, 0.12, 1.59, 320000, 1050, 45.2, 2.12),
    ("COSTCO19", "Costco Wholesale", "COST", "NASDAQ", "1:1000", 31.85, 0.18, 0.57, 180000, 410, 52.3, 1.16),
    ("COIN80", "Coinbase Global", "COIN", "NASDAQ", "1:100", 8.95, 0.45, 5.29, 420000, 45, 32.5, 0),
    ("PLTR80", "Palantir Technologies", "PLTR", "NYSE", "1:100", 2.85, 0.12, 4.40, 650000, 85, 180, 0),
    ("UBER80", "Uber Technologies", "UBER", "NYSE", "1:100", 2.48, 0.05, 2.06, 380000, 165, 75.2, 0),
    ("SHOP80", "Shopify Inc.", "SHOP", "NYSE", "1:100", 3.72, 0.08, 2.20, 220000, 135, 85.5, 0),
    ("PYPL80", "PayPal Holdings", "PYPL", "NASDAQ", "1:100", 2.52, 0.04, 1.61, 280000, 72, 18.5, 0),
    ("CRM80", "Salesforce Inc.", "CRM", "NYSE", "1:100", 11.25, 0.15, 1.35, 185000, 285, 42.8, 0),
    ("ORCL80", "Oracle Corporation", "ORCL", "NYSE", "1:100", 5.82, 0.08, 1.39, 165000, 420, 38.5, 1.25),
    ("GRAB80", "Grab Holdings", "GRAB", "NASDAQ", "1:100", 0.16, 0.01, 6.67, 450000, 18, -25.5, 0),
    # China / Hong Kong
    ("BABA80", "Alibaba Group", "BABA", "NYSE", "1:100", 2.92, 0.08, 2.82, 980000, 210, 18.5, 0),
    ("TENCENT80", "Tencent Holdings", "0700.HK", "HKEX", "1:100", 14.25, 0.32, 2.30, 650000, 480, 22.3, 0.35),
    ("BYDCOM80", "BYD Company", "1211.HK", "HKEX", "1:100", 9.72, 0.25, 2.64, 420000, 95, 25.8, 0.15),
    ("XIAOMI80", "Xiaomi Corporation", "1810.HK", "HKEX", "1:100", 1.78, 0.05, 2.89, 380000, 65, 32.5, 0),
    ("MEITUAN80", "Meituan", "3690.HK", "HKEX", "1:100", 5.62, -0.08, -1.40, 290000, 102, 45.2, 0),
    ("JD80", "JD.com Inc.", "JD", "NASDAQ", "1:100", 1.18, 0.03, 2.61, 520000, 55, 12.8, 0.76),
    ("PDD80", "PDD Holdings", "PDD", "NASDAQ", "1:100", 3.45, 0.12, 3.60, 450000, 180, 15.2, 0),
    ("NIO80", "NIO Inc.", "NIO", "NYSE", "1:100", 0.15, 0.01, 7.14, 890000, 8, -5.2, 0),
    ("XPEV80", "XPeng Inc.", "XPEV", "NYSE", "1:100", 0.52, 0.02, 4.00, 320000, 12, -8.5, 0),
    ("LI80", "Li Auto Inc.", "LI", "NASDAQ", "1:100", 0.82, 0.03, 3.80, 280000, 22, 18.5, 0),
    ("NDX01", "ChinaAMC NASDAQ 100 ETF", "3086.HK", "HKEX", "1:10", 1.56, 0.02, 1.30, 320000, 85, 0, 0.45),
    ("CN01", "ChinaAMC CSI 300 ETF", "3188.HK", "HKEX", "1:10", 1.28, 0.03, 2.40, 185000, 52, 0, 0.65),
    ("HK01", "Tracker Fund of Hong Kong", "2800.HK", "HKEX", "1:10", 0.64, 0.01, 1.59, 145000, 28, 0, 2.35),
    ("HKTECH13", "Hang Seng TECH Index ETF", "3032.HK", "HKEX", "1:100", 1.42, 0.04, 2.90, 275000, 62, 0, 0.25),
    # Japan
    ("TOYOTA19", "Toyota Motor", "7203.T", "TSE", "1:1000", 6.32, 0.05, 0.80, 180000, 280, 9.8, 2.85),
    ("SONY19", "Sony Group", "6758.T", "TSE", "1:1000", 3.15, 0.08, 2.61, 145000, 115, 18.2, 0.85),
    ("NINTENDO19", "Nintendo Co.", "7974.T", "TSE", "1:1000", 2.68, 0.06, 2.29, 125000, 85, 22.5, 1.95),
    ("HONDA19", "Honda Motor", "7267.T", "TSE", "1:1000", 1.42, 0.02, 1.43, 98000, 52, 8.5, 3.25),
    # Europe
    ("LVMH01", "LVMH Moët Hennessy", "MC.PA", "Euronext Paris", "1:10", 23.45, -0.28, -1.18, 85000, 345, 24.5, 1.35),
    ("HERMES80", "Hermès International", "RMS.PA", "Euronext Paris", "1:100", 79.85, 0.92, 1.17, 42000, 248, 52.3, 0.65),
    ("ASML01", "ASML Holding", "ASML.AS", "Euronext Amsterdam", "1:10", 24.72, 0.45, 1.85, 68000, 295, 42.8, 0.85),
    # Singapore
    ("DBS19", "DBS Group Holdings", "D05.SI", "SGX", "1:1000", 1.28, 0.02, 1.59, 125000, 98, 11.2, 4.85),
    ("UOB19", "United Overseas Bank", "U11.SI", "SGX", "1:1000", 1.12, 0.01, 0.90, 95000, 55, 10.5, 4.25),
    # Vietnam
    ("E1VFVN3001", "E1VFVN30 ETF", "E1VFVN30", "HOSE", "1:10", 0.62, 0.01, 1.64, 85000, 12, 15.2, 1.85),
    ("FUEVFVND01", "FUEVFVND ETF", "FUEVFVND", "HOSE", "1:10", 0.58, 0.01, 1.75, 72000, 8, 14.8, 1.65),
)


def static_rows() -> list[dict[str, Any]]:
    return [dict(zip(_COLUMNS, row)) for row in _ROWS]


class StaticDrSource:
    """Last-resort source: a curated in-process dataset, no I/O."""

    name = "static"

    def fetch(self) -> SourceResult:
        rows = static_rows()
        print(f"[SOURCE][static_fetch_result] rows={len(rows)}", flush=True)
        return SourceResult.from_rows(self.name, rows)
