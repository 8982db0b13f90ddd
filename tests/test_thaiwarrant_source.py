import unittest
from unittest.mock import MagicMock

import requests

from drhub.integrations.thaiwarrant import ThaiWarrantSource
from drhub.services.record_builder import build_records

HTML = """
<html><body>
<table id="MainContent_gvDRSearch">
  <tr><th>Symbol</th><th>Last</th><th>%Chg</th><th>Value</th><th>Ratio</th><th>Name</th><th>Underlying</th><th>Market</th></tr>
  <tr><td>AAPL80</td><td>6.45</td><td>+0.78%</td><td>64.5K</td><td>100:1</td><td>Apple Inc</td><td>AAPL</td><td>NASDAQ</td></tr>
  <tr><td>BROKEN01</td><td>1.00</td></tr>
  <tr><td>ZERO19</td><td>-</td><td>0.00%</td><td>1,000</td><td>1000:1</td><td>Zero Holdings</td><td>7203.T</td><td>TSE</td></tr>
</table>
</body></html>
"""


def _session(html: str) -> MagicMock:
    response = MagicMock()
    response.text = html
    response.raise_for_status.return_value = None
    session = MagicMock()
    session.get.return_value = response
    return session


class TestThaiWarrantSource(unittest.TestCase):
    def test_parses_rows_and_skips_header_and_short_rows(self):
        session = _session(HTML)
        result = ThaiWarrantSource(session=session, url="https://example.test/dr", timeout_sec=30).fetch()

        self.assertEqual(result.status, "ok")
        self.assertEqual([r["symbol"] for r in result.rows], ["AAPL80", "ZERO19"])

        aapl = result.rows[0]
        self.assertEqual(aapl["price"], 6.45)
        self.assertEqual(aapl["value"], 64_500)
        self.assertEqual(aapl["volume"], 10_000)
        self.assertEqual(aapl["market"], "NASDAQ")

        zero = result.rows[1]
        self.assertEqual(zero["price"], 0)
        self.assertEqual(zero["volume"], 0)

        kwargs = session.get.call_args.kwargs
        self.assertEqual(kwargs["timeout"], 30)
        self.assertIn("Mozilla/5.0", kwargs["headers"]["User-Agent"])

    def test_rows_classify_like_any_other_source(self):
        result = ThaiWarrantSource(session=_session(HTML)).fetch()
        records = build_records(result.rows, source=result.source, now=1)

        self.assertEqual(records[0].change_percent, 0.78)
        self.assertEqual(records[0].issuer_code, "KTB")
        self.assertEqual(records[1].country, "JP")
        self.assertFalse(records[1].trading_session.has_night_trading)

    def test_missing_table_is_failure(self):
        result = ThaiWarrantSource(session=_session("<html></html>")).fetch()
        self.assertEqual(result.status, "failed")
        self.assertIn("not found", result.error)

    def test_http_error_is_failure(self):
        session = MagicMock()
        session.get.side_effect = requests.Timeout("read timeout")
        result = ThaiWarrantSource(session=session).fetch()

        self.assertEqual(result.status, "failed")
        self.assertIn("read timeout", result.error)


if __name__ == "__main__":
    unittest.main()
