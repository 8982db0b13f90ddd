import unittest
from unittest.mock import MagicMock

from drhub.integrations.set_news import SetNewsClient


def _session(payload=None, status_error: Exception | None = None) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    else:
        response.raise_for_status.return_value = None
    session = MagicMock()
    session.get.return_value = response
    return session


class TestSetNewsClient(unittest.TestCase):
    def test_parses_news_list(self):
        session = _session(
            {
                "newsInfoList": [
                    {"id": 11, "headline": "Quarterly results", "url": "https://example.test/n/11", "datetime": "2026-01-05T10:00:00"},
                    {"title": "Dividend notice", "source": "SET"},
                    {"noHeadline": True},
                    "junk",
                ]
            }
        )
        client = SetNewsClient(session=session, url="https://example.test/{symbol}/list")

        items = client.get_news("aapl80")

        self.assertEqual([i.headline for i in items], ["Quarterly results", "Dividend notice"])
        self.assertEqual(items[0].news_id, "11")
        self.assertEqual(items[0].symbol, "AAPL80")
        self.assertEqual(items[1].source, "SET")
        args, kwargs = session.get.call_args
        self.assertEqual(args[0], "https://example.test/AAPL80/list")
        self.assertEqual(kwargs["params"], {"lang": "th", "limit": 10})
        self.assertIn("Referer", kwargs["headers"])

    def test_plain_list_payload(self):
        items = SetNewsClient(session=_session([{"headline": "x"}])).get_news("NVDA80")
        self.assertEqual(len(items), 1)

    def test_non_2xx_returns_empty(self):
        session = _session(status_error=RuntimeError("503 Server Error"))
        self.assertEqual(SetNewsClient(session=session).get_news("AAPL80"), [])

    def test_network_error_returns_empty(self):
        session = MagicMock()
        session.get.side_effect = ConnectionError("dns failure")
        self.assertEqual(SetNewsClient(session=session).get_news("AAPL80"), [])

    def test_unexpected_shape_returns_empty(self):
        self.assertEqual(SetNewsClient(session=_session("not-json-list")).get_news("AAPL80"), [])

    def test_blank_symbol_skips_request(self):
        session = MagicMock()
        self.assertEqual(SetNewsClient(session=session).get_news("  "), [])
        session.get.assert_not_called()


if __name__ == "__main__":
    unittest.main()
