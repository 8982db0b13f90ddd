import threading
import time
import unittest
from unittest.mock import Mock

from fastapi.testclient import TestClient

from drhub.integrations.static_dataset import StaticDrSource
from drhub.main import app
from drhub.schemas.dr import NewsItem
from drhub.schemas.source import SourceResult
from drhub.services.record_builder import build_records
from drhub.services.refresh import RefreshService
from drhub.services.snapshot_store import SnapshotStore
from drhub.services.source_chain import SourceChain

ROWS = [
    {"symbol": "AAPL80", "name": "Apple Inc.", "market": "NASDAQ", "underlying": "AAPL", "price": 6.45, "change_percent": 0.78, "volume": 1000},
    {"symbol": "TENCENT80", "name": "Tencent Holdings", "market": "HKEX", "underlying": "0700.HK", "price": 14.25, "change_percent": -1.2, "volume": 500},
    {"symbol": "GOOGL01", "name": "Alphabet Inc.", "market": "NASDAQ", "underlying": "GOOGL", "price": 61.2, "change_percent": 0, "volume": 10},
]


class DrApiTest(unittest.TestCase):
    def setUp(self):
        self.original_store = app.state.store
        self.original_news = app.state.news_client
        app.state.store = SnapshotStore()
        app.state.news_client = Mock()
        self.client = TestClient(app)

    def tearDown(self):
        app.state.store = self.original_store
        app.state.news_client = self.original_news

    def _seed(self):
        store = app.state.store
        store.replace(store.build(build_records(ROWS, source="set", now=1_000), source="set", now=1_000))

    def test_list_and_filter_by_country_and_issuer(self):
        self._seed()

        body = self.client.get("/v1/dr").json()
        self.assertEqual(body["count"], 3)
        self.assertEqual(body["source"], "set")
        self.assertEqual(body["last_update"], 1_000)

        us = self.client.get("/v1/dr", params={"country": "US"}).json()
        self.assertEqual({r["symbol"] for r in us["data"]}, {"AAPL80", "GOOGL01"})

        everything = self.client.get("/v1/dr", params={"country": "All"}).json()
        self.assertEqual(everything["count"], 3)

        ktb = self.client.get("/v1/dr", params={"issuer": "ktb"}).json()
        self.assertEqual({r["symbol"] for r in ktb["data"]}, {"AAPL80", "TENCENT80"})

    def test_detail_includes_classification_and_session_status(self):
        self._seed()

        r = self.client.get("/v1/dr/aapl80")
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["symbol"], "AAPL80")
        self.assertEqual(body["country"], "US")
        self.assertEqual(body["issuer_code"], "KTB")
        self.assertTrue(body["trading_session"]["has_night_trading"])
        self.assertIn("session_status", body)

        self.assertEqual(self.client.get("/v1/dr/NOPE80").status_code, 404)

    def test_search_matches_symbol_name_and_underlying(self):
        self._seed()

        by_name = self.client.get("/v1/dr/search", params={"q": "apple"}).json()
        self.assertEqual([r["symbol"] for r in by_name["data"]], ["AAPL80"])

        by_underlying = self.client.get("/v1/dr/search", params={"q": "0700"}).json()
        self.assertEqual([r["symbol"] for r in by_underlying["data"]], ["TENCENT80"])

        blank = self.client.get("/v1/dr/search", params={"q": "  "})
        self.assertEqual(blank.status_code, 400)
        self.assertEqual(blank.json(), {"detail": "QUERY_REQUIRED"})

    def test_overview_and_rankings_are_aggregated_from_records(self):
        self._seed()

        overview = self.client.get("/v1/dr/market-overview").json()
        self.assertEqual(overview["gainers"], 1)
        self.assertEqual(overview["losers"], 1)
        self.assertEqual(overview["unchanged"], 1)
        self.assertEqual(overview["source"], "aggregated")

        rankings = self.client.get("/v1/dr/rankings").json()
        self.assertEqual(rankings["top_gainers"][0]["symbol"], "AAPL80")
        self.assertEqual(rankings["top_losers"][0]["symbol"], "TENCENT80")
        self.assertEqual(rankings["most_active_value"][0]["symbol"], "TENCENT80")

    def test_news_is_passed_through_from_client(self):
        app.state.news_client.get_news.return_value = [
            NewsItem(symbol="AAPL80", headline="Apple DR update", url="https://example.test/n/1", source="SET", news_id="1"),
        ]

        body = self.client.get("/v1/dr/aapl80/news").json()

        app.state.news_client.get_news.assert_called_once_with("aapl80")
        self.assertEqual(body["symbol"], "AAPL80")
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["data"][0]["headline"], "Apple DR update")

    def test_brokers_carry_dr_counts(self):
        self._seed()

        body = self.client.get("/v1/brokers").json()
        counts = {b["id"]: b["dr_count"] for b in body["data"]}
        self.assertEqual(body["count"], 8)
        self.assertEqual(counts["KTB"], 2)
        self.assertEqual(counts["BLS"], 1)
        self.assertEqual(counts["PI"], 0)

        self.assertEqual(self.client.get("/v1/brokers/bls").json()["dr_count"], 1)
        self.assertEqual(self.client.get("/v1/brokers/NOPE").status_code, 404)

    def test_stats_count_by_country_sector_and_issuer(self):
        self._seed()

        body = self.client.get("/v1/dr/stats").json()
        stats = body["data"]
        self.assertEqual(body["last_update"], 1_000)
        self.assertEqual(stats["total_dr"], 3)
        self.assertEqual((stats["gainers"], stats["losers"], stats["unchanged"]), (1, 1, 1))
        self.assertEqual(stats["total_volume"], 1510)
        self.assertEqual(stats["by_country"], {"US": 2, "HK": 1})
        self.assertEqual(stats["by_issuer"], {"KTB": 2, "BLS": 1})
        self.assertEqual(sum(stats["by_sector"].values()), 3)

    def test_countries_and_sectors_are_sorted_with_counts(self):
        self._seed()

        countries = self.client.get("/v1/dr/countries").json()["data"]
        self.assertEqual(
            countries,
            [
                {"code": "HK", "name": "ฮ่องกง", "count": 1},
                {"code": "US", "name": "สหรัฐอเมริกา", "count": 2},
            ],
        )

        sectors = self.client.get("/v1/dr/sectors").json()["data"]
        names = [s["name"] for s in sectors]
        self.assertEqual(names, sorted(names))
        self.assertEqual(sum(s["count"] for s in sectors), 3)

    def test_broker_dr_list_matches_issuer_code(self):
        self._seed()

        body = self.client.get("/v1/brokers/ktb/dr").json()
        self.assertEqual(body["broker"], "ธ.กรุงไทย")
        self.assertEqual(body["count"], 2)
        self.assertEqual({r["symbol"] for r in body["data"]}, {"AAPL80", "TENCENT80"})

        self.assertEqual(self.client.get("/v1/brokers/pi/dr").json()["count"], 0)
        self.assertEqual(self.client.get("/v1/brokers/NOPE/dr").status_code, 404)

    def test_health_reports_last_update(self):
        self.assertIsNone(self.client.get("/health").json()["last_update"])
        self._seed()
        body = self.client.get("/health").json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["last_update"], 1_000)


class AppLifecycleTest(unittest.TestCase):
    def test_refresh_scheduler_starts_on_startup_and_stops_on_shutdown(self):
        original_service = app.state.refresh_service
        original_store = app.state.store
        app.state.store = SnapshotStore()
        refreshed = threading.Event()

        service = Mock()
        service.full_refresh.side_effect = lambda **kwargs: refreshed.set() or {"status": "ok"}
        service.metrics.return_value = {"full_runs": 1}
        app.state.refresh_service = service

        try:
            with TestClient(app) as client:
                self.assertTrue(refreshed.wait(1.0), "initial refresh did not run on startup")
                service.full_refresh.assert_called_with(wait=True)
                self.assertEqual(client.get("/v1/metrics/refresh").json(), {"full_runs": 1})
                scheduler = app.state.scheduler

            self.assertTrue(scheduler._stop_event.is_set())
        finally:
            app.state.refresh_service = original_service
            app.state.store = original_store

    def test_reads_are_served_while_first_live_refresh_is_in_flight(self):
        original_service = app.state.refresh_service
        original_store = app.state.store
        store = SnapshotStore()
        app.state.store = store
        fetching = threading.Event()
        release = threading.Event()

        class GatedSource:
            name = "set"

            def fetch(self):
                fetching.set()
                release.wait(2.0)
                return SourceResult.from_rows("set", ROWS)

        app.state.refresh_service = RefreshService(
            store=store,
            source_chain=SourceChain([GatedSource(), StaticDrSource()]),
        )

        try:
            with TestClient(app) as client:
                self.assertTrue(fetching.wait(1.0), "initial refresh did not start")
                r = client.get("/v1/dr")
                self.assertEqual(r.status_code, 200)
                self.assertEqual(r.json()["source"], "static")
                self.assertGreater(r.json()["count"], 10)

                release.set()
                for _ in range(100):
                    if store.current().source == "set":
                        break
                    time.sleep(0.01)
                self.assertEqual(client.get("/v1/dr").json()["count"], 3)
        finally:
            release.set()
            app.state.refresh_service = original_service
            app.state.store = original_store


if __name__ == "__main__":
    unittest.main()
