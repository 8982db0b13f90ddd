from __future__ import annotations

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI

from drhub.api.routes import router
from drhub.config.settings import Settings, get_settings
from drhub.integrations.set_browser import SetBrowserClient
from drhub.integrations.set_dr import SetDrSource, SetMarketStatsSource
from drhub.integrations.set_news import SetNewsClient
from drhub.integrations.static_dataset import StaticDrSource
from drhub.integrations.thaiwarrant import ThaiWarrantSource
from drhub.services.refresh import RefreshService
from drhub.services.scheduler import RefreshScheduler
from drhub.services.snapshot_store import SnapshotStore
from drhub.services.source_chain import SourceChain


def build_refresh_service(settings: Settings, store: SnapshotStore) -> RefreshService:
    browser = SetBrowserClient(
        executable_path=settings.DR_BROWSER_EXECUTABLE_PATH,
        timeout_sec=settings.DR_PRIMARY_TIMEOUT_SEC,
    )
    primary = SetDrSource(browser, url=settings.DR_SET_API_URL)
    chain = SourceChain(
        [
            primary,
            ThaiWarrantSource(url=settings.DR_THAIWARRANT_URL, timeout_sec=settings.DR_SECONDARY_TIMEOUT_SEC),
            StaticDrSource(),
        ]
    )
    return RefreshService(
        store=store,
        source_chain=chain,
        price_source=primary,
        stats_source=SetMarketStatsSource(browser, limit=settings.DR_RANKING_LIMIT),
        stale_after_sec=settings.DR_STALE_AFTER_SEC,
        ranking_limit=settings.DR_RANKING_LIMIT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.get_settings()
    app.state.news_client.timeout_sec = settings.DR_NEWS_TIMEOUT_SEC
    if app.state.refresh_service is None:
        app.state.refresh_service = build_refresh_service(settings, app.state.store)
    # synchronous: the store is readable before the first request is accepted
    app.state.refresh_service.seed(StaticDrSource())

    scheduler = RefreshScheduler(
        app.state.refresh_service,
        interval_sec=settings.DR_REFRESH_INTERVAL_SEC,
        auto_refresh=settings.DR_ENABLE_AUTO_REFRESH,
    )
    app.state.scheduler = scheduler
    scheduler.start()

    try:
        yield
    finally:
        scheduler.stop()


app = FastAPI(title="DR Hub", version="0.1.0", lifespan=lifespan)
app.include_router(router, prefix="/v1")

# NOTE: lazy-loaded so app import does not read env during tests.
app.state.get_settings = get_settings
app.state.store = SnapshotStore()
app.state.news_client = SetNewsClient()
app.state.refresh_service = None
app.state.started_at = time.time()


@app.get("/health")
def health():
    return {
        "status": "ok",
        "last_update": app.state.store.last_update_time(),
        "uptime_sec": round(time.time() - app.state.started_at, 3),
    }
