from fastapi import APIRouter, HTTPException, Request

from drhub.schemas.dr import Snapshot
from drhub.services.brokers import broker_records, get_broker, list_brokers
from drhub.services.catalog import dr_stats, list_countries, list_sectors
from drhub.services.market_hours import session_status

router = APIRouter()


def _snapshot(request: Request) -> Snapshot:
    snapshot = request.app.state.store.current()
    if snapshot is None:
        raise HTTPException(status_code=503, detail='SNAPSHOT_NOT_READY')
    return snapshot


def _record_view(record) -> dict:
    row = record.model_dump()
    row['session_status'] = session_status(record.trading_session)
    return row


@router.get('/dr')
def list_drs(
    request: Request,
    country: str | None = None,
    sector: str | None = None,
    issuer: str | None = None,
):
    snapshot = _snapshot(request)
    rows = snapshot.records
    if country and country != 'All':
        rows = [r for r in rows if r.country == country]
    if sector and sector != 'All':
        rows = [r for r in rows if r.sector == sector]
    if issuer:
        rows = [r for r in rows if r.issuer_code == issuer.upper() or issuer in r.issuer]
    return {
        'count': len(rows),
        'last_update': snapshot.updated_at,
        'source': snapshot.source,
        'data': [_record_view(r) for r in rows],
    }


@router.get('/dr/search')
def search_drs(q: str, request: Request):
    term = q.strip().lower()
    if not term:
        raise HTTPException(status_code=400, detail='QUERY_REQUIRED')
    snapshot = _snapshot(request)
    rows = [
        r for r in snapshot.records
        if term in r.symbol.lower() or term in r.name.lower() or term in r.underlying.lower()
    ]
    return {'query': q, 'count': len(rows), 'data': [_record_view(r) for r in rows]}


@router.get('/dr/market-overview')
def market_overview(request: Request):
    snapshot = _snapshot(request)
    return {'generation': snapshot.generation, **snapshot.overview.model_dump()}


@router.get('/dr/rankings')
def rankings(request: Request):
    snapshot = _snapshot(request)
    return {'generation': snapshot.generation, **snapshot.rankings.model_dump()}


@router.get('/dr/stats')
def dr_stats_view(request: Request):
    snapshot = _snapshot(request)
    return {'last_update': snapshot.updated_at, 'data': dr_stats(snapshot.records)}


@router.get('/dr/countries')
def countries(request: Request):
    return {'data': list_countries(_snapshot(request).records)}


@router.get('/dr/sectors')
def sectors(request: Request):
    return {'data': list_sectors(_snapshot(request).records)}


@router.get('/dr/{symbol}')
def get_dr(symbol: str, request: Request):
    record = _snapshot(request).get(symbol.upper())
    if record is None:
        raise HTTPException(status_code=404, detail='DR not found')
    return _record_view(record)


@router.get('/dr/{symbol}/news')
def get_dr_news(symbol: str, request: Request):
    items = request.app.state.news_client.get_news(symbol)
    return {'symbol': symbol.upper(), 'count': len(items), 'data': [i.model_dump() for i in items]}


@router.get('/brokers')
def brokers(request: Request):
    rows = list_brokers(request.app.state.store.current())
    return {'count': len(rows), 'data': [b.model_dump() for b in rows]}


@router.get('/brokers/{broker_id}')
def broker_detail(broker_id: str, request: Request):
    broker = get_broker(broker_id, request.app.state.store.current())
    if broker is None:
        raise HTTPException(status_code=404, detail='broker not found')
    return broker.model_dump()


@router.get('/brokers/{broker_id}/dr')
def broker_drs(broker_id: str, request: Request):
    snapshot = _snapshot(request)
    broker = get_broker(broker_id, snapshot)
    if broker is None:
        raise HTTPException(status_code=404, detail='broker not found')
    rows = broker_records(broker, snapshot)
    return {'broker': broker.name, 'count': len(rows), 'data': [_record_view(r) for r in rows]}


@router.get('/metrics/refresh')
def refresh_metrics(request: Request):
    service = getattr(request.app.state, 'refresh_service', None)
    if service is None:
        return {'last_update_time': request.app.state.store.last_update_time()}
    return service.metrics()
