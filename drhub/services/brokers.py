from __future__ import annotations

from collections import Counter

from drhub.schemas.broker import Broker
from drhub.schemas.dr import DRRecord, Snapshot

BROKERS: tuple[Broker, ...] = (
    Broker(id="KTB", name="ธ.กรุงไทย", full_name="ธนาคารกรุงไทย จำกัด (มหาชน)", commission="0.15%", min_trade="1 หน่วย", website="https://www.krungthai.com", logo="🔵"),
    Broker(id="BLS", name="บล.บัวหลวง", full_name="บริษัทหลักทรัพย์ บัวหลวง จำกัด (มหาชน)", commission="0.15%", min_trade="1 หน่วย", website="https://www.bualuang.co.th", logo="🏦"),
    Broker(id="YUANTA", name="บล.หยวนต้า", full_name="บริษัทหลักทรัพย์ หยวนต้า (ประเทศไทย) จำกัด", commission="0.15%", min_trade="1 หน่วย", website="https://www.yuanta.co.th", logo="🔶"),
    Broker(id="KGI", name="บล.เคจีไอ", full_name="บริษัทหลักทรัพย์ เคจีไอ (ประเทศไทย) จำกัด (มหาชน)", commission="0.15%", min_trade="1 หน่วย", website="https://www.kgieworld.co.th", logo="🟢"),
    Broker(id="KKP", name="บล.เกียรตินาคินภัทร", full_name="บริษัทหลักทรัพย์ เกียรตินาคินภัทร จำกัด (มหาชน)", commission="0.15%", min_trade="1 หน่วย", website="https://www.kkpfg.com", logo="🟡"),
    Broker(id="FSS", name="บล.ฟินันเซีย ไซรัส", full_name="บริษัทหลักทรัพย์ ฟินันเซีย ไซรัส จำกัด (มหาชน)", commission="0.15%", min_trade="1 หน่วย", website="https://www.fnsyrus.com", logo="🟠"),
    Broker(id="PI", name="บล.พาย", full_name="บริษัทหลักทรัพย์ พาย จำกัด (มหาชน)", commission="0.12%", min_trade="1 หน่วย", website="https://www.pi.co.th", logo="🟣"),
    Broker(id="INVX", name="บล.อินโนเวสท์ เอกซ์", full_name="บริษัทหลักทรัพย์ อินโนเวสท์ เอกซ์ จำกัด", commission="0.15%", min_trade="1 หน่วย", website="https://www.innovestx.co.th", logo="🔷"),
)


def list_brokers(snapshot: Snapshot | None) -> list[Broker]:
    counts = Counter(r.issuer_code for r in snapshot.records) if snapshot else Counter()
    return [broker.model_copy(update={"dr_count": counts.get(broker.id, 0)}) for broker in BROKERS]


def get_broker(broker_id: str, snapshot: Snapshot | None) -> Broker | None:
    wanted = broker_id.strip().upper()
    for broker in list_brokers(snapshot):
        if broker.id == wanted:
            return broker
    return None


def broker_records(broker: Broker, snapshot: Snapshot | None) -> list[DRRecord]:
    """DRs issued by ``broker``: matched on issuer code, or on the broker's display name."""
    if snapshot is None:
        return []
    return [r for r in snapshot.records if r.issuer_code == broker.id or broker.name in r.issuer]
