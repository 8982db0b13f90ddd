from pydantic import BaseModel


class Broker(BaseModel):
    id: str
    name: str
    full_name: str
    commission: str
    min_trade: str
    website: str
    logo: str
    dr_count: int = 0
