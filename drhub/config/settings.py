import os
from functools import lru_cache

from pydantic import BaseModel, Field


class Settings(BaseModel):
    DR_SET_API_URL: str = "https://www.set.or.th/api/set/dr/search?symbols=&tradeDateType=C&lang=th"
    DR_THAIWARRANT_URL: str = "https://www.thaiwarrant.com/dr/search"
    DR_BROWSER_EXECUTABLE_PATH: str | None = None
    DR_PRIMARY_TIMEOUT_SEC: float = Field(default=60.0, gt=0)
    DR_SECONDARY_TIMEOUT_SEC: float = Field(default=30.0, gt=0)
    DR_NEWS_TIMEOUT_SEC: float = Field(default=10.0, gt=0)
    DR_ENABLE_AUTO_REFRESH: bool = False
    DR_REFRESH_INTERVAL_SEC: float = Field(default=300.0, gt=0)
    DR_STALE_AFTER_SEC: int = Field(default=6 * 3600, gt=0)
    DR_RANKING_LIMIT: int = Field(default=10, ge=1)

    @classmethod
    def from_env(cls) -> "Settings":
        # only pass variables that are set so model defaults apply otherwise
        raw = {
            name: os.getenv(name)
            for name in cls.model_fields
            if os.getenv(name) not in (None, "")
        }
        return cls.model_validate(raw)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
