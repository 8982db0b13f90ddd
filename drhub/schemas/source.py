from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class SourceResult(BaseModel):
    """Outcome of one adapter call: rows, nothing, or a handled failure."""

    status: Literal["ok", "empty", "failed"]
    source: str
    rows: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None

    @classmethod
    def from_rows(cls, source: str, rows: list[dict[str, Any]]) -> "SourceResult":
        if not rows:
            return cls(status="empty", source=source)
        return cls(status="ok", source=source, rows=rows)

    @classmethod
    def failed(cls, source: str, error: str) -> "SourceResult":
        return cls(status="failed", source=source, error=error)

    @property
    def ok(self) -> bool:
        return self.status == "ok"
