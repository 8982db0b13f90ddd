from __future__ import annotations

from typing import Sequence

from drhub.schemas.source import SourceResult


class SourceChain:
    """Tries sources in priority order and returns the first non-empty result."""

    def __init__(self, sources: Sequence) -> None:
        if not sources:
            raise ValueError("at least one source is required")
        self.sources = list(sources)
        self.attempts: dict[str, int] = {}
        self.failures: dict[str, int] = {}
        self.last_source: str | None = None

    def _call(self, source) -> SourceResult:
        name = str(getattr(source, "name", type(source).__name__))
        self.attempts[name] = self.attempts.get(name, 0) + 1
        try:
            result = source.fetch()
        except Exception as exc:
            # adapters handle their own errors; this only guards a broken adapter
            result = SourceResult.failed(name, f"unhandled: {exc}")
        if not result.ok:
            self.failures[name] = self.failures.get(name, 0) + 1
        return result

    def fetch(self) -> SourceResult:
        outcomes: list[str] = []
        for source in self.sources:
            result = self._call(source)
            outcomes.append(f"{result.source}:{result.status}")
            if result.ok:
                self.last_source = result.source
                print(
                    f"[SOURCE][chain_resolve] source={result.source} rows={len(result.rows)} "
                    f"tried={','.join(outcomes)}",
                    flush=True,
                )
                return result

        print(f"[SOURCE][chain_exhausted] tried={','.join(outcomes)}", flush=True)
        return SourceResult.failed("chain", "all sources failed")

    def metrics(self) -> dict:
        return {
            "source_attempts": dict(self.attempts),
            "source_failures": dict(self.failures),
            "last_source": self.last_source,
        }
