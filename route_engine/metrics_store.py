from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from threading import Lock


@dataclass
class OutcomeStats:
    query_count: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float = 0.0
    extracted_nodes: int = 0


class MetricsStore:
    def __init__(self) -> None:
        self._lock = Lock()
        self._created_at = datetime.now(UTC).isoformat()
        self._outcomes: dict[str, OutcomeStats] = {}

    def record(self, outcome: str, *, duration_ms: float, extracted_nodes: int = 0) -> None:
        name = outcome.strip() or "unknown"
        d_ms = max(float(duration_ms), 0.0)

        with self._lock:
            stats = self._outcomes.setdefault(name, OutcomeStats())
            stats.query_count += 1
            stats.total_duration_ms += d_ms
            stats.extracted_nodes += max(int(extracted_nodes), 0)
            if d_ms > stats.max_duration_ms:
                stats.max_duration_ms = d_ms

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            outcomes: dict[str, dict[str, float | int]] = {}
            total_queries = 0

            for name in sorted(self._outcomes):
                stats = self._outcomes[name]
                total_queries += stats.query_count
                avg_duration_ms = (
                    stats.total_duration_ms / stats.query_count if stats.query_count else 0.0
                )
                outcomes[name] = {
                    "query_count": stats.query_count,
                    "extracted_nodes": stats.extracted_nodes,
                    "total_duration_ms": round(stats.total_duration_ms, 3),
                    "avg_duration_ms": round(avg_duration_ms, 3),
                    "max_duration_ms": round(stats.max_duration_ms, 3),
                }

            return {
                "created_at": self._created_at,
                "total_queries": total_queries,
                "total_errors": outcomes.get("error", {}).get("query_count", 0),
                "outcomes": outcomes,
            }

    def reset(self) -> None:
        with self._lock:
            self._created_at = datetime.now(UTC).isoformat()
            self._outcomes.clear()


METRICS = MetricsStore()


def record_query(outcome: str, *, duration_ms: float, extracted_nodes: int = 0) -> None:
    METRICS.record(outcome, duration_ms=duration_ms, extracted_nodes=extracted_nodes)


def metrics_snapshot() -> dict[str, object]:
    return METRICS.snapshot()


def reset_metrics() -> None:
    METRICS.reset()
