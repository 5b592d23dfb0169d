"""Alignment request tracing and aggregate metrics."""

from __future__ import annotations

import math
import threading
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from tei_aligner.types import AlignedPair


@dataclass(slots=True)
class AlignmentTrace:
    trace_id: str
    timestamp_utc: str
    chapter_id: str
    view_id: str
    mode: str
    pair_count: int
    insertion_count: int
    omission_count: int
    latency_ms: float
    error: str | None = None


class TraceStore:
    """In-memory trace storage for API-level observability."""

    def __init__(self, max_records: int = 1000) -> None:
        self._records: dict[str, AlignmentTrace] = {}
        self._max_records = max_records
        self._lock = threading.Lock()

    def create_record(
        self,
        *,
        chapter_id: str,
        view_id: str,
        mode: str,
        pairs: list[AlignedPair],
        latency_ms: float,
        error: str | None = None,
    ) -> AlignmentTrace:
        record = AlignmentTrace(
            trace_id=str(uuid.uuid4()),
            timestamp_utc=datetime.now(timezone.utc).isoformat(),
            chapter_id=chapter_id,
            view_id=view_id,
            mode=mode,
            pair_count=len(pairs),
            insertion_count=sum(1 for pair in pairs if pair.kind == "insertion"),
            omission_count=sum(1 for pair in pairs if pair.kind == "omission"),
            latency_ms=latency_ms,
            error=error,
        )
        with self._lock:
            self._records[record.trace_id] = record
            while len(self._records) > self._max_records:
                del self._records[next(iter(self._records))]
        return record

    def get(self, trace_id: str) -> AlignmentTrace:
        with self._lock:
            record = self._records.get(trace_id)
        if record is None:
            raise KeyError(f"Trace not found: {trace_id}")
        return record

    def list_recent(self, limit: int = 20) -> list[AlignmentTrace]:
        if limit <= 0:
            return []
        with self._lock:
            return list(self._records.values())[-limit:]

    def summary(self) -> dict[str, float | int]:
        """Aggregate request metrics for dashboard display."""
        with self._lock:
            records = list(self._records.values())
        total = len(records)
        if total == 0:
            return {
                "total_requests": 0,
                "failed_requests": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
                "total_pairs": 0,
                "total_insertions": 0,
                "total_omissions": 0,
            }

        latencies = sorted(record.latency_ms for record in records)
        p95_index = min(total - 1, math.ceil(total * 0.95) - 1)

        return {
            "total_requests": total,
            "failed_requests": sum(1 for record in records if record.error is not None),
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
            "total_pairs": sum(record.pair_count for record in records),
            "total_insertions": sum(record.insertion_count for record in records),
            "total_omissions": sum(record.omission_count for record in records),
        }


class Timer:
    """Simple context timer used by the alignment service."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
