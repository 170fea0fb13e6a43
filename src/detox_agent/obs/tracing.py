"""Tracing and per-document failure accounting."""

from __future__ import annotations

import re
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from detox_agent.types import SegmentFailure

_TOKEN_PATTERN = re.compile(r"\w+|[^\w\s]", flags=re.UNICODE)


@dataclass(slots=True)
class DetoxTraceRecord:
    """Counts and failure reasons for one document; never the document text."""

    trace_id: str
    timestamp_utc: str
    segment_count: int
    flagged_count: int
    failures: list[SegmentFailure]
    input_tokens: int
    output_tokens: int
    latency_ms: float

    @property
    def flag_rate(self) -> float:
        if self.segment_count == 0:
            return 0.0
        return self.flagged_count / self.segment_count


class TraceStore:
    """In-memory trace storage for API-level observability."""

    def __init__(self) -> None:
        self._records: dict[str, DetoxTraceRecord] = {}

    def create_record(
        self,
        *,
        segment_count: int,
        flagged_count: int,
        failures: list[SegmentFailure],
        input_tokens: int,
        output_tokens: int,
        latency_ms: float,
    ) -> DetoxTraceRecord:
        trace_id = str(uuid.uuid4())
        record = DetoxTraceRecord(
            trace_id=trace_id,
            timestamp_utc=datetime.now(timezone.utc).isoformat(),
            segment_count=segment_count,
            flagged_count=flagged_count,
            failures=failures,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=latency_ms,
        )
        self._records[trace_id] = record
        return record

    def get(self, trace_id: str) -> DetoxTraceRecord:
        record = self._records.get(trace_id)
        if record is None:
            raise KeyError(f"Trace not found: {trace_id}")
        return record

    def list_recent(self, limit: int = 20) -> list[DetoxTraceRecord]:
        return list(self._records.values())[-limit:]

    def summary(self) -> dict[str, float | int]:
        """Aggregate core observability metrics for dashboard display."""
        records = list(self._records.values())
        total = len(records)
        if total == 0:
            return {
                "total_requests": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
                "avg_flag_rate": 0.0,
                "total_segments": 0,
                "total_flagged": 0,
                "classification_failures": 0,
                "rewrite_failures": 0,
                "total_input_tokens": 0,
                "total_output_tokens": 0,
            }

        latencies = sorted(record.latency_ms for record in records)
        p95_index = max(0, int((len(latencies) * 0.95) - 1))
        failures = [failure for record in records for failure in record.failures]

        return {
            "total_requests": total,
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
            "avg_flag_rate": sum(record.flag_rate for record in records) / total,
            "total_segments": sum(record.segment_count for record in records),
            "total_flagged": sum(record.flagged_count for record in records),
            "classification_failures": sum(
                1 for failure in failures if failure.stage == "classify"
            ),
            "rewrite_failures": sum(1 for failure in failures if failure.stage == "rewrite"),
            "total_input_tokens": sum(record.input_tokens for record in records),
            "total_output_tokens": sum(record.output_tokens for record in records),
        }


class Timer:
    """Simple context timer used by the pipeline."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0


def estimate_token_count(text: str) -> int:
    return len(_TOKEN_PATTERN.findall(text))
