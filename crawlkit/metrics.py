from __future__ import annotations

import time
from collections import deque
from dataclasses import asdict, dataclass
from threading import Lock
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Optional

from .models import JobRequest

if TYPE_CHECKING:
    from .scraper import Scraper

TIMEOUT_ERRORS = ("TimeoutError", "Timeout", "ReadTimeout", "ConnectTimeout")


@dataclass(frozen=True)
class JobOutcome:
    url: str
    success: bool
    status_code: Optional[int]
    latency_ms: int
    error_type: Optional[str]


@dataclass(frozen=True)
class MetricsSnapshot:
    window_secs: int
    total_jobs: int
    success_count: int
    failure_count: int
    timeout_count: int
    avg_latency_ms: float
    timestamp: float


class MetricsCollector:
    """Thread-safe collector of job outcomes.

    Install it on a scraper with ``scraper.use(collector)``; it then records
    one JobOutcome per finished job and produces MetricsSnapshot objects over
    sliding time windows."""

    def __init__(self, maxlen: int = 10000) -> None:
        self._lock = Lock()
        self._events: Deque[tuple[float, JobOutcome]] = deque(maxlen=maxlen)

    def __call__(self, scraper: "Scraper") -> None:
        scraper.on_result(self.record)

    def record(self, err: Optional[BaseException], req: JobRequest, res: Dict[str, Any]) -> None:
        """Record the outcome of one job with the current timestamp."""
        outcome = JobOutcome(
            url=req.url,
            success=err is None,
            status_code=res.get("status_code"),
            latency_ms=int(res.get("latency_ms") or 0),
            error_type=None if err is None else type(err).__name__,
        )
        with self._lock:
            self._events.append((time.time(), outcome))

    def snapshot(self, window_secs: int) -> MetricsSnapshot:
        """Return aggregated metrics for outcomes within the last window_secs seconds."""
        now = time.time()
        cutoff = now - window_secs
        with self._lock:
            events: List[JobOutcome] = [e for ts, e in self._events if ts >= cutoff]
        total = len(events)
        success_count = sum(1 for e in events if e.success)
        timeout_count = sum(1 for e in events if e.error_type in TIMEOUT_ERRORS)
        avg_latency_ms = (sum(e.latency_ms for e in events) / total) if total else 0.0

        return MetricsSnapshot(
            window_secs=window_secs,
            total_jobs=total,
            success_count=success_count,
            failure_count=total - success_count,
            timeout_count=timeout_count,
            avg_latency_ms=avg_latency_ms,
            timestamp=now,
        )

    def export_json(self) -> List[Dict]:
        """Export all recorded outcomes as a list of dictionaries."""
        with self._lock:
            return [{"timestamp": ts, **asdict(e)} for ts, e in self._events]
