from __future__ import annotations

import json
import queue
import threading
import time
from typing import Any, Dict, Optional

from .models import JobRequest


class JsonlStorage:
    """Writes job outcomes as JSON Lines (.jsonl) from a background thread.

    The instance is a result listener: ``scraper.on_result(storage)``."""

    def __init__(self, path: str) -> None:
        self._path = path
        self._queue: queue.Queue[Optional[Dict[str, Any]]] = queue.Queue()
        self._thread = threading.Thread(target=self._writer, daemon=True)
        self._thread.start()

    def __call__(self, err: Optional[BaseException], req: JobRequest, res: Dict[str, Any]) -> None:
        self.write(err, req, res)

    def write(self, err: Optional[BaseException], req: JobRequest, res: Dict[str, Any]) -> None:
        """Enqueue one job outcome for background writing."""
        self._queue.put(
            {
                "timestamp": time.time(),
                "url": req.url,
                "data": req.data,
                "params": req.params,
                "parsed_data": res.get("data"),
                "status": err is None,
                "status_code": res.get("status_code"),
                "latency": res.get("latency_ms"),
                "error": None if err is None else repr(err),
            }
        )

    def close(self) -> None:
        """Signal the writer thread to flush and stop."""
        self._queue.put(None)
        self._thread.join(timeout=5)

    def _writer(self) -> None:
        with open(self._path, "a", encoding="utf-8") as f:
            while True:
                record = self._queue.get()
                if record is None:
                    break
                f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
                f.flush()
