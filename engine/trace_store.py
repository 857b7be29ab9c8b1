"""
trace_store.py — Finished Runs, Keyed by Run Id
================================================
Server-side home for recorded traces.  A browser session only carries
the run id; the Recorder it names lives here until it is replaced,
discarded, or pushed out by newer runs.

Eviction:
  Least recently used first, once more than `capacity` runs are held.
  A session whose run was evicted simply has no trace any more and is
  asked to compute again.
"""

import logging
import threading
from collections import OrderedDict
from typing import Optional

from engine.recorder import Recorder


logger = logging.getLogger(__name__)


class TraceStore:
    """Bounded run_id → Recorder map.  Safe to share between request threads."""

    def __init__(self, capacity: int = 256):
        if capacity < 1:
            raise ValueError(f"TraceStore capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._runs: "OrderedDict[str, Recorder]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, run_id: str) -> Optional[Recorder]:
        with self._lock:
            rec = self._runs.get(run_id)
            if rec is not None:
                self._runs.move_to_end(run_id)
            return rec

    def put(self, run_id: str, rec: Recorder) -> None:
        with self._lock:
            self._runs[run_id] = rec
            self._runs.move_to_end(run_id)
            while len(self._runs) > self.capacity:
                evicted, _ = self._runs.popitem(last=False)
                logger.debug("evicted trace %s (capacity %d)", evicted, self.capacity)

    def pop(self, run_id: str) -> Optional[Recorder]:
        with self._lock:
            return self._runs.pop(run_id, None)

    def __contains__(self, run_id: object) -> bool:
        with self._lock:
            return run_id in self._runs

    def __len__(self) -> int:
        with self._lock:
            return len(self._runs)
