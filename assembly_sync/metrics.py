from __future__ import annotations

import os
import threading
import time
from collections import Counter
from dataclasses import dataclass
from typing import Dict


@dataclass
class Snapshot:
    total: int
    orders: int
    per_operation: Dict[str, int]


class SyncMetrics:
    """In-memory counter that logs aggregated push/pull statistics."""

    def __init__(self, *, log_every: int = 25, log_interval: int = 300) -> None:
        self._total = 0
        self._orders = 0
        self._per_operation: Counter[str] = Counter()
        self._last_log = 0.0
        self._log_every = max(1, log_every)
        self._log_interval = max(10, log_interval)
        self._lock = threading.Lock()

    def record(self, operation: str, line: object, orders: int, *, logger) -> None:
        key = f"{operation or '<unknown>'}@{line}"
        timestamp = time.time()
        with self._lock:
            self._total += 1
            self._orders += max(0, orders)
            self._per_operation[key] += 1
            should_log = self._should_log(timestamp)
            snapshot = self._snapshot_locked() if should_log else None
            if should_log:
                self._last_log = timestamp
        if snapshot:
            self._log(snapshot, logger)

    def force_log(self, *, logger) -> None:
        with self._lock:
            snapshot = self._snapshot_locked()
        self._log(snapshot, logger)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot_locked()

    def _log(self, snapshot: Snapshot, logger) -> None:
        logger.info(
            "sync-metrics total=%s orders=%s breakdown=%s",
            snapshot.total,
            snapshot.orders,
            self._format_breakdown(snapshot.per_operation),
        )

    def _should_log(self, timestamp: float) -> bool:
        if self._total % self._log_every == 0:
            return True
        if timestamp - self._last_log >= self._log_interval:
            return True
        return False

    def _snapshot_locked(self) -> Snapshot:
        return Snapshot(
            total=self._total,
            orders=self._orders,
            per_operation=dict(self._per_operation),
        )

    @staticmethod
    def _format_breakdown(per_operation: Dict[str, int]) -> str:
        if not per_operation:
            return "<none>"
        ordered = sorted(per_operation.items(), key=lambda item: item[0])
        return ", ".join(f"{key}:{count}" for key, count in ordered)


def build_metrics_from_env() -> SyncMetrics:
    log_every = int(os.getenv("METRIC_LOG_EVERY", "25"))
    log_interval = int(os.getenv("METRIC_LOG_INTERVAL", "300"))
    return SyncMetrics(log_every=log_every, log_interval=log_interval)
