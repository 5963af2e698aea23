from __future__ import annotations

import threading
import time
from typing import Callable

DEFAULT_LEAD_TIME_MILLIS = 60_000

Clock = Callable[[], float]


def _now_millis(clock: Clock) -> int:
    return int(clock() * 1000)


class AccessWindow:
    """Single expiring time window, measured in epoch milliseconds."""

    def __init__(self, duration_millis: int, *, clock: Clock = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._expires_at = 0
        self.reset(duration_millis)

    @property
    def expires_at_millis(self) -> int:
        with self._lock:
            return self._expires_at

    def reset(self, duration_millis: int) -> None:
        now = _now_millis(self._clock)
        with self._lock:
            self._expires_at = now + int(duration_millis)

    def remaining(self) -> int:
        now = _now_millis(self._clock)
        with self._lock:
            return self._expires_at - now

    def is_expired(self) -> bool:
        return self.remaining() <= 0


class TokenManager:
    """Holds the access/refresh token pair and reports when a refresh is due.

    ``refresh_required()`` is a predicate only; acting on it is up to the
    caller (see ``AssemblySuiteClient.refresh_handler``)."""

    def __init__(
        self,
        access_token: str,
        refresh_token: str,
        validity_millis: int,
        *,
        lead_time_millis: int = DEFAULT_LEAD_TIME_MILLIS,
        clock: Clock = time.time,
    ) -> None:
        self._lock = threading.RLock()
        self._access_token = access_token
        self._refresh_token = refresh_token
        self._lead_time = lead_time_millis
        self._window = AccessWindow(validity_millis, clock=clock)

    @property
    def access_token(self) -> str:
        with self._lock:
            return self._access_token

    @property
    def refresh_token(self) -> str:
        with self._lock:
            return self._refresh_token

    @property
    def lead_time_millis(self) -> int:
        with self._lock:
            return self._lead_time

    def set_access_token(self, access_token: str) -> None:
        with self._lock:
            self._access_token = access_token

    def set_refresh_token(self, refresh_token: str) -> None:
        with self._lock:
            self._refresh_token = refresh_token

    def set_lead_time(self, lead_time_millis: int) -> None:
        with self._lock:
            self._lead_time = lead_time_millis

    def set_expiration(self, validity_millis: int) -> None:
        with self._lock:
            self._window.reset(validity_millis)

    def remaining(self) -> int:
        with self._lock:
            return self._window.remaining()

    def refresh_required(self) -> bool:
        with self._lock:
            return self._window.remaining() <= self._lead_time

