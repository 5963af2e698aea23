from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

import requests

from .constants import (
    ACCESS_TOKEN_FIELD,
    AUTHENTICATE_METHOD,
    AUTHENTICATE_PATH,
    ORDER_NUMBER_FIELD,
    ORDERS_READ_METHOD,
    ORDERS_READ_PATH,
    ORDERS_SEND_METHOD,
    ORDERS_SEND_PATH,
    PLANNING_AREA_PREFIX,
    REFRESH_TOKEN_FIELD,
    SERIES_NUMBER_LENGTH,
    TOKEN_VALIDITY_MILLIS,
)
from .errors import ConfigurationError, NotAuthenticatedError, PayloadDecodeError
from .metrics import SyncMetrics
from .segmentation import PlanTable, PlanVehicle, build_vehicle_order
from .timestamps import millis_to_seconds
from .tokens import TokenManager
from .transport import (
    DEFAULT_TIMEOUT,
    add_query_parameters,
    decode_array,
    decode_object,
    request,
)
from .vehicle_order import VehicleOrder

logger = logging.getLogger(__name__)

RefreshHandler = Callable[["AssemblySuiteClient"], None]


def credentials_refresh(username: str, password: str) -> RefreshHandler:
    """Refresh strategy that simply authenticates again with stored credentials."""

    def handler(client: "AssemblySuiteClient") -> None:
        logger.info("Refreshing token...")
        client.authenticate(username, password)

    return handler


class AssemblySuiteClient:
    """Synchronizes vehicle orders of one production line with the assembly suite.

    Batch and series state belong to the client and are guarded by an internal
    lock, so one instance can be shared between threads. Remote errors are
    never retried; they propagate to the caller."""

    def __init__(
        self,
        base_url: Optional[str],
        *,
        refresh_handler: Optional[RefreshHandler] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        metrics: Optional[SyncMetrics] = None,
        token_validity_millis: int = TOKEN_VALIDITY_MILLIS,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.refresh_handler = refresh_handler
        self.session = session or requests.Session()
        self.timeout = timeout
        self.metrics = metrics
        self.token_validity_millis = token_validity_millis
        self.token_manager: Optional[TokenManager] = None
        self.production_line: Optional[int] = None
        self._batch: List[VehicleOrder] = []
        self._series: List[VehicleOrder] = []
        self._lock = threading.RLock()

    @property
    def is_authenticated(self) -> bool:
        return self.token_manager is not None

    @property
    def batch(self) -> List[VehicleOrder]:
        with self._lock:
            return list(self._batch)

    @property
    def series(self) -> List[VehicleOrder]:
        with self._lock:
            return list(self._series)

    def authenticate(self, username: Optional[str], password: Optional[str]) -> None:
        if not username or not password or not self.base_url:
            raise ConfigurationError("Not all credentials are set.")

        text = request(
            self.session,
            self._url(AUTHENTICATE_PATH),
            AUTHENTICATE_METHOD,
            body={"username": username, "password": password},
            timeout=self.timeout,
        )
        payload = decode_object(text)
        access_token = payload.get(ACCESS_TOKEN_FIELD)
        refresh_token = payload.get(REFRESH_TOKEN_FIELD)
        if access_token is None or refresh_token is None:
            raise PayloadDecodeError("Authentication response is missing tokens.")

        with self._lock:
            if self.token_manager is None:
                self.token_manager = TokenManager(
                    str(access_token), str(refresh_token), self.token_validity_millis
                )
            else:
                self.token_manager.set_access_token(str(access_token))
                self.token_manager.set_refresh_token(str(refresh_token))
                self.token_manager.set_expiration(self.token_validity_millis)
        logger.info(
            "Authenticated against %s as %s (token valid for %ss)",
            self.base_url,
            username,
            millis_to_seconds(self.token_validity_millis),
        )

    def set_production_line(self, number: int) -> None:
        with self._lock:
            self.production_line = number
            self.reset_orders()

    def reset_orders(self) -> None:
        with self._lock:
            self._batch = []
            self._series = []

    def add_order(self, record: VehicleOrder) -> None:
        with self._lock:
            self._batch.append(record)

    def stage_vehicle(self, table: Optional[PlanTable], vehicle: PlanVehicle) -> VehicleOrder:
        """Segment ``table`` for ``vehicle`` on the active line and queue the result."""
        line = self._require_line()
        record = build_vehicle_order(table, vehicle, line)
        self.add_order(record)
        return record

    def push_batch(self) -> bool:
        with self._lock:
            if not self._batch:
                return False
            line = self._require_line()
            orders = [record.serialize() for record in self._batch]

        token = self._fresh_token()
        payload = {
            "planningArea": self._planning_area(line),
            "orders": orders,
            "isTransaction": True,
        }
        request(
            self.session,
            self._url(ORDERS_SEND_PATH),
            ORDERS_SEND_METHOD,
            token,
            payload,
            timeout=self.timeout,
        )
        logger.info("Pushed %s orders to %s", len(orders), self._planning_area(line))
        self._record_metrics("push", line, len(orders))
        return True

    def pull_batch(self) -> List[VehicleOrder]:
        line = self._require_line()
        token = self._fresh_token()
        url = add_query_parameters(
            self._url(ORDERS_READ_PATH), None, [self._planning_area(line)]
        )
        text = request(self.session, url, ORDERS_READ_METHOD, token, timeout=self.timeout)
        entries = decode_array(text) if text else []

        pulled: List[VehicleOrder] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                logger.debug("Skipping order entry %s: not an object", index)
                continue
            if not isinstance(entry.get(ORDER_NUMBER_FIELD), str):
                logger.debug("Skipping order entry %s: no order number", index)
                continue
            pulled.append(VehicleOrder.from_wire(entry))

        with self._lock:
            self._batch.extend(pulled)
        logger.info(
            "Pulled %s of %s orders from %s",
            len(pulled),
            len(entries),
            self._planning_area(line),
        )
        self._record_metrics("pull", line, len(pulled))
        return pulled

    def select_series(self, prefix: Optional[str]) -> None:
        if not isinstance(prefix, str) or len(prefix) != SERIES_NUMBER_LENGTH:
            return
        with self._lock:
            if not self._batch:
                return
            for record in self._batch:
                series_number = record.series_number
                if series_number is not None and series_number.startswith(prefix):
                    self._series.append(record)

    def sequence_position(self, record: Optional[VehicleOrder]) -> Optional[int]:
        """1-based position of the last series entry with the record's order number."""
        if record is None:
            return None
        position = None
        with self._lock:
            for index, candidate in enumerate(self._series, start=1):
                if record.same_order(candidate):
                    position = index
        return position

    def _fresh_token(self) -> str:
        if self.token_manager is None:
            raise NotAuthenticatedError("authenticate() must be called first.")
        if self.token_manager.refresh_required():
            if self.refresh_handler is None:
                logger.warning(
                    "Access token refresh required but no refresh handler is configured"
                )
            else:
                try:
                    self.refresh_handler(self)
                except Exception as exc:
                    logger.error(f"Failed to refresh token: {exc}")
                    raise
        return self.token_manager.access_token

    def _require_line(self) -> int:
        if self.production_line is None:
            raise ConfigurationError("No production line selected.")
        return self.production_line

    def _url(self, path: str) -> str:
        if not self.base_url:
            raise ConfigurationError("Not all credentials are set.")
        return f"{self.base_url}{path}"

    @staticmethod
    def _planning_area(line: int) -> str:
        return f"{PLANNING_AREA_PREFIX}{line}"

    def _record_metrics(self, operation: str, line: int, orders: int) -> None:
        if self.metrics is not None:
            self.metrics.record(operation, line, orders, logger=logger)
