from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, NoReturn, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from .client import AssemblySuiteClient
from .config import build_client, load_settings
from .constants import SERIES_NUMBER_LENGTH
from .errors import (
    AssemblySuiteError,
    ConfigurationError,
    NotAuthenticatedError,
    PayloadDecodeError,
    RemoteServiceError,
)
from .plan_loader import parse_plan_table
from .segmentation import PlanVehicle, build_vehicle_order
from .vehicle_order import VehicleOrder

app = FastAPI(title="Assembly Sync")

logger = logging.getLogger(__name__)

_client: Optional[AssemblySuiteClient] = None
_client_lock = threading.Lock()
# Line-scoped client state: one request at a time.
_operation_lock = threading.Lock()


class VehicleIdentity(BaseModel):
    running_number: str = Field(alias="runningNumber")
    order_number: str = Field(alias="orderNumber")


class SegmentRequest(BaseModel):
    line: int
    vehicle: VehicleIdentity
    table: Dict[str, Any]


class OrdersPayload(BaseModel):
    orders: List[Dict[str, Any]] = Field(default_factory=list)


def get_client() -> AssemblySuiteClient:
    global _client
    with _client_lock:
        if _client is None:
            _client = build_client(load_settings())
        return _client


def _raise_http(exc: AssemblySuiteError) -> NoReturn:
    if isinstance(exc, RemoteServiceError):
        logger.warning("Assembly suite answered %s: %s", exc.status_code, exc.body)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if isinstance(exc, NotAuthenticatedError):
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    if isinstance(exc, PayloadDecodeError):
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if isinstance(exc, ConfigurationError):
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.on_event("shutdown")
async def flush_sync_metrics() -> None:
    if _client is not None and _client.metrics is not None:
        _client.metrics.force_log(logger=logger)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/orders/segment")
def segment_order(payload: SegmentRequest) -> Dict[str, Any]:
    try:
        table = parse_plan_table(payload.table)
        vehicle = PlanVehicle(
            running_number=payload.vehicle.running_number,
            order_number=payload.vehicle.order_number,
        )
        record = build_vehicle_order(table, vehicle, payload.line)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return record.serialize()


@app.put("/lines/{line}/orders")
def push_orders(
    line: int,
    payload: OrdersPayload,
    client: AssemblySuiteClient = Depends(get_client),
) -> Dict[str, int]:
    with _operation_lock:
        try:
            client.set_production_line(line)
            for entry in payload.orders:
                client.add_order(VehicleOrder.from_wire(entry))
            client.push_batch()
        except AssemblySuiteError as exc:
            _raise_http(exc)
    return {"pushed": len(payload.orders)}


@app.get("/lines/{line}/orders")
def pull_orders(
    line: int, client: AssemblySuiteClient = Depends(get_client)
) -> List[Dict[str, Any]]:
    with _operation_lock:
        try:
            client.set_production_line(line)
            records = client.pull_batch()
        except AssemblySuiteError as exc:
            _raise_http(exc)
    return [record.serialize() for record in records]


@app.get("/lines/{line}/series/{prefix}/position/{order_number}")
def series_position(
    line: int,
    prefix: str,
    order_number: str,
    client: AssemblySuiteClient = Depends(get_client),
) -> Dict[str, Optional[int]]:
    if len(prefix) != SERIES_NUMBER_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Series prefix must have {SERIES_NUMBER_LENGTH} characters.",
        )
    target = VehicleOrder()
    target.set_order_number(order_number)
    with _operation_lock:
        try:
            client.set_production_line(line)
            client.pull_batch()
            client.select_series(prefix)
            position = client.sequence_position(target)
        except AssemblySuiteError as exc:
            _raise_http(exc)
    return {"position": position}
