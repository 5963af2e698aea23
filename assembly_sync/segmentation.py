"""Turn production-plan tables into per-vehicle order records.

A plan table interleaves the rows of many vehicles. A row carrying a
running number opens a new vehicle block; every following row up to the next
running number belongs to that block. Only the block whose running number
matches the requested vehicle is turned into a ``VehicleOrder``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .constants import PLAN_DATE_TYPE, PLAN_LOCATION
from .timestamps import plan_timestamp_to_wire
from .vehicle_order import VehicleOrder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanReference:
    """Catalog reference (decor, option or product) attached to a plan row."""

    code: Optional[str] = None
    short_name: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Any) -> Optional["PlanReference"]:
        if not isinstance(payload, dict):
            return None
        code = payload.get("code")
        short_name = payload.get("shortName")
        return cls(
            code=str(code) if code not in (None, "") else None,
            short_name=str(short_name) if short_name not in (None, "") else None,
        )


@dataclass(frozen=True)
class PlanRow:
    running_number: str = ""
    planned_timestamp: Optional[str] = None
    decor: Optional[PlanReference] = None
    option: Optional[PlanReference] = None
    product: Optional[PlanReference] = None

    @property
    def opens_block(self) -> bool:
        return bool(self.running_number)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PlanRow":
        running_number = payload.get("runningNumber")
        planned = payload.get("plannedTimestamp")
        return cls(
            running_number="" if running_number is None else str(running_number).strip(),
            planned_timestamp=str(planned) if planned not in (None, "") else None,
            decor=PlanReference.from_dict(payload.get("decor")),
            option=PlanReference.from_dict(payload.get("option")),
            product=PlanReference.from_dict(payload.get("product")),
        )


@dataclass(frozen=True)
class PlanTable:
    """Production plan of one series, scheduled on one line (band)."""

    band: int
    product: Optional[PlanReference] = None
    rows: Tuple[PlanRow, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PlanTable":
        raw_rows = payload.get("rows") or []
        return cls(
            band=int(payload["band"]),
            product=PlanReference.from_dict(payload.get("product")),
            rows=tuple(PlanRow.from_dict(row) for row in raw_rows),
        )


@dataclass(frozen=True)
class PlanVehicle:
    """Vehicle to look up: its running number in the plan and its order number."""

    running_number: str
    order_number: str


def _reference_code(reference: Optional[PlanReference]) -> Optional[str]:
    if reference is None:
        return None
    return reference.code


def build_vehicle_order(
    table: Optional[PlanTable], vehicle: PlanVehicle, line: int
) -> VehicleOrder:
    record = VehicleOrder()
    if table is None or table.band != line:
        logger.debug(
            "Plan band %s does not match line %s; returning empty order",
            table.band if table else None,
            line,
        )
        return record

    wanted = vehicle.running_number.strip()
    in_block = False
    features: List[str] = []

    for row in table.rows:
        if row.opens_block:
            if row.running_number.strip() == wanted:
                in_block = True
                features = []
            else:
                in_block = False

        if not in_block:
            continue

        if row.opens_block:
            record.set_order_number(vehicle.order_number)

            if table.product is not None:
                record.set_model(table.product.short_name)
                record.set_description(table.product.short_name)

            if row.planned_timestamp:
                record.add_date(
                    plan_timestamp_to_wire(row.planned_timestamp),
                    PLAN_LOCATION,
                    PLAN_DATE_TYPE,
                )

            decor_code = _reference_code(row.decor)
            if decor_code:
                features.append(decor_code)

        option_code = _reference_code(row.option)
        if option_code:
            features.append(option_code)

    record.set_features(features)
    return record
