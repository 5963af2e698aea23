from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .constants import (
    DATE_FIELD,
    DATES_FIELD,
    DESCRIPTION_FIELD,
    FEATURES_FIELD,
    LOCATION_FIELD,
    MODEL_FIELD,
    ORDER_NUMBER_FIELD,
    ORDER_NUMBER_LENGTH,
    SERIES_NUMBER_LENGTH,
    TYPE_FIELD,
)


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class DateEntry:
    """Scheduled (date, location, type) entry of a vehicle order."""

    date: Optional[str]
    location: Optional[str]
    type: Optional[str]

    def to_wire(self) -> Dict[str, Optional[str]]:
        return {
            DATE_FIELD: self.date,
            LOCATION_FIELD: self.location,
            TYPE_FIELD: self.type,
        }

    @classmethod
    def from_wire(cls, payload: Dict[str, Any]) -> "DateEntry":
        return cls(
            date=_optional_str(payload.get(DATE_FIELD)),
            location=_optional_str(payload.get(LOCATION_FIELD)),
            type=_optional_str(payload.get(TYPE_FIELD)),
        )


class VehicleOrder:
    """Per-vehicle order record exchanged with the assembly suite.

    The order number is only accepted when it is exactly nine characters long;
    the series number is always derived from its first four characters.
    """

    def __init__(self) -> None:
        self._order_number: Optional[str] = None
        self._series_number: Optional[str] = None
        self.model: Optional[str] = None
        self.description: Optional[str] = None
        self.dates: List[DateEntry] = []
        self.features: List[str] = []

    def __repr__(self) -> str:
        return (
            f"VehicleOrder(order_number={self._order_number!r}, "
            f"model={self.model!r}, features={self.features!r})"
        )

    @property
    def order_number(self) -> Optional[str]:
        return self._order_number

    @property
    def series_number(self) -> Optional[str]:
        return self._series_number

    def set_order_number(self, value: Optional[str]) -> None:
        if not isinstance(value, str) or len(value) != ORDER_NUMBER_LENGTH:
            return
        self._order_number = value
        self._series_number = value[:SERIES_NUMBER_LENGTH]

    def set_model(self, model: Optional[str]) -> None:
        self.model = model

    def set_description(self, description: Optional[str]) -> None:
        self.description = description

    def add_date(
        self, date: Optional[str], location: Optional[str], type: Optional[str]
    ) -> None:
        self.dates.append(DateEntry(date, location, type))

    def set_features(self, codes: Iterable[str]) -> None:
        """Assign a copy of ``codes`` followed by the record's series number."""
        features = list(codes)
        if self._series_number is not None:
            features.append(self._series_number)
        self.features = features

    def same_order(self, other: Optional["VehicleOrder"]) -> bool:
        if other is None or self._order_number is None:
            return False
        return self._order_number == other.order_number

    def serialize(self) -> Dict[str, Any]:
        return {
            ORDER_NUMBER_FIELD: self._order_number,
            MODEL_FIELD: self.model,
            DESCRIPTION_FIELD: self.description,
            DATES_FIELD: [entry.to_wire() for entry in self.dates],
            FEATURES_FIELD: list(self.features),
        }

    def deserialize(self, payload: Dict[str, Any]) -> None:
        """Replace every field from a wire object.

        Missing keys leave the field unset, date entries that are not objects
        and features that are not strings are dropped."""
        order_number = _optional_str(payload.get(ORDER_NUMBER_FIELD))
        self._order_number = order_number
        if order_number is not None and len(order_number) >= SERIES_NUMBER_LENGTH:
            self._series_number = order_number[:SERIES_NUMBER_LENGTH]
        else:
            self._series_number = None

        self.model = _optional_str(payload.get(MODEL_FIELD))
        self.description = _optional_str(payload.get(DESCRIPTION_FIELD))

        raw_dates = payload.get(DATES_FIELD)
        self.dates = [
            DateEntry.from_wire(entry)
            for entry in (raw_dates if isinstance(raw_dates, list) else [])
            if isinstance(entry, dict)
        ]

        raw_features = payload.get(FEATURES_FIELD)
        self.features = [
            feature
            for feature in (raw_features if isinstance(raw_features, list) else [])
            if isinstance(feature, str)
        ]

    @classmethod
    def from_wire(cls, payload: Dict[str, Any]) -> "VehicleOrder":
        record = cls()
        record.deserialize(payload)
        return record
