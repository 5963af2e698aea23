"""
Load production-plan tables exported from the ERP as JSON.

A plan file holds a single object::

    {
      "band": 5,
      "product": {"code": "4711", "shortName": "CARAVAN-X"},
      "rows": [
        {"runningNumber": "001", "plannedTimestamp": "20240301083000",
         "decor": {"code": "D12"}, "option": {"code": "OPT1"}},
        {"option": {"code": "OPT2"}}
      ]
    }
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from .segmentation import PlanTable


def parse_plan_table(data: Any) -> PlanTable:
    """Build a ``PlanTable`` from decoded JSON.

    Raises:
        ValueError: If the structure is not a plan object or ``band`` is
            missing or not an integer.
    """
    if not isinstance(data, dict):
        raise ValueError("Plan JSON must be an object.")
    if "band" not in data:
        raise ValueError("Plan JSON is missing required key 'band'.")
    try:
        int(data["band"])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Plan band must be an integer, got {data['band']!r}.") from exc

    rows = data.get("rows", [])
    if not isinstance(rows, list):
        raise ValueError("Plan 'rows' must be a list.")
    for idx, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ValueError(f"Plan row at index {idx} must be an object.")
    return PlanTable.from_dict(data)


def load_plan_table(plan_file: str | Path) -> PlanTable:
    """Load a plan table from a JSON file.

    Raises:
        FileNotFoundError: If the given file path does not exist.
        ValueError: If the file is not valid JSON or not a plan object.
    """
    path = Path(plan_file)
    if not path.exists():
        raise FileNotFoundError(f"plan file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        try:
            data: Dict[str, Any] = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in plan file: {path}") from exc
    return parse_plan_table(data)
