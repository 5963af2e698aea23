import json

import pytest

from assembly_sync.plan_loader import load_plan_table, parse_plan_table
from assembly_sync.segmentation import PlanReference


def _write(tmp_path, payload, name="plan.json"):
    path = tmp_path / name
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_load_plan_table(tmp_path):
    path = _write(
        tmp_path,
        {
            "band": 5,
            "product": {"code": "4711", "shortName": "CARAVAN-X"},
            "rows": [{"runningNumber": "001"}, {"option": {"code": "OPT1"}}],
        },
    )
    table = load_plan_table(path)
    assert table.band == 5
    assert table.product == PlanReference("4711", "CARAVAN-X")
    assert len(table.rows) == 2
    assert table.rows[1].option == PlanReference("OPT1")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_plan_table(tmp_path / "missing.json")


def test_invalid_json(tmp_path):
    with pytest.raises(ValueError, match="Invalid JSON"):
        load_plan_table(_write(tmp_path, "{not json"))


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"rows": []},
        {"band": "five"},
        {"band": 5, "rows": {}},
        {"band": 5, "rows": ["row"]},
    ],
)
def test_invalid_structure(payload):
    with pytest.raises(ValueError):
        parse_plan_table(payload)


def test_rows_are_optional():
    assert parse_plan_table({"band": 3}).rows == ()
