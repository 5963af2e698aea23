"""Segment a production plan for one vehicle and push the order to the assembly suite.

Usage:
    python scripts/sync_plan.py plan.json 001 470112345 --line 5

Connection settings come from the ASSEMBLY_SUITE_* environment variables.
Pass --dry-run to print the order instead of pushing it.
"""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace

from assembly_sync.config import build_client, load_settings
from assembly_sync.plan_loader import load_plan_table
from assembly_sync.segmentation import PlanVehicle, build_vehicle_order

logger = logging.getLogger("sync_plan")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("plan", help="Path to the plan table JSON file.")
    parser.add_argument("running_number", help="Running number of the vehicle in the plan.")
    parser.add_argument("order_number", help="Nine character order number of the vehicle.")
    parser.add_argument("--line", type=int, help="Production line (default: ASSEMBLY_SUITE_LINE).")
    parser.add_argument("--dry-run", action="store_true", help="Print the order only.")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )

    settings = load_settings()
    line = args.line if args.line is not None else settings.production_line
    if line is None:
        parser.error("--line is required when ASSEMBLY_SUITE_LINE is not set")

    table = load_plan_table(args.plan)
    vehicle = PlanVehicle(args.running_number, args.order_number)

    if args.dry_run:
        record = build_vehicle_order(table, vehicle, line)
        print(json.dumps(record.serialize(), indent=2))
        return

    client = build_client(replace(settings, production_line=line))
    record = client.stage_vehicle(table, vehicle)
    if record.order_number is None:
        logger.warning("Vehicle %s not found in plan for line %s", args.running_number, line)
        return
    client.push_batch()
    logger.info("Pushed order %s", record.order_number)


if __name__ == "__main__":
    main()
