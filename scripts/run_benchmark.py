#!/usr/bin/env python3
"""Batch runner for the timetabling solver.

This script runs the backtracking solver on the bundled benchmark instances,
repeats each run a number of times, checks every timetable it gets back,
and writes the measurements to CSV.
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import sys

# Make project root importable
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

from timetabler.models import Assignment, load_constraints
from timetabler.oracle import find_violations
from timetabler.solver import solve_timetabling_problem

EXAMPLE_DIR = PROJECT_ROOT / "timetabler" / "benchmarks"

logger = logging.getLogger("run_benchmark")

FIELDNAMES = [
    "instance",
    "run",
    "status",
    "wall_time_s",
    "nodes_explored",
    "backtracks",
    "n_classes",
    "n_teachers",
    "n_rooms",
    "n_subjects",
    "days_per_week",
    "slots_per_day",
    "total_periods",
    "total_assignments",
    "utilization_rate",
    "room_utilization_rate",
    "n_warnings",
    "n_violations",
]


# ---------- Helpers ----------

def load_instance(size: str, example_dir: Path = EXAMPLE_DIR) -> Dict[str, Any]:
    path = example_dir / f"{size}.json"
    if not path.exists():
        raise FileNotFoundError(f"No example data found for '{size}' at {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def total_periods(data: Dict[str, Any]) -> int:
    """Teaching hours requested by an instance (staffed or not)."""
    subjects = {s["name"]: s.get("hoursPerWeek", s.get("hours_per_week", 0)) for s in data.get("subjects", [])}
    total = 0
    for cls in data.get("classes", []):
        curriculum = cls.get("subjects")
        names = subjects.keys() if curriculum is None else curriculum
        total += sum(subjects.get(name, 0) for name in names)
    return total


# ---------- Benchmark Runner ----------

def run_benchmark(
    sizes: List[str],
    repeats: int,
    time_limit: Optional[float],
    node_limit: Optional[int],
    output: Path,
    example_dir: Path = EXAMPLE_DIR,
) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []

    logger.info("Running benchmark (single-threaded, deterministic search).")

    for size in sizes:
        data = load_instance(size, example_dir)
        constraints = load_constraints(data)

        meta = {
            "instance": size,
            "n_classes": len(constraints.classes),
            "n_teachers": len(constraints.teachers),
            "n_rooms": len(constraints.rooms),
            "n_subjects": len(constraints.subjects),
            "days_per_week": constraints.days_per_week,
            "slots_per_day": constraints.slots_per_day,
            "total_periods": total_periods(data),
        }

        for run in range(repeats):
            solution = solve_timetabling_problem(
                constraints,
                time_limit_seconds=time_limit,
                node_limit=node_limit,
            )

            status = solution["status"]
            stats = solution.get("stats", {})
            assignments = [Assignment(**a) for a in solution.get("timetable", [])]
            violations = find_violations(assignments, constraints) if status == "FEASIBLE" else []

            record = {
                **meta,
                "run": run,
                "status": status,
                "wall_time_s": stats.get("wall_time_s"),
                "nodes_explored": stats.get("nodes_explored"),
                "backtracks": stats.get("backtracks"),
                "total_assignments": stats.get("total_assignments", 0),
                "utilization_rate": stats.get("utilization_rate"),
                "room_utilization_rate": stats.get("room_utilization_rate"),
                "n_warnings": len(solution.get("warnings", [])),
                "n_violations": len(violations),
            }
            records.append(record)

            for violation in violations:
                logger.error("[%s] run=%d: %s", size, run, violation)
            logger.info(
                "[%s] run=%d: status=%s nodes=%s time=%.3fs",
                size,
                run,
                status,
                record["nodes_explored"],
                record["wall_time_s"] or 0.0,
            )

    # ---------- Write CSV ----------

    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=FIELDNAMES)
        writer.writeheader()
        for record in records:
            writer.writerow(record)

    logger.info("Wrote benchmark results to %s", output)
    return records


# ---------- CLI ----------

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--sizes", nargs="+", default=["small", "medium", "large"])
    parser.add_argument("--repeats", type=int, default=5)
    parser.add_argument("--time-limit", type=float, default=20.0)
    parser.add_argument("--node-limit", type=int, default=None)
    parser.add_argument(
        "--output",
        type=Path,
        default=PROJECT_ROOT / "results.csv",
    )
    return parser.parse_args(argv)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = parse_args()
    run_benchmark(
        sizes=args.sizes,
        repeats=args.repeats,
        time_limit=args.time_limit,
        node_limit=args.node_limit,
        output=args.output,
    )


if __name__ == "__main__":
    main()
