#!/usr/bin/env python3
"""Plot the CSV written by run_benchmark.py.

    python3 scripts/plot_results.py [--results results.csv]
"""

import argparse
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

# ============================================================
# Paths
# ============================================================
PROJECT_ROOT = Path(__file__).resolve().parents[1]
RESULTS_CSV = PROJECT_ROOT / "results.csv"

INSTANCE_ORDER = ["small", "medium", "large"]


# ============================================================
# Load + summarize
# ============================================================
def load_results(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path)
    df.columns = df.columns.str.strip()
    return df


def summarize_results(df: pd.DataFrame) -> pd.DataFrame:
    """Per-instance mean/std of wall time and nodes, plus the feasible share."""
    grouped = df.groupby("instance").agg(
        runs=("run", "count"),
        wall_time_mean=("wall_time_s", "mean"),
        wall_time_std=("wall_time_s", "std"),
        nodes_mean=("nodes_explored", "mean"),
        backtracks_mean=("backtracks", "mean"),
        feasible_share=("status", lambda s: (s == "FEASIBLE").mean()),
    )
    order = [i for i in INSTANCE_ORDER if i in grouped.index]
    order += sorted(i for i in grouped.index if i not in order)
    return grouped.reindex(order)


# ============================================================
# Plots
# ============================================================
def plot_summary(df: pd.DataFrame) -> None:
    summary = summarize_results(df)

    # PLOT 1 — Wall time by instance
    plt.figure(figsize=(6, 4))
    plt.bar(
        summary.index,
        summary["wall_time_mean"],
        yerr=summary["wall_time_std"].fillna(0),
        capsize=6,
    )
    plt.ylabel("Mean wall time (s)")
    plt.title("Solve time by instance size")
    plt.grid(axis="y")
    plt.tight_layout()

    # PLOT 2 — Search effort by instance
    plt.figure(figsize=(6, 4))
    plt.bar(summary.index, summary["nodes_mean"], label="nodes explored")
    plt.bar(summary.index, summary["backtracks_mean"], label="backtracks")
    plt.yscale("log")
    plt.ylabel("Count (log)")
    plt.title("Search effort by instance size")
    plt.legend()
    plt.grid(axis="y")
    plt.tight_layout()

    # PLOT 3 — Outcome counts
    plt.figure(figsize=(6, 4))
    counts = df.groupby(["instance", "status"]).size().unstack(fill_value=0)
    counts = counts.reindex(summary.index)
    bottom = None
    for status in counts.columns:
        plt.bar(counts.index, counts[status], bottom=bottom, label=status)
        bottom = counts[status] if bottom is None else bottom + counts[status]
    plt.ylabel("Runs")
    plt.title("Search outcome by instance size")
    plt.legend()
    plt.tight_layout()

    plt.show()


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--results", type=Path, default=RESULTS_CSV)
    args = parser.parse_args()

    print(f"Loading results from: {args.results}")
    df = load_results(args.results)
    print(summarize_results(df).to_string())
    plot_summary(df)


if __name__ == "__main__":
    main()
