import csv

import pandas as pd
import pytest

from scripts.plot_results import load_results, summarize_results
from scripts.run_benchmark import load_instance, parse_args, run_benchmark, total_periods


class TestBenchmarkHelpers:
    def test_total_periods_respects_curriculum(self):
        data = {
            "subjects": [
                {"name": "Math", "hoursPerWeek": 3},
                {"name": "Art", "hours_per_week": 2},
            ],
            "classes": [{"id": "c1"}, {"id": "c2", "subjects": ["Art"]}],
        }
        assert total_periods(data) == 3 + 2 + 2

    def test_missing_instance(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_instance("huge", tmp_path)

    def test_bundled_instances_load(self):
        for size in ("small", "medium", "large"):
            assert load_instance(size)["teachers"]

    def test_parse_args_defaults(self):
        args = parse_args([])
        assert args.sizes == ["small", "medium", "large"]
        assert args.node_limit is None


class TestRunBenchmark:
    def test_writes_csv(self, tmp_path):
        output = tmp_path / "out" / "results.csv"

        records = run_benchmark(
            sizes=["small", "large"],
            repeats=2,
            time_limit=30.0,
            node_limit=None,
            output=output,
        )

        assert len(records) == 4
        with output.open(newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [r["instance"] for r in rows] == ["small", "small", "large", "large"]
        assert {r["status"] for r in rows} == {"FEASIBLE"}
        assert {r["n_violations"] for r in rows} == {"0"}
        # Latin has no teacher in the large instance
        assert {r["n_warnings"] for r in rows if r["instance"] == "large"} == {"6"}

    def test_results_summary(self, tmp_path):
        output = tmp_path / "results.csv"
        run_benchmark(
            sizes=["small", "medium"],
            repeats=1,
            time_limit=30.0,
            node_limit=None,
            output=output,
        )

        summary = summarize_results(load_results(output))

        assert list(summary.index) == ["small", "medium"]
        assert list(summary["feasible_share"]) == [1.0, 1.0]


def test_summarize_orders_known_sizes_first():
    df = pd.DataFrame(
        {
            "instance": ["large", "custom", "small", "small"],
            "run": [0, 0, 0, 1],
            "status": ["ABORTED", "FEASIBLE", "FEASIBLE", "INFEASIBLE"],
            "wall_time_s": [1.0, 0.5, 0.1, 0.3],
            "nodes_explored": [100, 10, 5, 7],
            "backtracks": [50, 0, 0, 2],
        }
    )

    summary = summarize_results(df)

    assert list(summary.index) == ["small", "large", "custom"]
    assert summary.loc["small", "runs"] == 2
    assert summary.loc["small", "feasible_share"] == pytest.approx(0.5)
    assert summary.loc["small", "wall_time_mean"] == pytest.approx(0.2)
    assert summary.loc["large", "feasible_share"] == 0.0
