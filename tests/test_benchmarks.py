import sys
from pathlib import Path

import pytest

from tictactoe.benchmarks import BenchConfig, run_benchmark, time_search
from tictactoe.solver import SearchResult
from tictactoe.tracking import maybe_mlflow_run


def test_time_search_empty_board():
    seconds, res = time_search(use_cache=True)
    assert isinstance(res, SearchResult)
    assert seconds >= 0.0
    assert res.score == 0
    assert res.move == 0


def test_run_benchmark_summary():
    out = run_benchmark(BenchConfig(repeats=3))
    assert out.repeats == 3
    assert out.use_cache is True
    assert out.mean_s >= 0.0
    assert out.p95_s >= 0.0
    assert out.std_s >= 0.0
    assert out.score == 0
    assert set(out.metrics()) == {"search_mean_s", "search_std_s", "search_p95_s", "search_nodes"}
    assert (out.nodes, out.move) == (time_search(use_cache=True)[1].nodes, 0)


def test_run_benchmark_rejects_zero_repeats():
    with pytest.raises(ValueError):
        run_benchmark(BenchConfig(repeats=0))


def test_tracking_disabled_yields_false(tmp_path: Path):
    with maybe_mlflow_run(False, run_name="x", log_dir=tmp_path) as tracked:
        assert tracked is False


def test_tracking_soft_fails_without_mlflow(tmp_path: Path, monkeypatch):
    monkeypatch.setitem(sys.modules, "mlflow", None)
    with maybe_mlflow_run(True, run_name="x", log_dir=tmp_path) as tracked:
        assert tracked is False
    out = run_benchmark(BenchConfig(repeats=1, tracking="mlflow", log_dir=tmp_path))
    assert out.score == 0
