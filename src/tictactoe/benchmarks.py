"""
Search timing: repeated full searches from the empty board.
"""
from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np

from .game_basics import Board
from .solver import Search, SearchResult
from .tracking import log_metrics, log_params, maybe_mlflow_run


@dataclass
class BenchConfig:
    repeats: int = 5
    use_cache: bool = True
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


@dataclass(frozen=True)
class BenchResult:
    repeats: int
    use_cache: bool
    mean_s: float
    std_s: float
    p95_s: float
    nodes: int
    move: int
    score: int

    def metrics(self) -> Dict[str, float]:
        return {
            "search_mean_s": self.mean_s,
            "search_std_s": self.std_s,
            "search_p95_s": self.p95_s,
            "search_nodes": float(self.nodes),
        }


def time_search(use_cache: bool = True) -> Tuple[float, SearchResult]:
    """One fresh search from the empty board, X to move. Returns (seconds, SearchResult)."""
    search = Search("X", "O", use_cache=use_cache)
    board = Board()
    t0 = time.perf_counter()
    res = search.best_move(board, "X")
    return time.perf_counter() - t0, res


def run_benchmark(cfg: Optional[BenchConfig] = None) -> BenchResult:
    cfg = cfg or BenchConfig()
    if cfg.repeats < 1:
        raise ValueError(f"repeats must be >= 1, got {cfg.repeats}")
    with maybe_mlflow_run(cfg.tracking == "mlflow", run_name="search_bench", log_dir=cfg.log_dir) as tracked:
        if tracked:
            log_params({"repeats": cfg.repeats, "use_cache": cfg.use_cache})
        samples = [time_search(cfg.use_cache) for _ in range(cfg.repeats)]
        for i, (seconds, sample) in enumerate(samples):
            logging.debug("repeat=%d seconds=%.4f nodes=%d", i, seconds, sample.nodes)
        times = np.array([seconds for seconds, _ in samples], dtype=float)
        res = samples[-1][1]
        out = BenchResult(
            repeats=cfg.repeats,
            use_cache=cfg.use_cache,
            mean_s=float(times.mean()),
            std_s=float(times.std()),
            p95_s=float(np.percentile(times, 95)),
            nodes=res.nodes,
            move=res.move,
            score=res.score,
        )
        if tracked:
            log_metrics(out.metrics())
    logging.info("bench %s", asdict(out))
    return out
