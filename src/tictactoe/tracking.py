"""
Benchmark tracking helpers (optional MLflow backend).

MLflow is imported only when tracking is requested, so it stays an optional
extra. Tracking failures never stop a benchmark run.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional


@contextmanager
def maybe_mlflow_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[bool]:
    """Yield True inside an active MLflow run, False when tracking is off or unavailable."""
    if not enabled:
        yield False
        return
    try:
        import mlflow  # type: ignore

        if log_dir is not None:
            mlflow.set_tracking_uri(log_dir.resolve().joinpath("mlruns").as_uri())
        run = mlflow.start_run(run_name=run_name)
    except Exception as exc:
        # Soft-fail: continue without tracking
        logging.warning("MLflow tracking unavailable: %s", exc)
        run = None
    if run is None:
        yield False
        return
    with run:
        yield True


def log_params(params: Dict[str, object]) -> None:
    try:
        import mlflow  # type: ignore

        mlflow.log_params(params)
    except Exception as exc:
        logging.debug("mlflow.log_params skipped: %s", exc)


def log_metrics(metrics: Dict[str, float]) -> None:
    try:
        import mlflow  # type: ignore

        mlflow.log_metrics(metrics)
    except Exception as exc:
        logging.debug("mlflow.log_metrics skipped: %s", exc)
