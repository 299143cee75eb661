"""MLflow backend: one MLflow run per stack member."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

import mlflow

from .tracker import ExperimentTracker


class MLflowTracker(ExperimentTracker):
    def __init__(self, tracking_uri: str, experiment_name: str, run_name_prefix: str = "run") -> None:
        self.tracking_uri = tracking_uri
        self.experiment_name = experiment_name
        self.run_name_prefix = run_name_prefix

    @contextmanager
    def start_run(self, run_name: str, tags: Mapping[str, str] | None = None) -> Iterator[Any]:
        mlflow.set_tracking_uri(self.tracking_uri)
        mlflow.set_experiment(self.experiment_name)
        with mlflow.start_run(run_name=f"{self.run_name_prefix}-{run_name}", tags=dict(tags or {})) as run:
            yield run

    def log_params(self, params: Mapping[str, Any]) -> None:
        # params are stored as strings
        mlflow.log_params({key: str(value) for key, value in params.items()})

    def log_metrics(self, metrics: Mapping[str, float]) -> None:
        mlflow.log_metrics({key: float(value) for key, value in metrics.items()})

    def log_dict(self, payload: dict[str, Any], artifact_file: str) -> None:
        mlflow.log_dict(payload, artifact_file)


__all__ = ["MLflowTracker"]
