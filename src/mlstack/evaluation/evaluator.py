"""Evaluate member predictions against a task's outcome."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from mlstack.core.protocols import Prediction
from mlstack.tasks import Task

from .confusion import ConfusionSummary
from .metrics import classification_metrics, regression_metrics


@dataclass
class EvaluationResult:
    """Container for evaluation metrics and the optional confusion summary."""

    metrics: dict[str, float]
    confusion: ConfusionSummary | None = None


def predicted_labels(prediction: Prediction) -> pd.Series:
    """Collapse a probability table to its most probable label per row."""

    if isinstance(prediction, pd.Series):
        return prediction
    columns = np.asarray(prediction.columns, dtype=object)
    return pd.Series(columns[prediction.to_numpy().argmax(axis=1)], index=prediction.index).infer_objects()


class Evaluator:
    """Compute configured metrics for discrete or continuous outcomes."""

    def __init__(
        self,
        classification_metric_names: list[str] | None = None,
        regression_metric_names: list[str] | None = None,
    ):
        self.classification_metric_names = classification_metric_names or ["accuracy", "balanced_accuracy", "kappa"]
        self.regression_metric_names = regression_metric_names or ["rmse", "mae", "r2"]
        self.classification_fns = classification_metrics()
        self.regression_fns = regression_metrics()

    def evaluate(self, task: Task, prediction: Prediction) -> EvaluationResult:
        truth = task.Y
        if truth is None:
            raise ValueError("Cannot evaluate predictions for a task without an outcome")
        if len(prediction) != len(truth):
            raise ValueError(f"Got {len(prediction)} predictions for {len(truth)} rows")

        if task.outcome_type.is_discrete:
            return self._evaluate_discrete(truth, prediction)
        return self._evaluate_continuous(truth, prediction)

    def _evaluate_discrete(self, truth: pd.Series, prediction: Prediction) -> EvaluationResult:
        predicted = predicted_labels(prediction)
        labels = list(prediction.columns) if isinstance(prediction, pd.DataFrame) else []
        labels += sorted((set(truth.dropna()) | set(predicted)) - set(labels), key=str)
        confusion = ConfusionSummary.from_predictions(truth, predicted, labels=labels)

        truth_values = truth.to_numpy()
        predicted_values = predicted.to_numpy()
        metrics: dict[str, float] = {}
        for name in self.classification_metric_names:
            metric_fn = self.classification_fns.get(name)
            if metric_fn is None:
                continue
            metrics[name] = float(metric_fn(truth_values, predicted_values))
        return EvaluationResult(metrics=metrics, confusion=confusion)

    def _evaluate_continuous(self, truth: pd.Series, prediction: Prediction) -> EvaluationResult:
        if isinstance(prediction, pd.DataFrame):
            if prediction.shape[1] != 1:
                raise ValueError("Continuous outcomes need a single column of predictions")
            prediction = prediction.iloc[:, 0]
        truth_values = truth.to_numpy(dtype=float)
        predicted_values = prediction.to_numpy(dtype=float)
        metrics: dict[str, float] = {}
        for name in self.regression_metric_names:
            metric_fn = self.regression_fns.get(name)
            if metric_fn is None:
                continue
            metrics[name] = float(metric_fn(truth_values, predicted_values))
        return EvaluationResult(metrics=metrics)


__all__ = ["EvaluationResult", "Evaluator", "predicted_labels"]
