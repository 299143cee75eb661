"""Metric utilities for classification and regression outcomes."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
from sklearn import metrics

MetricFn = Callable[[np.ndarray, np.ndarray], float]


def classification_metrics() -> dict[str, MetricFn]:
    return {
        "accuracy": metrics.accuracy_score,
        "balanced_accuracy": metrics.balanced_accuracy_score,
        "kappa": metrics.cohen_kappa_score,
        "macro_f1": lambda y_true, y_pred: metrics.f1_score(y_true, y_pred, average="macro"),
    }


def regression_metrics() -> dict[str, MetricFn]:
    return {
        "rmse": lambda y_true, y_pred: float(np.sqrt(metrics.mean_squared_error(y_true, y_pred))),
        "mae": metrics.mean_absolute_error,
        "r2": metrics.r2_score,
    }


def available_metrics() -> dict[str, MetricFn]:
    return {**classification_metrics(), **regression_metrics()}


__all__ = ["MetricFn", "available_metrics", "classification_metrics", "regression_metrics"]
