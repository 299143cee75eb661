"""Confusion matrix summaries for discrete outcomes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
from sklearn.metrics import cohen_kappa_score, confusion_matrix


def _as_labels(values: Sequence[Any] | pd.Series) -> np.ndarray:
    return pd.Series(list(values)).infer_objects().to_numpy()


@dataclass
class ConfusionSummary:
    """Confusion matrix plus overall and per-class statistics.

    ``matrix`` rows are the reference (true) labels and columns the
    predicted labels.
    """

    labels: list[Any]
    matrix: pd.DataFrame
    accuracy: float
    kappa: float
    per_class: pd.DataFrame

    @classmethod
    def from_predictions(
        cls,
        truth: Sequence[Any] | pd.Series,
        predicted: Sequence[Any] | pd.Series,
        labels: Sequence[Any] | None = None,
    ) -> ConfusionSummary:
        truth_values = _as_labels(truth)
        predicted_values = _as_labels(predicted)
        if len(truth_values) != len(predicted_values):
            raise ValueError(f"Got {len(truth_values)} reference labels but {len(predicted_values)} predictions")
        if labels is None:
            labels = sorted(set(truth_values) | set(predicted_values), key=str)
        labels = list(labels)

        counts = confusion_matrix(truth_values, predicted_values, labels=labels)
        matrix = pd.DataFrame(
            counts,
            index=pd.Index(labels, name="reference"),
            columns=pd.Index(labels, name="prediction"),
        )

        total = counts.sum()
        true_positive = np.diag(counts).astype(float)
        false_negative = counts.sum(axis=1) - true_positive
        false_positive = counts.sum(axis=0) - true_positive
        true_negative = total - true_positive - false_negative - false_positive

        with np.errstate(divide="ignore", invalid="ignore"):
            per_class = pd.DataFrame(
                {
                    "sensitivity": true_positive / (true_positive + false_negative),
                    "specificity": true_negative / (true_negative + false_positive),
                    "precision": true_positive / (true_positive + false_positive),
                    "support": counts.sum(axis=1),
                },
                index=pd.Index(labels, name="class"),
            )

        accuracy = float(true_positive.sum() / total) if total else float("nan")
        kappa = float(cohen_kappa_score(truth_values, predicted_values, labels=labels))
        return cls(labels=labels, matrix=matrix, accuracy=accuracy, kappa=kappa, per_class=per_class)

    def to_dict(self) -> dict[str, Any]:
        return {
            "labels": [str(label) for label in self.labels],
            "matrix": self.matrix.to_numpy().tolist(),
            "accuracy": self.accuracy,
            "kappa": self.kappa,
            "per_class": {
                str(label): {key: float(value) for key, value in row.items()}
                for label, row in self.per_class.iterrows()
            },
        }


__all__ = ["ConfusionSummary"]
