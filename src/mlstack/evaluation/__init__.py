"""Evaluation helpers."""

from .confusion import ConfusionSummary
from .evaluator import EvaluationResult, Evaluator, predicted_labels
from .metrics import available_metrics

__all__ = ["ConfusionSummary", "EvaluationResult", "Evaluator", "available_metrics", "predicted_labels"]
