"""XGBoost classifier learner."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd
from sklearn.preprocessing import LabelEncoder
from xgboost import XGBClassifier

from .base import merge_params
from .registry import LearnerRegistry
from .sklearn_learners import SklearnClassifier

XGBOOST_DEFAULTS: dict[str, Any] = {
    "n_estimators": 200,
    "learning_rate": 0.1,
    "max_depth": 4,
    "subsample": 0.8,
    "colsample_bytree": 0.8,
    "min_child_weight": 1,
    "reg_lambda": 1.0,
    "reg_alpha": 0.0,
    "n_jobs": 1,
}


@LearnerRegistry.register("xgboost.classifier")
class XGBoostClassifierLearner(SklearnClassifier):
    """Gradient boosted trees.

    XGBoost only accepts integer labels ``0..k-1``, so outcomes are label
    encoded before fitting and probability columns use the original labels.
    """

    def __init__(self, *, name: str | None = None, **kwargs: Any):
        super().__init__(XGBClassifier(**merge_params(XGBOOST_DEFAULTS, kwargs)), name=name or "xgboost")

    def encode_outcome(self, outcome: pd.Series) -> tuple[np.ndarray, tuple[Any, ...] | None]:
        encoder = LabelEncoder()
        codes = encoder.fit_transform(outcome.to_numpy())
        return codes, tuple(encoder.classes_)


__all__ = ["XGBOOST_DEFAULTS", "XGBoostClassifierLearner"]
