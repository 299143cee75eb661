"""Learner interface and registered implementations."""

from . import sklearn_learners, xgboost  # noqa: F401 - trigger registrations
from .base import FittedLearner, Learner, OutputKind, merge_params
from .registry import LearnerRegistry
from .sklearn_learners import (
    FittedClassifier,
    FittedRegressor,
    FittedTransformer,
    SklearnClassifier,
    SklearnLearner,
    SklearnRegressor,
    SklearnTransformer,
)

__all__ = [
    "FittedClassifier",
    "FittedLearner",
    "FittedRegressor",
    "FittedTransformer",
    "Learner",
    "LearnerRegistry",
    "OutputKind",
    "SklearnClassifier",
    "SklearnLearner",
    "SklearnRegressor",
    "SklearnTransformer",
    "merge_params",
]
