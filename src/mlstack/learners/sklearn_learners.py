"""Concrete scikit-learn based learners implementing the Learner interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, clone
from sklearn.decomposition import PCA
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import ElasticNet, LogisticRegression
from sklearn.preprocessing import StandardScaler

from mlstack.core.errors import DimensionError, InsufficientDataError, SchemaMismatchError
from mlstack.tasks import Task

from .base import CONTINUOUS_OUTCOMES, DISCRETE_OUTCOMES, FittedLearner, Learner, OutputKind, merge_params
from .registry import LearnerRegistry


class SklearnLearner(Learner):
    """Adapter over an unfitted scikit-learn estimator.

    Every ``train`` call fits a fresh clone, so the wrapped estimator is only
    ever used as a hyperparameter template.
    """

    def __init__(self, estimator: BaseEstimator, *, name: str | None = None):
        super().__init__(name=name, **estimator.get_params(deep=False))
        self.estimator = estimator

    def default_name(self) -> str:
        return self.estimator.__class__.__name__

    def check_task(self, task: Task) -> None:
        super().check_task(task)
        if not task.covariates:
            raise DimensionError(f"Learner '{self.name}' needs at least one covariate")

    def build_estimator(self, random_state: int | None) -> BaseEstimator:
        estimator = clone(self.estimator)
        params = estimator.get_params(deep=False)
        if random_state is not None and "random_state" in params and params["random_state"] is None:
            estimator.set_params(random_state=random_state)
        return estimator

    def fit_kwargs(self, task: Task) -> dict[str, Any]:
        if task.has_weights:
            return {"sample_weight": task.weights_values.to_numpy()}
        return {}


@dataclass(frozen=True, eq=False)
class FittedTransformer(FittedLearner):
    estimator: Any
    output_columns: tuple[str, ...]

    def _predict(self, features: pd.DataFrame, task: Task) -> pd.DataFrame:
        transformed = self.estimator.transform(features)
        return pd.DataFrame(np.asarray(transformed), index=task.index, columns=list(self.output_columns))


class SklearnTransformer(SklearnLearner):
    """Unsupervised pre-processing step; the outcome is carried, not used."""

    output_kind = OutputKind.TRANSFORM
    requires_outcome = False

    def output_columns(self, estimator: Any, features: pd.DataFrame) -> list[str]:
        if hasattr(estimator, "get_feature_names_out"):
            return [str(column) for column in estimator.get_feature_names_out(list(features.columns))]
        width = np.asarray(estimator.transform(features.iloc[:1])).shape[1]
        return [f"{self.name}_{position}" for position in range(1, width + 1)]

    def _train(self, task: Task, *, random_state: int | None) -> FittedTransformer:
        features = task.X
        estimator = self.build_estimator(random_state)
        estimator.fit(features)
        return FittedTransformer(
            learner=self,
            covariates=task.covariates,
            estimator=estimator,
            output_columns=tuple(self.output_columns(estimator, features)),
        )


@dataclass(frozen=True, eq=False)
class FittedClassifier(FittedLearner):
    estimator: Any
    classes: tuple[Any, ...]

    def _predict(self, features: pd.DataFrame, task: Task) -> pd.DataFrame:
        proba = self.estimator.predict_proba(features)
        return pd.DataFrame(proba, index=task.index, columns=list(self.classes))

    def predict_class(self, task: Task) -> pd.Series:
        """Most probable class label per row."""

        probabilities = self.predict(task)
        labels = np.asarray(self.classes, dtype=object)[probabilities.to_numpy().argmax(axis=1)]
        return pd.Series(labels, index=task.index, name=self.name).infer_objects()


class SklearnClassifier(SklearnLearner):
    """Adapter over scikit-learn classifiers returning class probabilities."""

    output_kind = OutputKind.PROBABILITIES
    supported_outcome_types = DISCRETE_OUTCOMES
    min_rows = 2

    def check_task(self, task: Task) -> None:
        super().check_task(task)
        n_classes = task.Y.dropna().nunique()
        if n_classes < 2:
            raise InsufficientDataError(f"Learner '{self.name}' needs at least 2 outcome classes, got {n_classes}")

    def encode_outcome(self, outcome: pd.Series) -> tuple[np.ndarray, tuple[Any, ...] | None]:
        """Return the labels to fit on and, if re-encoded, the original classes."""

        return outcome.to_numpy(), None

    def _train(self, task: Task, *, random_state: int | None) -> FittedClassifier:
        labels, classes = self.encode_outcome(task.Y)
        estimator = self.build_estimator(random_state)
        estimator.fit(task.X, labels, **self.fit_kwargs(task))
        if classes is None:
            classes = tuple(estimator.classes_)
        return FittedClassifier(learner=self, covariates=task.covariates, estimator=estimator, classes=classes)


@dataclass(frozen=True, eq=False)
class FittedRegressor(FittedLearner):
    """Fitted regressor; ``uses_offset`` records whether training subtracted an offset."""

    estimator: Any
    uses_offset: bool = False

    def _predict(self, features: pd.DataFrame, task: Task) -> pd.Series:
        values = np.asarray(self.estimator.predict(features), dtype=float)
        if self.uses_offset:
            offset = task.offset_values
            if offset is None:
                raise SchemaMismatchError(f"'{self.name}' was trained with an offset; task has no offset column")
            values = values + offset.to_numpy()
        return pd.Series(values, index=task.index, name=self.name)


class SklearnRegressor(SklearnLearner):
    """Adapter over scikit-learn regressors for continuous outcomes.

    A task offset is subtracted from the outcome before fitting and added back
    to predictions; such a model then requires an offset column at predict time.
    """

    output_kind = OutputKind.VALUES
    supported_outcome_types = CONTINUOUS_OUTCOMES
    min_rows = 2

    def _train(self, task: Task, *, random_state: int | None) -> FittedRegressor:
        target = task.Y.astype(float)
        offset = task.offset_values
        if offset is not None:
            target = target - offset
        estimator = self.build_estimator(random_state)
        estimator.fit(task.X, target.to_numpy(), **self.fit_kwargs(task))
        return FittedRegressor(
            learner=self,
            covariates=task.covariates,
            estimator=estimator,
            uses_offset=offset is not None,
        )


@LearnerRegistry.register("sklearn.pca")
class PCALearner(SklearnTransformer):
    """Principal component reduction; outputs columns ``PC1..PCk``."""

    def __init__(self, *, name: str | None = None, **kwargs: Any):
        super().__init__(PCA(**merge_params({"n_components": 2}, kwargs)), name=name or "pca")

    def check_task(self, task: Task) -> None:
        super().check_task(task)
        n_components = self.estimator.get_params()["n_components"]
        if isinstance(n_components, int | np.integer):
            limit = min(len(task.covariates), task.nrows)
            if n_components > limit:
                raise DimensionError(
                    f"PCA n_components={n_components} exceeds min(n_covariates, n_rows)={limit}"
                )

    def output_columns(self, estimator: Any, features: pd.DataFrame) -> list[str]:
        return [f"PC{position}" for position in range(1, estimator.n_components_ + 1)]


@LearnerRegistry.register("sklearn.standard_scaler")
class StandardScalerLearner(SklearnTransformer):
    """Centre and scale every covariate."""

    def __init__(self, *, name: str | None = None, **kwargs: Any):
        super().__init__(StandardScaler(**kwargs), name=name or "standard_scaler")


@LearnerRegistry.register("sklearn.logistic_regression")
class LogisticRegressionLearner(SklearnClassifier):
    """Regularised logistic regression (multinomial for more than two classes)."""

    defaults: ClassVar[dict[str, Any]] = {"max_iter": 1000}

    def __init__(self, *, name: str | None = None, **kwargs: Any):
        super().__init__(LogisticRegression(**merge_params(self.defaults, kwargs)), name=name or "logistic_regression")


@LearnerRegistry.register("sklearn.random_forest")
class RandomForestLearner(SklearnClassifier):
    """Random forest classifier."""

    defaults: ClassVar[dict[str, Any]] = {"n_estimators": 500}

    def __init__(self, *, name: str | None = None, **kwargs: Any):
        super().__init__(RandomForestClassifier(**merge_params(self.defaults, kwargs)), name=name or "random_forest")


@LearnerRegistry.register("sklearn.elastic_net")
class ElasticNetLearner(SklearnRegressor):
    """Elastic-net penalised linear regression."""

    def __init__(self, *, name: str | None = None, **kwargs: Any):
        super().__init__(ElasticNet(**kwargs), name=name or "elastic_net")


__all__ = [
    "ElasticNetLearner",
    "FittedClassifier",
    "FittedRegressor",
    "FittedTransformer",
    "LogisticRegressionLearner",
    "PCALearner",
    "RandomForestLearner",
    "SklearnClassifier",
    "SklearnLearner",
    "SklearnRegressor",
    "SklearnTransformer",
    "StandardScalerLearner",
]
