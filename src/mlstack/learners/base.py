"""Common learner interfaces used by pipelines and stacks."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

import pandas as pd

from mlstack.core.errors import InsufficientDataError, NotFittedError, OutcomeTypeError, SchemaMismatchError
from mlstack.core.protocols import Prediction
from mlstack.tasks import OutcomeType, Task

logger = logging.getLogger(__name__)

DISCRETE_OUTCOMES = frozenset({OutcomeType.CATEGORICAL, OutcomeType.BINOMIAL, OutcomeType.MULTINOMIAL})
CONTINUOUS_OUTCOMES = frozenset({OutcomeType.CONTINUOUS})


class OutputKind(str, Enum):
    """Shape of what a fitted learner returns from ``predict``."""

    TRANSFORM = "transform"
    PROBABILITIES = "probabilities"
    VALUES = "values"


def merge_params(defaults: Mapping[str, Any], overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """Overlay user supplied hyperparameters on top of defaults."""

    merged = dict(defaults)
    if overrides:
        merged.update(overrides)
    return merged


class Learner(ABC):
    """Untrained unit of work holding only hyperparameters.

    ``train`` never mutates the learner or the task; it returns a new
    :class:`FittedLearner` that owns the learned state.
    """

    output_kind: ClassVar[OutputKind] = OutputKind.VALUES
    supported_outcome_types: ClassVar[frozenset[OutcomeType] | None] = None
    requires_outcome: ClassVar[bool] = True
    min_rows: ClassVar[int] = 1

    def __init__(self, *, name: str | None = None, **params: Any):
        self._name = name
        self._params = dict(params)

    @property
    def name(self) -> str:
        return self._name or self.default_name()

    def default_name(self) -> str:
        return self.__class__.__name__

    @property
    def params(self) -> dict[str, Any]:
        return dict(self._params)

    def train(self, task: Task, *, random_state: int | None = None) -> FittedLearner:
        """Fit on ``task`` and return the fitted counterpart."""

        self.check_task(task)
        logger.debug("Training learner '%s' on %s rows", self.name, task.nrows)
        return self._train(task, random_state=random_state)

    def check_task(self, task: Task) -> None:
        if task.nrows < self.min_rows:
            raise InsufficientDataError(
                f"Learner '{self.name}' needs at least {self.min_rows} rows, task has {task.nrows}"
            )
        if not self.requires_outcome:
            return
        if task.outcome is None:
            raise OutcomeTypeError(f"Learner '{self.name}' requires a task with an outcome column")
        supported = self.supported_outcome_types
        if supported is not None and task.outcome_type not in supported:
            allowed = ", ".join(sorted(kind.value for kind in supported))
            raise OutcomeTypeError(
                f"Learner '{self.name}' does not support {task.outcome_type.value} outcomes (supports: {allowed})"
            )

    @abstractmethod
    def _train(self, task: Task, *, random_state: int | None) -> FittedLearner:  # pragma: no cover - interface
        raise NotImplementedError

    def predict(self, task: Task) -> Prediction:
        raise NotFittedError(f"'{self.name}' has not been trained; call train() and predict with the result")

    def __repr__(self) -> str:
        params = ", ".join(f"{key}={value!r}" for key, value in self._params.items())
        return f"{self.__class__.__name__}(name={self.name!r}{', ' if params else ''}{params})"


@dataclass(frozen=True, eq=False)
class FittedLearner(ABC):
    """Immutable result of training a learner."""

    learner: Learner
    covariates: tuple[str, ...]

    @property
    def name(self) -> str:
        return self.learner.name

    @property
    def output_kind(self) -> OutputKind:
        return self.learner.output_kind

    def predict(self, task: Task) -> Prediction:
        """Predict for ``task`` using the covariates seen during training."""

        return self._predict(self.select_covariates(task), task)

    def select_covariates(self, task: Task) -> pd.DataFrame:
        missing = [column for column in self.covariates if column not in task.covariates]
        if missing:
            raise SchemaMismatchError(
                f"'{self.name}' was trained on covariates {list(self.covariates)}; task is missing {missing}"
            )
        extra = [column for column in task.covariates if column not in self.covariates]
        if extra:
            logger.debug("Ignoring covariates %s unseen when training '%s'", extra, self.name)
        return task.data.loc[:, list(self.covariates)]

    @abstractmethod
    def _predict(self, features: pd.DataFrame, task: Task) -> Prediction:  # pragma: no cover - interface
        raise NotImplementedError

    def chain(self, task: Task) -> Task:
        """Re-wrap this learner's predictions as the covariates of a new task."""

        return task.with_covariates(self.as_covariates(self.predict(task)))

    def as_covariates(self, prediction: Prediction) -> pd.DataFrame:
        if isinstance(prediction, pd.Series):
            return prediction.to_frame(name=self.name)
        if self.output_kind is OutputKind.TRANSFORM:
            return prediction
        return prediction.add_prefix(f"{self.name}_")


__all__ = [
    "CONTINUOUS_OUTCOMES",
    "DISCRETE_OUTCOMES",
    "FittedLearner",
    "Learner",
    "OutputKind",
    "merge_params",
]
