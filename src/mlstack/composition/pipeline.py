"""Sequential composition of learners."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from mlstack.core.errors import annotate_stage
from mlstack.core.protocols import Fitted, Prediction, Trainable
from mlstack.learners.base import FittedLearner, Learner, OutputKind
from mlstack.tasks import Task

logger = logging.getLogger(__name__)


class Pipeline(Learner):
    """Ordered stages where each stage's output becomes the next stage's task.

    A pipeline is an immutable template: ``train`` returns a new
    :class:`FittedPipeline` and never changes the stages, so one template can
    be trained any number of times. Transformers hand their output columns to
    the next stage as covariates; predictors hand over their predictions.
    """

    requires_outcome = False
    min_rows = 0

    def __init__(self, *stages: Trainable | Sequence[Trainable], name: str | None = None):
        if len(stages) == 1 and isinstance(stages[0], list | tuple):
            stages = tuple(stages[0])
        if not stages:
            raise ValueError("A pipeline needs at least one stage")
        super().__init__(name=name)
        self._stages: tuple[Trainable, ...] = tuple(stages)  # type: ignore[arg-type]

    @property
    def stages(self) -> tuple[Trainable, ...]:
        return self._stages

    @property
    def output_kind(self) -> OutputKind:  # type: ignore[override]
        return getattr(self._stages[-1], "output_kind", OutputKind.VALUES)

    def default_name(self) -> str:
        return "_".join(stage.name for stage in self._stages)

    def _train(self, task: Task, *, random_state: int | None) -> FittedPipeline:
        fitted: list[Fitted] = []
        current = task
        last = len(self._stages) - 1
        for index, stage in enumerate(self._stages):
            try:
                fitted_stage = stage.train(current, random_state=random_state)
                if index < last:
                    current = fitted_stage.chain(current)
            except Exception as exc:
                annotate_stage(exc, index, stage.name, f"pipeline '{self.name}'")
                raise
            logger.debug("Pipeline '%s' trained stage %s (%s)", self.name, index, stage.name)
            fitted.append(fitted_stage)
        return FittedPipeline(learner=self, covariates=task.covariates, stages=tuple(fitted))

    def __len__(self) -> int:
        return len(self._stages)

    def __getitem__(self, index: int) -> Trainable:
        return self._stages[index]

    def __iter__(self) -> Iterator[Trainable]:
        return iter(self._stages)

    def __repr__(self) -> str:
        return f"Pipeline(name={self.name!r}, stages={[stage.name for stage in self._stages]})"


@dataclass(frozen=True, eq=False)
class FittedPipeline(FittedLearner):
    """One fitted stage per pipeline stage, in declaration order."""

    stages: tuple[Fitted, ...]

    def _predict(self, features: pd.DataFrame, task: Task) -> Prediction | Any:
        last = len(self.stages) - 1
        current = self._chain_through(task, last)
        return self._run_stage(last, lambda stage: stage.predict(current))

    def chain(self, task: Task) -> Task:
        self.select_covariates(task)
        return self._chain_through(task, len(self.stages))

    def _chain_through(self, task: Task, stop: int) -> Task:
        current = task
        for index in range(stop):
            current = self._run_stage(index, lambda stage, source=current: stage.chain(source))
        return current

    def _run_stage(self, index: int, action: Any) -> Any:
        stage = self.stages[index]
        try:
            return action(stage)
        except Exception as exc:
            annotate_stage(exc, index, stage.name, f"pipeline '{self.name}'")
            raise

    def __len__(self) -> int:
        return len(self.stages)

    def __getitem__(self, index: int) -> Fitted:
        return self.stages[index]


__all__ = ["FittedPipeline", "Pipeline"]
