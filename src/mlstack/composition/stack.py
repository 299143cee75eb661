"""Independent, unaggregated bundles of learners and pipelines."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Literal

import pandas as pd
from joblib import Parallel, delayed

from mlstack.core.errors import StackTrainingError, annotate_stage
from mlstack.core.protocols import Fitted, Prediction, Trainable
from mlstack.learners.base import FittedLearner, Learner, OutputKind
from mlstack.tasks import Task

logger = logging.getLogger(__name__)

ErrorPolicy = Literal["raise", "collect"]


@dataclass(frozen=True)
class MemberOutcome:
    """Result or error of one stack member for one operation."""

    index: int
    name: str
    value: Any = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def unique_names(names: Sequence[str]) -> list[str]:
    """Suffix repeated names with ``_2``, ``_3``... until every name is distinct."""

    taken: set[str] = set()
    result = []
    for name in names:
        candidate, suffix = name, 1
        while candidate in taken:
            suffix += 1
            candidate = f"{name}_{suffix}"
        taken.add(candidate)
        result.append(candidate)
    return result


def _call_member(index: int, name: str, member: Any, action: Callable[[Any], Any], collect: bool) -> MemberOutcome:
    try:
        value = action(member)
    except Exception as exc:
        annotate_stage(exc, index, name, "stack")
        if not collect:
            raise
        logger.warning("Stack member %s (%s) failed: %s", index, name, exc)
        return MemberOutcome(index=index, name=name, error=exc)
    return MemberOutcome(index=index, name=name, value=value)


def run_members(
    jobs: Sequence[tuple[int, str, Any]],
    action: Callable[[Any], Any],
    *,
    collect: bool,
    n_jobs: int,
) -> list[MemberOutcome]:
    """Apply ``action`` to every member; results follow the order of ``jobs``."""

    if n_jobs == 1 or len(jobs) <= 1:
        return [_call_member(index, name, member, action, collect) for index, name, member in jobs]
    return Parallel(n_jobs=n_jobs, prefer="threads")(
        delayed(_call_member)(index, name, member, action, collect) for index, name, member in jobs
    )


class Stack(Learner):
    """Learners and pipelines trained independently on the same task.

    ``predict`` on the fitted stack returns one prediction per member in
    declaration order; combining them is left to the caller or to a learner
    placed after the stack in a :class:`~mlstack.composition.Pipeline`.

    ``on_error="raise"`` aborts on the first member failure. With
    ``on_error="collect"`` failures are recorded per member as
    :class:`MemberOutcome` errors and failed members predict ``None``.
    """

    output_kind = OutputKind.TRANSFORM
    requires_outcome = False
    min_rows = 0

    def __init__(
        self,
        *members: Trainable | Sequence[Trainable],
        name: str | None = None,
        on_error: ErrorPolicy = "raise",
        n_jobs: int = 1,
    ):
        if len(members) == 1 and isinstance(members[0], list | tuple):
            members = tuple(members[0])
        if not members:
            raise ValueError("A stack needs at least one member")
        if on_error not in ("raise", "collect"):
            raise ValueError(f"on_error must be 'raise' or 'collect', got {on_error!r}")
        if n_jobs == 0:
            raise ValueError("n_jobs must be non-zero")
        super().__init__(name=name, on_error=on_error, n_jobs=n_jobs)
        self._members: tuple[Trainable, ...] = tuple(members)  # type: ignore[arg-type]
        self._names = tuple(unique_names([member.name for member in self._members]))
        self.on_error = on_error
        self.n_jobs = n_jobs

    @property
    def members(self) -> tuple[Trainable, ...]:
        return self._members

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def default_name(self) -> str:
        return "stack"

    def _train(self, task: Task, *, random_state: int | None) -> FittedStack:
        jobs = [(index, self._names[index], member) for index, member in enumerate(self._members)]
        outcomes = run_members(
            jobs,
            lambda member: member.train(task, random_state=random_state),
            collect=self.on_error == "collect",
            n_jobs=self.n_jobs,
        )
        failures = [outcome for outcome in outcomes if not outcome.ok]
        if failures and len(failures) == len(outcomes):
            raise StackTrainingError(
                f"All {len(outcomes)} members of stack '{self.name}' failed to train",
                [outcome.error for outcome in failures],
            )
        logger.info(
            "Stack '%s' trained %s/%s members on %s rows",
            self.name,
            len(outcomes) - len(failures),
            len(outcomes),
            task.nrows,
        )
        return FittedStack(learner=self, covariates=task.covariates, outcomes=tuple(outcomes))

    def __len__(self) -> int:
        return len(self._members)

    def __getitem__(self, key: int | str) -> Trainable:
        if isinstance(key, str):
            return self._members[self._names.index(key)]
        return self._members[key]

    def __iter__(self) -> Iterator[Trainable]:
        return iter(self._members)

    def __repr__(self) -> str:
        return f"Stack(name={self.name!r}, members={list(self._names)}, on_error={self.on_error!r})"


@dataclass(frozen=True, eq=False)
class FittedStack(FittedLearner):
    """Per-member training outcomes, in declaration order."""

    outcomes: tuple[MemberOutcome, ...]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(outcome.name for outcome in self.outcomes)

    @property
    def members(self) -> tuple[Fitted | None, ...]:
        return tuple(outcome.value for outcome in self.outcomes)

    @property
    def errors(self) -> dict[str, BaseException]:
        return {outcome.name: outcome.error for outcome in self.outcomes if outcome.error is not None}

    def _stack(self) -> Stack:
        return self.learner  # type: ignore[return-value]

    def _predict(self, features: pd.DataFrame, task: Task) -> list[Prediction | None]:
        return [outcome.value for outcome in self._predict_outcomes(task)]

    def predict_outcomes(self, task: Task) -> list[MemberOutcome]:
        """Like ``predict`` but keeps each member's error alongside its value."""

        self.select_covariates(task)
        return self._predict_outcomes(task)

    def _predict_outcomes(self, task: Task) -> list[MemberOutcome]:
        stack = self._stack()
        trained = [(outcome.index, outcome.name, outcome.value) for outcome in self.outcomes if outcome.ok]
        predicted = run_members(
            trained,
            lambda fitted: fitted.predict(task),
            collect=stack.on_error == "collect",
            n_jobs=stack.n_jobs,
        )
        by_index = {outcome.index: outcome for outcome in predicted}
        return [by_index.get(outcome.index, outcome) for outcome in self.outcomes]

    def chain(self, task: Task) -> Task:
        """Concatenate member predictions into the covariates of a new task."""

        frames = []
        failures = []
        for outcome in self.predict_outcomes(task):
            if not outcome.ok:
                failures.append(outcome.error)
                logger.warning("Dropping failed member '%s' from chained covariates", outcome.name)
                continue
            prediction = outcome.value
            if isinstance(prediction, pd.Series):
                frames.append(prediction.to_frame(name=outcome.name))
            else:
                frames.append(prediction.add_prefix(f"{outcome.name}_"))
        if not frames:
            raise StackTrainingError(f"Every member of stack '{self.name}' failed to predict", failures)
        return task.with_covariates(pd.concat(frames, axis=1))

    def __len__(self) -> int:
        return len(self.outcomes)

    def __getitem__(self, key: int | str) -> Fitted | None:
        if isinstance(key, str):
            return self.outcomes[self.names.index(key)].value
        return self.outcomes[key].value


__all__ = ["ErrorPolicy", "FittedStack", "MemberOutcome", "Stack", "run_members", "unique_names"]
