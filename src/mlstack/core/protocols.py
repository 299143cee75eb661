"""Protocols describing extension points in the framework."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import pandas as pd

if TYPE_CHECKING:  # pragma: no cover - typing only
    from mlstack.tasks import Task

Prediction = pd.DataFrame | pd.Series


@runtime_checkable
class Fitted(Protocol):
    """Contract for trained objects handed back by ``train``."""

    @property
    def name(self) -> str: ...

    def predict(self, task: Task) -> Prediction: ...

    def chain(self, task: Task) -> Task: ...


@runtime_checkable
class Trainable(Protocol):
    """Contract for anything that can sit in a pipeline stage or a stack slot."""

    @property
    def name(self) -> str: ...

    def train(self, task: Task, *, random_state: int | None = None) -> Fitted: ...


__all__ = ["Fitted", "Prediction", "Trainable"]
