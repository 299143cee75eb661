"""Backend agnostic experiment tracking used by the experiment runner."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from contextlib import AbstractContextManager, contextmanager, nullcontext
from dataclasses import dataclass, field
from typing import Any


class ExperimentTracker(ABC):
    """Records parameters, metrics and small JSON artifacts per run.

    Logging calls are only valid inside ``with tracker.start_run(...)``.
    """

    @abstractmethod
    def start_run(self, run_name: str, tags: Mapping[str, str] | None = None) -> AbstractContextManager[Any]:
        raise NotImplementedError

    @abstractmethod
    def log_params(self, params: Mapping[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def log_metrics(self, metrics: Mapping[str, float]) -> None:
        raise NotImplementedError

    def log_dict(self, payload: dict[str, Any], artifact_file: str) -> None:
        """Store ``payload`` as a JSON artifact; ignored unless overridden."""


class NullTracker(ExperimentTracker):
    """Discards everything."""

    def start_run(self, run_name: str, tags: Mapping[str, str] | None = None) -> AbstractContextManager[None]:
        return nullcontext()

    def log_params(self, params: Mapping[str, Any]) -> None:
        return

    def log_metrics(self, metrics: Mapping[str, float]) -> None:
        return


@dataclass
class TrackedRun:
    name: str
    tags: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    metrics: dict[str, float] = field(default_factory=dict)
    artifacts: dict[str, dict[str, Any]] = field(default_factory=dict)


class InMemoryTracker(ExperimentTracker):
    """Keeps every run in ``runs``; handy for notebooks and tests."""

    def __init__(self) -> None:
        self.runs: list[TrackedRun] = []
        self._active: TrackedRun | None = None

    @contextmanager
    def start_run(self, run_name: str, tags: Mapping[str, str] | None = None) -> Iterator[TrackedRun]:
        run = TrackedRun(name=run_name, tags=dict(tags or {}))
        self.runs.append(run)
        self._active = run
        try:
            yield run
        finally:
            self._active = None

    def _current(self) -> TrackedRun:
        if self._active is None:
            raise RuntimeError("No active run; use 'with tracker.start_run(...)'")
        return self._active

    def log_params(self, params: Mapping[str, Any]) -> None:
        self._current().params.update(params)

    def log_metrics(self, metrics: Mapping[str, float]) -> None:
        self._current().metrics.update(metrics)

    def log_dict(self, payload: dict[str, Any], artifact_file: str) -> None:
        self._current().artifacts[artifact_file] = payload


__all__ = ["ExperimentTracker", "InMemoryTracker", "NullTracker", "TrackedRun"]
