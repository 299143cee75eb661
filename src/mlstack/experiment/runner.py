"""End-to-end orchestration: load, partition, train a stack, evaluate members."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from mlstack.composition.builder import build_stack
from mlstack.composition.stack import FittedStack, MemberOutcome
from mlstack.config import Settings, TrackingConfig
from mlstack.data import DatasetLoader
from mlstack.evaluation import ConfusionSummary, Evaluator
from mlstack.tasks import Task, TaskSplit, partition_task
from mlstack.tracking import ExperimentTracker, MLflowTracker, NullTracker

logger = logging.getLogger(__name__)


@dataclass
class MemberReport:
    """Evaluation of one stack member on the test task."""

    index: int
    name: str
    metrics: dict[str, float] = field(default_factory=dict)
    confusion: ConfusionSummary | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ExperimentResult:
    """Overall experiment output."""

    split: TaskSplit
    fitted: FittedStack
    predictions: list[MemberOutcome]
    reports: list[MemberReport]

    @property
    def split_sizes(self) -> dict[str, int]:
        return self.split.sizes

    def best(self, metric: str, *, higher_is_better: bool = True) -> MemberReport | None:
        scored = [report for report in self.reports if report.ok and metric in report.metrics]
        if not scored:
            return None
        sign = 1 if higher_is_better else -1
        return max(scored, key=lambda report: sign * report.metrics[metric])


def build_tracker(config: TrackingConfig) -> ExperimentTracker:
    if config.backend == "mlflow":
        return MLflowTracker(
            tracking_uri=config.tracking_uri,
            experiment_name=config.experiment_name,
            run_name_prefix=config.run_name_prefix,
        )
    return NullTracker()


class ExperimentRunner:
    """High-level entrypoint used by the CLI.

    ``data`` short-circuits the configured loader, which is useful when the
    frame is already in memory.
    """

    def __init__(
        self,
        settings: Settings,
        tracker: ExperimentTracker | None = None,
        data: pd.DataFrame | None = None,
    ) -> None:
        self.settings = settings
        self.tracker = tracker or build_tracker(settings.tracking)
        self._data = data

    def run(self) -> ExperimentResult:
        task = Task.from_config(self._load_frame(), self.settings.task)
        logger.info("Built task %s", task.describe())
        split = partition_task(
            task,
            test_size=self.settings.partition.test_size,
            stratify=self.settings.partition.stratify,
            random_state=self.settings.random_state,
        )

        stack = build_stack(self.settings.stack)
        logger.info("Training stack '%s' with members %s", stack.name, list(stack.names))
        fitted = stack.train(split.train, random_state=self.settings.random_state)
        predictions = fitted.predict_outcomes(split.test)

        evaluator = Evaluator(
            classification_metric_names=self.settings.evaluation.classification_metrics,
            regression_metric_names=self.settings.evaluation.regression_metrics,
        )
        reports = []
        for outcome in predictions:
            report = self._evaluate_member(outcome, split.test, evaluator)
            self._record_run(report, stack.members[outcome.index], stack.name)
            reports.append(report)

        return ExperimentResult(split=split, fitted=fitted, predictions=predictions, reports=reports)

    def _load_frame(self) -> pd.DataFrame:
        if self._data is not None:
            return self._data

        data_cfg = self.settings.data
        loader = DatasetLoader.from_config(data_cfg.loader_type, **data_cfg.loader_options)
        source: Any = data_cfg.source
        if loader.loader.reads_files:
            source = self.settings.resolve_path(data_cfg.source)
        return loader.load(self.settings.project.name, source)

    def _evaluate_member(self, outcome: MemberOutcome, test: Task, evaluator: Evaluator) -> MemberReport:
        if not outcome.ok:
            return MemberReport(index=outcome.index, name=outcome.name, error=repr(outcome.error))

        result = evaluator.evaluate(test, outcome.value)
        logger.info("Member '%s' metrics: %s", outcome.name, result.metrics)
        return MemberReport(
            index=outcome.index,
            name=outcome.name,
            metrics=result.metrics,
            confusion=result.confusion,
        )

    def _record_run(self, report: MemberReport, member: Any, stack_name: str) -> None:
        stages = getattr(member, "stages", (member,))
        with self.tracker.start_run(run_name=report.name, tags={"stack": stack_name}):
            self.tracker.log_params(
                {
                    "stages": ",".join(stage.name for stage in stages),
                    "random_state": self.settings.random_state,
                    "test_size": self.settings.partition.test_size,
                }
            )
            if report.metrics:
                self.tracker.log_metrics(report.metrics)
            if report.confusion is not None:
                self.tracker.log_dict(report.confusion.to_dict(), "confusion_matrix.json")


__all__ = ["ExperimentResult", "ExperimentRunner", "MemberReport", "build_tracker"]
