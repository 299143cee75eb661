"""Composable learners, pipelines and stacks over tabular tasks."""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover - best effort metadata lookup
    __version__ = version("mlstack")
except PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

from . import learners  # noqa: F401
from .composition import FittedPipeline, FittedStack, MemberOutcome, Pipeline, Stack
from .learners import FittedLearner, Learner, LearnerRegistry
from .tasks import OutcomeType, Task, partition_task

__all__ = [
    "FittedLearner",
    "FittedPipeline",
    "FittedStack",
    "Learner",
    "LearnerRegistry",
    "MemberOutcome",
    "OutcomeType",
    "Pipeline",
    "Stack",
    "Task",
    "__version__",
    "partition_task",
]
