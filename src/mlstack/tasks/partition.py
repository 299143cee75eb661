"""Train/test partitioning of tasks."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from sklearn.model_selection import train_test_split

from mlstack.core.errors import InsufficientDataError

from .task import Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskSplit:
    """Train and test tasks sharing the same schema."""

    train: Task
    test: Task

    @property
    def sizes(self) -> dict[str, int]:
        return {"train": self.train.nrows, "test": self.test.nrows}


def partition_task(
    task: Task,
    *,
    test_size: float = 0.2,
    stratify: bool = True,
    random_state: int | None = None,
) -> TaskSplit:
    """Split ``task`` into train/test tasks.

    Stratification uses the outcome and only applies to discrete outcomes.
    """

    if not 0 < test_size < 1:
        raise ValueError("test_size must be in (0, 1)")
    if task.nrows < 2:
        raise InsufficientDataError(f"Cannot partition a task with {task.nrows} rows")

    positions = np.arange(task.nrows)
    stratify_values = None
    if stratify and task.outcome_type is not None and task.outcome_type.is_discrete:
        stratify_values = task.Y.to_numpy()

    train_positions, test_positions = train_test_split(
        positions,
        test_size=test_size,
        random_state=random_state,
        stratify=stratify_values,
    )
    split = TaskSplit(
        train=task.subset(np.sort(train_positions)),
        test=task.subset(np.sort(test_positions)),
    )
    logger.info("Partitioned %s rows into %s train / %s test", task.nrows, split.train.nrows, split.test.nrows)
    return split


__all__ = ["TaskSplit", "partition_task"]
