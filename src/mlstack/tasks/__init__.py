"""Task abstraction and partitioning helpers."""

from .partition import TaskSplit, partition_task
from .task import OutcomeType, Task, infer_outcome_type

__all__ = ["OutcomeType", "Task", "TaskSplit", "infer_outcome_type", "partition_task"]
