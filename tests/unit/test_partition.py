import pytest

from mlstack.core.errors import InsufficientDataError
from mlstack.tasks import Task, TaskSplit, partition_task
from tests.fixtures.sample_data import make_regression_frame


def test_stratified_split_keeps_class_balance(iris_split: TaskSplit) -> None:
    assert iris_split.sizes == {"train": 120, "test": 30}
    assert iris_split.train.Y.value_counts().to_dict() == {"setosa": 40, "versicolor": 40, "virginica": 40}
    assert iris_split.test.Y.value_counts().to_dict() == {"setosa": 10, "versicolor": 10, "virginica": 10}


def test_split_rows_are_disjoint_and_complete(iris_task: Task, iris_split: TaskSplit) -> None:
    train_rows = set(iris_split.train.index)
    test_rows = set(iris_split.test.index)
    assert train_rows.isdisjoint(test_rows)
    assert train_rows | test_rows == set(iris_task.index)


def test_split_preserves_schema(iris_task: Task, iris_split: TaskSplit) -> None:
    for part in (iris_split.train, iris_split.test):
        assert part.covariates == iris_task.covariates
        assert part.outcome == iris_task.outcome
        assert part.outcome_type is iris_task.outcome_type


def test_split_is_reproducible(iris_task: Task) -> None:
    first = partition_task(iris_task, random_state=9)
    second = partition_task(iris_task, random_state=9)
    assert list(first.test.index) == list(second.test.index)


def test_continuous_outcome_is_not_stratified() -> None:
    task = Task(data=make_regression_frame(n_rows=50), covariates=("x1", "x2"), outcome="y")
    split = partition_task(task, test_size=0.2, random_state=0)
    assert split.sizes == {"train": 40, "test": 10}


def test_invalid_fraction_is_rejected(iris_task: Task) -> None:
    with pytest.raises(ValueError):
        partition_task(iris_task, test_size=1.5)


def test_single_row_cannot_be_split(iris_task: Task) -> None:
    with pytest.raises(InsufficientDataError):
        partition_task(iris_task.subset([0]))
