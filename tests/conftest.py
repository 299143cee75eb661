import sys
from pathlib import Path

import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from mlstack.tasks import OutcomeType, Task, TaskSplit, partition_task  # noqa: E402
from tests.fixtures.sample_data import IRIS_COVARIATES, make_iris_frame  # noqa: E402


@pytest.fixture
def iris_frame() -> pd.DataFrame:
    return make_iris_frame()


@pytest.fixture
def iris_task(iris_frame: pd.DataFrame) -> Task:
    return Task(
        data=iris_frame,
        covariates=IRIS_COVARIATES,
        outcome="species",
        outcome_type=OutcomeType.CATEGORICAL,
    )


@pytest.fixture
def iris_split(iris_task: Task) -> TaskSplit:
    return partition_task(iris_task, test_size=0.2, stratify=True, random_state=123)
