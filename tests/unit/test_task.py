import pandas as pd
import pytest

from mlstack.core.errors import OutcomeTypeError, SchemaError
from mlstack.tasks import OutcomeType, Task, infer_outcome_type
from tests.fixtures.sample_data import IRIS_COVARIATES, make_binary_frame, make_regression_frame


def test_task_exposes_covariates_and_outcome(iris_task: Task) -> None:
    assert iris_task.nrows == 150
    assert list(iris_task.X.columns) == list(IRIS_COVARIATES)
    assert iris_task.Y.nunique() == 3
    assert iris_task.outcome_type is OutcomeType.CATEGORICAL


def test_missing_covariate_raises_schema_error(iris_frame: pd.DataFrame) -> None:
    with pytest.raises(SchemaError, match="petal_area"):
        Task(data=iris_frame, covariates=("sepal_length_cm", "petal_area"), outcome="species")


def test_missing_outcome_raises_schema_error(iris_frame: pd.DataFrame) -> None:
    with pytest.raises(SchemaError):
        Task(data=iris_frame, covariates=IRIS_COVARIATES, outcome="Species")


def test_outcome_cannot_also_be_a_covariate(iris_frame: pd.DataFrame) -> None:
    with pytest.raises(SchemaError):
        Task(data=iris_frame, covariates=(*IRIS_COVARIATES, "species"), outcome="species")


def test_continuous_outcome_must_be_numeric(iris_frame: pd.DataFrame) -> None:
    with pytest.raises(OutcomeTypeError):
        Task(data=iris_frame, covariates=IRIS_COVARIATES, outcome="species", outcome_type="continuous")


def test_outcome_type_error_is_a_type_error(iris_frame: pd.DataFrame) -> None:
    with pytest.raises(TypeError):
        Task(data=iris_frame, covariates=IRIS_COVARIATES, outcome="species", outcome_type=OutcomeType.CONTINUOUS)


def test_binomial_outcome_rejects_three_levels(iris_frame: pd.DataFrame) -> None:
    with pytest.raises(OutcomeTypeError):
        Task(data=iris_frame, covariates=IRIS_COVARIATES, outcome="species", outcome_type="binomial")


def test_weights_must_be_numeric() -> None:
    frame = make_binary_frame()
    with pytest.raises(OutcomeTypeError):
        Task(data=frame, covariates=("a",), outcome="label", weights="id")


def test_outcome_type_is_inferred() -> None:
    assert infer_outcome_type(pd.Series(["a", "b", "c"])) is OutcomeType.CATEGORICAL
    assert infer_outcome_type(pd.Series([0, 1, 1, 0])) is OutcomeType.BINOMIAL
    assert infer_outcome_type(pd.Series([0.5, 1.5, 2.5])) is OutcomeType.CONTINUOUS

    task = Task(data=make_regression_frame(), covariates=("x1", "x2"), outcome="y")
    assert task.outcome_type is OutcomeType.CONTINUOUS


def test_task_copies_input_frame(iris_frame: pd.DataFrame) -> None:
    task = Task(data=iris_frame, covariates=IRIS_COVARIATES, outcome="species")
    iris_frame.loc[0, "sepal_length_cm"] = -1.0
    assert task.X.iloc[0]["sepal_length_cm"] != -1.0

    design = task.X
    design.iloc[:, 0] = 0.0
    assert task.X.iloc[:, 0].sum() > 0


def test_with_covariates_carries_roles() -> None:
    frame = make_binary_frame()
    task = Task(data=frame, covariates=("a", "b"), outcome="label", id="id", weights="w")
    derived = task.with_covariates(pd.DataFrame({"z": range(8)}))

    assert derived is not task
    assert derived.covariates == ("z",)
    assert derived.outcome == "label"
    assert derived.outcome_type is OutcomeType.BINOMIAL
    assert derived.weights_values.tolist() == task.weights_values.tolist()
    assert derived.ids.tolist() == task.ids.tolist()
    assert task.covariates == ("a", "b")


def test_with_covariates_rejects_reserved_names() -> None:
    task = Task(data=make_binary_frame(), covariates=("a",), outcome="label")
    with pytest.raises(SchemaError):
        task.with_covariates(pd.DataFrame({"label": range(8)}))


def test_from_config_defaults_to_remaining_columns() -> None:
    from mlstack.config import TaskConfig

    config = TaskConfig(outcome="label", id="id", weights="w")
    task = Task.from_config(make_binary_frame(), config)
    assert task.covariates == ("a", "b")



def test_role_columns_must_be_distinct() -> None:
    frame = make_regression_frame()
    with pytest.raises(SchemaError, match="outcome and the weights"):
        Task(data=frame, covariates=("x1", "x2"), outcome="y", weights="y")
    with pytest.raises(SchemaError):
        Task(data=frame, covariates=("x1",), outcome="y", weights="x2", offset="x2")


def test_describe_summarises_roles(iris_task: Task) -> None:
    assert iris_task.describe() == {
        "nrows": 150,
        "covariates": list(IRIS_COVARIATES),
        "outcome": "species",
        "outcome_type": "categorical",
    }
