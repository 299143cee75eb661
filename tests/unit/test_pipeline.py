import numpy as np
import pandas as pd
import pytest

from mlstack.composition import FittedPipeline, Pipeline
from mlstack.core.errors import DimensionError, NotFittedError, SchemaMismatchError
from mlstack.learners import OutputKind
from mlstack.learners.sklearn_learners import (
    LogisticRegressionLearner,
    PCALearner,
    RandomForestLearner,
    StandardScalerLearner,
)
from mlstack.tasks import Task, TaskSplit
from tests.fixtures.sample_data import IRIS_COVARIATES


def test_pca_logistic_round_trip(iris_split: TaskSplit) -> None:
    pipeline = Pipeline(PCALearner(n_components=2), LogisticRegressionLearner())
    fitted = pipeline.train(iris_split.train, random_state=123)
    probabilities = fitted.predict(iris_split.test)

    assert iris_split.sizes == {"train": 120, "test": 30}
    assert isinstance(fitted, FittedPipeline)
    assert probabilities.shape == (30, 3)
    assert np.allclose(probabilities.sum(axis=1), 1.0)
    assert pipeline.output_kind is OutputKind.PROBABILITIES


def test_pipeline_default_name_joins_stages() -> None:
    pipeline = Pipeline(PCALearner(), LogisticRegressionLearner())
    assert pipeline.name == "pca_logistic_regression"
    assert Pipeline([PCALearner()], name="reduce").name == "reduce"


def test_empty_pipeline_is_rejected() -> None:
    with pytest.raises(ValueError):
        Pipeline()


def test_second_stage_sees_first_stage_output(iris_split: TaskSplit) -> None:
    fitted = Pipeline(PCALearner(n_components=2), LogisticRegressionLearner()).train(iris_split.train)
    assert fitted[1].covariates == ("PC1", "PC2")
    assert fitted[0].covariates == iris_split.train.covariates


def test_nested_pipelines_are_associative(iris_split: TaskSplit) -> None:
    flat = Pipeline(StandardScalerLearner(), PCALearner(n_components=2), LogisticRegressionLearner())
    left = Pipeline(Pipeline(StandardScalerLearner(), PCALearner(n_components=2)), LogisticRegressionLearner())
    right = Pipeline(StandardScalerLearner(), Pipeline(PCALearner(n_components=2), LogisticRegressionLearner()))

    expected = flat.train(iris_split.train, random_state=5).predict(iris_split.test)
    for nested in (left, right):
        result = nested.train(iris_split.train, random_state=5).predict(iris_split.test)
        np.testing.assert_allclose(result.to_numpy(), expected.to_numpy())


def test_stage_failure_reports_position(iris_task: Task) -> None:
    pipeline = Pipeline(PCALearner(n_components=10), LogisticRegressionLearner())
    with pytest.raises(DimensionError) as excinfo:
        pipeline.train(iris_task)

    assert excinfo.value.stage_path == (0,)
    assert any("stage 0 (pca)" in note for note in excinfo.value.__notes__)


def test_nested_failure_records_full_path(iris_task: Task) -> None:
    inner = Pipeline(StandardScalerLearner(), PCALearner(n_components=10))
    with pytest.raises(DimensionError) as excinfo:
        Pipeline(inner, LogisticRegressionLearner()).train(iris_task)
    assert excinfo.value.stage_path == (0, 1)


def test_untrained_pipeline_cannot_predict(iris_task: Task) -> None:
    with pytest.raises(NotFittedError):
        Pipeline(PCALearner(), LogisticRegressionLearner()).predict(iris_task)


def test_training_twice_gives_identical_predictions(iris_split: TaskSplit) -> None:
    pipeline = Pipeline(PCALearner(n_components=2), RandomForestLearner(n_estimators=25))
    first = pipeline.train(iris_split.train, random_state=123).predict(iris_split.test)
    second = pipeline.train(iris_split.train, random_state=123).predict(iris_split.test)

    pd.testing.assert_frame_equal(first, second)
    assert len(pipeline) == 2


def test_transform_only_pipeline_chains(iris_split: TaskSplit) -> None:
    fitted = Pipeline(StandardScalerLearner(), PCALearner(n_components=3)).train(iris_split.train)
    chained = fitted.chain(iris_split.test)

    assert chained.covariates == ("PC1", "PC2", "PC3")
    assert chained.nrows == 30
    assert chained.Y.equals(iris_split.test.Y)


def test_final_stage_trained_on_chained_task_matches_full_pipeline(iris_split: TaskSplit) -> None:
    prefix = Pipeline(StandardScalerLearner(), PCALearner(n_components=2)).train(iris_split.train, random_state=5)
    head = LogisticRegressionLearner().train(prefix.chain(iris_split.train), random_state=5)
    stepwise = head.predict(prefix.chain(iris_split.test))

    full = Pipeline(StandardScalerLearner(), PCALearner(n_components=2), LogisticRegressionLearner())
    expected = full.train(iris_split.train, random_state=5).predict(iris_split.test)

    np.testing.assert_allclose(stepwise.to_numpy(), expected.to_numpy())


def test_fitted_pipeline_predict_is_repeatable(iris_split: TaskSplit) -> None:
    fitted = Pipeline(PCALearner(n_components=2), RandomForestLearner(n_estimators=25)).train(
        iris_split.train, random_state=1
    )
    pd.testing.assert_frame_equal(fitted.predict(iris_split.test), fitted.predict(iris_split.test))


def test_fitted_pipeline_requires_training_covariates(iris_split: TaskSplit) -> None:
    fitted = Pipeline(PCALearner(n_components=2), LogisticRegressionLearner()).train(iris_split.train)
    narrowed = Task(data=iris_split.test.data, covariates=IRIS_COVARIATES[1:], outcome="species")
    with pytest.raises(SchemaMismatchError):
        fitted.predict(narrowed)
