import pytest

from mlstack.config import TrackingConfig
from mlstack.experiment.runner import build_tracker
from mlstack.tracking import InMemoryTracker, MLflowTracker, NullTracker


def test_in_memory_tracker_records_runs() -> None:
    tracker = InMemoryTracker()
    with tracker.start_run(run_name="member", tags={"stack": "demo"}):
        tracker.log_params({"stages": "pca"})
        tracker.log_metrics({"accuracy": 0.9})
        tracker.log_dict({"labels": ["a"]}, "confusion_matrix.json")

    (run,) = tracker.runs
    assert run.name == "member"
    assert run.tags == {"stack": "demo"}
    assert run.metrics == {"accuracy": 0.9}
    assert run.artifacts["confusion_matrix.json"] == {"labels": ["a"]}


def test_in_memory_tracker_requires_active_run() -> None:
    with pytest.raises(RuntimeError):
        InMemoryTracker().log_metrics({"accuracy": 1.0})


def test_build_tracker_follows_backend() -> None:
    assert isinstance(build_tracker(TrackingConfig()), NullTracker)

    tracker = build_tracker(TrackingConfig(backend="mlflow", experiment_name="iris"))
    assert isinstance(tracker, MLflowTracker)
    assert tracker.experiment_name == "iris"
