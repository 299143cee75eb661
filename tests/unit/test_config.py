from pathlib import Path

import pytest
import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from mlstack.composition import Pipeline, Stack
from mlstack.composition.builder import build_stack
from mlstack.config import Settings, StackConfig, load_settings
from mlstack.tasks import OutcomeType

PROJECT_ROOT = Path(__file__).resolve().parents[2]
IRIS_CONFIG = PROJECT_ROOT / "config" / "iris_stack.yaml"


def test_iris_config_loads() -> None:
    settings = load_settings(IRIS_CONFIG)

    assert settings.data.loader_type == "sklearn"
    assert settings.task.outcome == "species"
    assert settings.task.outcome_type is OutcomeType.CATEGORICAL
    assert settings.partition.test_size == pytest.approx(0.2)
    assert [member.name for member in settings.stack.members] == ["pca_logistic", "pca_random_forest"]
    assert settings.random_state == 123


def test_overrides_are_deep_merged() -> None:
    settings = load_settings(IRIS_CONFIG, overrides={"stack": {"n_jobs": 2}, "random_state": 7})

    assert settings.stack.n_jobs == 2
    assert len(settings.stack.members) == 2
    assert settings.random_state == 7


def test_from_yaml_resolves_paths_relative_to_file(tmp_path: Path) -> None:
    config = {
        "project": {"name": "demo"},
        "data": {"source": "data/frame.csv"},
        "stack": {"members": [{"stages": [{"type": "sklearn.logistic_regression"}]}]},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config))

    settings = Settings.from_yaml(path)
    assert settings.resolve_path(settings.data.source) == (tmp_path / "data" / "frame.csv").resolve()
    assert settings.tracking.backend == "none"


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")


def test_stack_requires_members() -> None:
    with pytest.raises(ValueError):
        StackConfig(members=[])


def test_member_requires_stages() -> None:
    with pytest.raises(ValidationError):
        StackConfig(members=[{"name": "empty", "stages": []}])


def test_invalid_error_policy_is_rejected() -> None:
    with pytest.raises(ValidationError):
        StackConfig(members=[{"stages": [{"type": "sklearn.pca"}]}], on_error="ignore")


def test_build_stack_from_config() -> None:
    config = StackConfig(
        name="demo",
        on_error="collect",
        members=[
            {"name": "solo", "stages": [{"type": "sklearn.logistic_regression", "params": {"C": 0.5}}]},
            {"stages": [{"type": "sklearn.pca", "params": {"n_components": 2}}, {"type": "sklearn.random_forest"}]},
        ],
    )
    stack = build_stack(config)

    assert isinstance(stack, Stack)
    assert stack.name == "demo"
    assert stack.on_error == "collect"
    assert stack.names == ("solo", "pca_random_forest")
    assert stack["solo"].params["C"] == 0.5
    assert isinstance(stack.members[1], Pipeline)
