"""Experiment configuration models, loaded from YAML and the environment."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mlstack.tasks.task import OutcomeType

from .loader import deep_merge, load_yaml


class ProjectConfig(BaseModel):
    """Name used for logs and as the dataset label."""

    name: str
    description: str = ""


class DataConfig(BaseModel):
    """Where the dataset comes from and how to read it."""

    loader_type: str = "csv"
    source: str
    loader_options: dict[str, Any] = Field(default_factory=dict)


class TaskConfig(BaseModel):
    """Column roles for the task built from the loaded dataset."""

    covariates: list[str] = Field(default_factory=list)
    outcome: str | None = None
    outcome_type: OutcomeType | None = None
    id: str | None = None
    weights: str | None = None
    offset: str | None = None


class PartitionConfig(BaseModel):
    """Train/test split settings."""

    test_size: float = 0.2
    stratify: bool = True

    @field_validator("test_size")
    @classmethod
    def _check_test_size(cls, value: float) -> float:
        if not 0 < value < 1:
            raise ValueError("test_size must be in (0, 1)")
        return value


class StageConfig(BaseModel):
    """A single registered learner plus hyper-parameters."""

    type: str
    name: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)


class MemberConfig(BaseModel):
    """A stack member: one learner or a pipeline of several."""

    name: str | None = None
    stages: list[StageConfig]

    @field_validator("stages")
    @classmethod
    def _ensure_stages(cls, value: list[StageConfig]) -> list[StageConfig]:
        if not value:
            raise ValueError("A stack member needs at least one stage")
        return value


class StackConfig(BaseModel):
    """Stack composition and member failure policy."""

    name: str | None = None
    members: list[MemberConfig]
    on_error: Literal["raise", "collect"] = "raise"
    n_jobs: int = 1

    @field_validator("members")
    @classmethod
    def _ensure_members(cls, value: list[MemberConfig]) -> list[MemberConfig]:
        if not value:
            raise ValueError("At least one stack member must be provided")
        return value


class EvaluationConfig(BaseModel):
    """Metric selection per outcome family."""

    classification_metrics: list[str] = Field(default_factory=lambda: ["accuracy", "balanced_accuracy", "kappa"])
    regression_metrics: list[str] = Field(default_factory=lambda: ["rmse", "mae", "r2"])


class TrackingConfig(BaseModel):
    """Where per-member runs are recorded; ``none`` disables tracking."""

    backend: Literal["mlflow", "none"] = "none"
    tracking_uri: str = "file:./mlruns"
    experiment_name: str = "default"
    run_name_prefix: str = "run"


class Settings(BaseSettings):
    """Everything an experiment run needs.

    Sections missing from the YAML file can be supplied through ``MLSTACK_``
    environment variables, with ``__`` between nested keys
    (``MLSTACK_TRACKING__BACKEND=mlflow``). Values given in the file win.
    """

    model_config = SettingsConfigDict(
        env_prefix="MLSTACK_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    project: ProjectConfig
    data: DataConfig
    task: TaskConfig = Field(default_factory=TaskConfig)
    partition: PartitionConfig = Field(default_factory=PartitionConfig)
    stack: StackConfig
    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    random_state: int | None = None

    _source: Path | None = PrivateAttr(default=None)

    @classmethod
    def from_yaml(cls, path: str | Path, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load ``path``, deep-merging ``overrides`` (e.g. CLI flags) on top."""

        config_path = Path(path)
        payload = load_yaml(config_path)
        if overrides:
            payload = deep_merge(payload, overrides)

        settings = cls(**payload)
        settings._source = config_path
        return settings

    @property
    def base_dir(self) -> Path:
        """Directory relative paths are resolved against."""

        if self._source is None:
            return Path.cwd()
        return self._source.parent

    def resolve_path(self, raw: str | Path) -> Path:
        path = Path(raw)
        if path.is_absolute():
            return path
        return (self.base_dir / path).resolve()


def load_settings(config_path: str | Path, overrides: Mapping[str, Any] | None = None) -> Settings:
    return Settings.from_yaml(config_path, overrides=overrides)


__all__ = [
    "DataConfig",
    "EvaluationConfig",
    "MemberConfig",
    "PartitionConfig",
    "ProjectConfig",
    "Settings",
    "StackConfig",
    "StageConfig",
    "TaskConfig",
    "TrackingConfig",
    "load_settings",
]
