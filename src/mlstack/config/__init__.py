"""Configuration models and loaders."""

from .loader import deep_merge, load_yaml
from .settings import (
    DataConfig,
    EvaluationConfig,
    MemberConfig,
    PartitionConfig,
    ProjectConfig,
    Settings,
    StackConfig,
    StageConfig,
    TaskConfig,
    TrackingConfig,
    load_settings,
)

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
    "deep_merge",
    "load_settings",
    "load_yaml",
]
