"""Build learners, pipelines and stacks from configuration blocks."""

from __future__ import annotations

from mlstack.config.settings import MemberConfig, StackConfig, StageConfig
from mlstack.learners import Learner, LearnerRegistry

from .pipeline import Pipeline
from .stack import Stack


def build_learner(config: StageConfig) -> Learner:
    """Instantiate a registered learner from a stage block."""

    return LearnerRegistry.create(config.type, name=config.name, **config.params)


def build_member(config: MemberConfig) -> Learner:
    """A single stage is used as-is; several stages become a pipeline."""

    if len(config.stages) == 1:
        stage = config.stages[0]
        return LearnerRegistry.create(stage.type, name=config.name or stage.name, **stage.params)
    return Pipeline(*[build_learner(stage) for stage in config.stages], name=config.name)


def build_stack(config: StackConfig) -> Stack:
    return Stack(
        *[build_member(member) for member in config.members],
        name=config.name,
        on_error=config.on_error,
        n_jobs=config.n_jobs,
    )


__all__ = ["build_learner", "build_member", "build_stack"]
