"""Registry of learner implementations addressable from configuration."""

from __future__ import annotations

from mlstack.core.registry import Registry

from .base import Learner

LearnerRegistry: Registry[Learner] = Registry("learner")

__all__ = ["LearnerRegistry"]
