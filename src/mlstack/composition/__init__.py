"""Pipelines and stacks of learners."""

from .pipeline import FittedPipeline, Pipeline
from .stack import FittedStack, MemberOutcome, Stack

__all__ = ["FittedPipeline", "FittedStack", "MemberOutcome", "Pipeline", "Stack"]
