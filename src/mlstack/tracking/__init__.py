"""Tracking exports."""

from .mlflow_tracker import MLflowTracker
from .tracker import ExperimentTracker, InMemoryTracker, NullTracker, TrackedRun

__all__ = ["ExperimentTracker", "InMemoryTracker", "MLflowTracker", "NullTracker", "TrackedRun"]
