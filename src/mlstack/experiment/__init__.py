"""Experiment orchestration exports."""

from .runner import ExperimentResult, ExperimentRunner, MemberReport, build_tracker

__all__ = ["ExperimentResult", "ExperimentRunner", "MemberReport", "build_tracker"]
