"""CLI entry-point for running a stack experiment from a YAML config."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from mlstack.config import load_settings

from .runner import ExperimentResult, ExperimentRunner

DEFAULT_CONFIG = Path("config/iris_stack.yaml")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Train a stack of learners and report per-member results.")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help="Path to the experiment YAML file",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random state threaded through partitioning and training",
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        default=None,
        help="Number of workers used to train stack members",
    )
    parser.add_argument(
        "--on-error",
        choices=["raise", "collect"],
        default=None,
        help="Abort on the first member failure or collect per-member errors",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING...)",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> ExperimentResult:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.seed is not None:
        overrides["random_state"] = args.seed
    stack_overrides = {
        key: value for key, value in {"n_jobs": args.n_jobs, "on_error": args.on_error}.items() if value is not None
    }
    if stack_overrides:
        overrides["stack"] = stack_overrides

    settings = load_settings(args.config, overrides=overrides)
    result = ExperimentRunner(settings).run()

    sizes = result.split_sizes
    print(f"Experiment '{settings.project.name}': {sizes['train']} train / {sizes['test']} test rows")
    for report in result.reports:
        print(f"\n[{report.index}] {report.name}")
        if not report.ok:
            print(f"  failed: {report.error}")
            continue
        for metric in sorted(report.metrics):
            print(f"  {metric}: {report.metrics[metric]:.4f}")
        if report.confusion is not None:
            print(report.confusion.matrix.to_string())
    return result


if __name__ == "__main__":
    main()
