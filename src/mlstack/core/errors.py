"""Exception hierarchy shared by tasks, learners, pipelines and stacks."""

from __future__ import annotations


class MLStackError(Exception):
    """Base class for all framework errors.

    ``stage_path`` records where inside a pipeline or stack the error was
    raised, outermost position first. It stays empty for errors raised
    directly by a learner or task.
    """

    stage_path: tuple[int, ...] = ()


class SchemaError(MLStackError, ValueError):
    """A named column is missing, misnamed or used in two roles."""


class SchemaMismatchError(SchemaError):
    """Predict-time covariates are incompatible with the training schema."""


class OutcomeTypeError(MLStackError, TypeError):
    """Outcome values do not match the declared or supported outcome type."""


class InsufficientDataError(MLStackError, ValueError):
    """The task has too few rows (or classes) for the learner."""


class DimensionError(MLStackError, ValueError):
    """Hyperparameters are incompatible with the shape of the data."""


class NotFittedError(MLStackError, RuntimeError):
    """``predict`` was called on an object that has not been trained."""


class StackTrainingError(MLStackError, RuntimeError):
    """Every member of a stack failed to train, or to predict when chained, in collect mode."""

    def __init__(self, message: str, errors: list[BaseException]):
        super().__init__(message)
        self.errors = errors


def annotate_stage(exc: BaseException, index: int, name: str, container: str) -> BaseException:
    """Prefix ``index`` to the exception's stage path and attach a note."""

    path = getattr(exc, "stage_path", ())
    try:
        exc.stage_path = (index, *path)  # type: ignore[attr-defined]
    except AttributeError:  # pragma: no cover - exceptions with __slots__
        pass
    exc.add_note(f"raised by {container} stage {index} ({name})")
    return exc


__all__ = [
    "MLStackError",
    "SchemaError",
    "SchemaMismatchError",
    "OutcomeTypeError",
    "InsufficientDataError",
    "DimensionError",
    "NotFittedError",
    "StackTrainingError",
    "annotate_stage",
]
