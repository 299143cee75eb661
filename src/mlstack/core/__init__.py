"""Core abstractions shared across the framework."""

from .errors import (
    DimensionError,
    InsufficientDataError,
    MLStackError,
    NotFittedError,
    OutcomeTypeError,
    SchemaError,
    SchemaMismatchError,
    StackTrainingError,
)
from .protocols import Fitted, Prediction, Trainable

__all__ = [
    "MLStackError",
    "SchemaError",
    "SchemaMismatchError",
    "OutcomeTypeError",
    "InsufficientDataError",
    "DimensionError",
    "NotFittedError",
    "StackTrainingError",
    "Fitted",
    "Prediction",
    "Trainable",
]
