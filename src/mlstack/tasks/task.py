"""Immutable typed view over a tabular dataset."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from mlstack.core.errors import OutcomeTypeError, SchemaError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from mlstack.config.settings import TaskConfig


class OutcomeType(str, Enum):
    """Semantic type of the outcome column."""

    CATEGORICAL = "categorical"
    CONTINUOUS = "continuous"
    BINOMIAL = "binomial"
    MULTINOMIAL = "multinomial"

    @property
    def is_discrete(self) -> bool:
        return self is not OutcomeType.CONTINUOUS


def infer_outcome_type(values: pd.Series) -> OutcomeType:
    """Guess the outcome type from the values of a column."""

    if values.dropna().nunique() == 2:
        return OutcomeType.BINOMIAL
    dtype = values.dtype
    if isinstance(dtype, pd.CategoricalDtype) or not pd.api.types.is_numeric_dtype(dtype):
        return OutcomeType.CATEGORICAL
    if pd.api.types.is_bool_dtype(dtype):
        return OutcomeType.BINOMIAL
    return OutcomeType.CONTINUOUS


def _is_numeric(values: pd.Series) -> bool:
    return pd.api.types.is_numeric_dtype(values.dtype) and not pd.api.types.is_bool_dtype(values.dtype)


@dataclass(frozen=True, eq=False)
class Task:
    """Dataset plus the roles its columns play.

    The frame is copied on construction and ``X``/``Y`` hand out copies, so
    learners never change the data a task was built from. Derived
    tasks (``subset``, ``with_covariates``) are new instances.
    """

    data: pd.DataFrame = field(repr=False)
    covariates: tuple[str, ...]
    outcome: str | None = None
    outcome_type: OutcomeType | None = None
    id: str | None = None
    weights: str | None = None
    offset: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.data, pd.DataFrame):
            raise TypeError(f"Task data must be a pandas DataFrame, got {type(self.data).__name__}")

        covariates = (self.covariates,) if isinstance(self.covariates, str) else tuple(self.covariates)
        object.__setattr__(self, "covariates", covariates)
        object.__setattr__(self, "data", self.data.copy())

        self._validate_columns()

        outcome_type = self.outcome_type
        if self.outcome is None:
            if outcome_type is not None:
                raise SchemaError("outcome_type was given without an outcome column")
        else:
            outcome_type = (
                OutcomeType(outcome_type) if outcome_type is not None else infer_outcome_type(self.data[self.outcome])
            )
            self._validate_outcome(outcome_type)
        object.__setattr__(self, "outcome_type", outcome_type)

        for role in ("weights", "offset"):
            column = getattr(self, role)
            if column is not None and not _is_numeric(self.data[column]):
                raise OutcomeTypeError(f"{role} column '{column}' must be numeric")

    def _validate_columns(self) -> None:
        available = set(self.data.columns)
        if len(set(self.covariates)) != len(self.covariates):
            raise SchemaError(f"Duplicate covariate names: {list(self.covariates)}")

        missing = [column for column in self.covariates if column not in available]
        if missing:
            raise SchemaError(f"Covariate columns missing from data: {missing}")

        roles = {"outcome": self.outcome, "id": self.id, "weights": self.weights, "offset": self.offset}
        assigned: dict[str, str] = {}
        for role, column in roles.items():
            if column is None:
                continue
            if column in assigned:
                raise SchemaError(f"Column '{column}' cannot be both the {assigned[column]} and the {role}")
            assigned[column] = role

        for role, column in roles.items():
            if column is None:
                continue
            if column not in available:
                raise SchemaError(f"{role} column '{column}' missing from data")
            if column in self.covariates:
                raise SchemaError(f"Column '{column}' cannot be both a covariate and the {role}")

    def _validate_outcome(self, outcome_type: OutcomeType) -> None:
        values = self.data[self.outcome]
        if outcome_type is OutcomeType.CONTINUOUS and not _is_numeric(values):
            raise OutcomeTypeError(
                f"Outcome '{self.outcome}' declared continuous but has non-numeric dtype {values.dtype}"
            )
        if outcome_type is OutcomeType.BINOMIAL:
            levels = values.dropna().unique()
            if len(levels) > 2:
                raise OutcomeTypeError(
                    f"Outcome '{self.outcome}' declared binomial but has {len(levels)} distinct values"
                )

    @classmethod
    def from_config(cls, data: pd.DataFrame, config: TaskConfig) -> Task:
        """Build a task from a ``TaskConfig`` block.

        An empty covariate list means every column not used in another role.
        """

        roles = {config.outcome, config.id, config.weights, config.offset}
        covariates = list(config.covariates) or [column for column in data.columns if column not in roles]
        return cls(
            data=data,
            covariates=tuple(covariates),
            outcome=config.outcome,
            outcome_type=config.outcome_type,
            id=config.id,
            weights=config.weights,
            offset=config.offset,
        )

    @property
    def nrows(self) -> int:
        return len(self.data)

    @property
    def index(self) -> pd.Index:
        return self.data.index

    @property
    def column_names(self) -> list[str]:
        return list(self.data.columns)

    @property
    def X(self) -> pd.DataFrame:  # noqa: N802 - conventional name for the design matrix
        return self.data.loc[:, list(self.covariates)].copy()

    @property
    def Y(self) -> pd.Series | None:  # noqa: N802
        if self.outcome is None:
            return None
        return self.data[self.outcome].copy()

    @property
    def ids(self) -> pd.Series:
        if self.id is None:
            return pd.Series(np.arange(self.nrows), index=self.data.index, name="id")
        return self.data[self.id].copy()

    @property
    def weights_values(self) -> pd.Series:
        if self.weights is None:
            return pd.Series(np.ones(self.nrows), index=self.data.index, name="weights")
        return self.data[self.weights].astype(float)

    @property
    def offset_values(self) -> pd.Series | None:
        if self.offset is None:
            return None
        return self.data[self.offset].astype(float)

    @property
    def has_weights(self) -> bool:
        return self.weights is not None

    def subset(self, rows: Sequence[int] | np.ndarray) -> Task:
        """Return a new task restricted to the given row positions."""

        return self._derive(self.data.iloc[list(rows)], self.covariates)

    def with_covariates(self, features: pd.DataFrame) -> Task:
        """Return a new task whose covariates are the columns of ``features``.

        Outcome, outcome type, id, weights and offset are carried over. The
        features must be aligned with this task's row index.
        """

        if len(features) != self.nrows:
            raise SchemaError(f"Expected {self.nrows} rows of new covariates, got {len(features)}")
        features = features.set_axis(self.data.index, axis=0)
        features.columns = [str(column) for column in features.columns]

        clashes = [column for column in self._role_columns() if column in features.columns]
        if clashes:
            raise SchemaError(f"New covariates reuse reserved column names: {clashes}")

        data = pd.concat([features, self.data.loc[:, self._role_columns()]], axis=1)
        return self._derive(data, tuple(features.columns))

    def _role_columns(self) -> list[str]:
        return [column for column in (self.outcome, self.id, self.weights, self.offset) if column is not None]

    def _derive(self, data: pd.DataFrame, covariates: Iterable[str]) -> Task:
        return Task(
            data=data,
            covariates=tuple(covariates),
            outcome=self.outcome,
            outcome_type=self.outcome_type,
            id=self.id,
            weights=self.weights,
            offset=self.offset,
        )

    def __len__(self) -> int:
        return self.nrows

    def describe(self) -> dict[str, Any]:
        return {
            "nrows": self.nrows,
            "covariates": list(self.covariates),
            "outcome": self.outcome,
            "outcome_type": self.outcome_type.value if self.outcome_type else None,
        }


__all__ = ["OutcomeType", "Task", "infer_outcome_type"]
