"""Base class for data loaders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar

import pandas as pd


class DataLoader(ABC):
    """Abstract loader definition."""

    reads_files: ClassVar[bool] = True

    @abstractmethod
    def load(self, source: str | Path, **kwargs: Any) -> pd.DataFrame:  # pragma: no cover - interface
        raise NotImplementedError


__all__ = ["DataLoader"]
