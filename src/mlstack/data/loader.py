"""High level dataset loader orchestration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd
from pandas.errors import EmptyDataError, ParserError

from .base import DataLoader
from .registry import DataLoaderRegistry


class DatasetLoader:
    """Load named datasets through a registered loader with targeted errors."""

    def __init__(self, loader: DataLoader):
        self.loader = loader
        self._logger = logging.getLogger(__name__)

    def load(self, name: str, source: str | Path, **kwargs: Any) -> pd.DataFrame:
        if self.loader.reads_files and not Path(source).exists():
            raise FileNotFoundError(f"Dataset '{name}' not found at path: {source}")

        try:
            self._logger.debug("Loading dataset '%s' from %s", name, source)
            frame = self.loader.load(source, **kwargs)
        except EmptyDataError as exc:
            raise RuntimeError(f"Dataset '{name}' at '{source}' is empty") from exc
        except ParserError as exc:
            raise RuntimeError(f"Failed to parse dataset '{name}' from '{source}'") from exc
        except KeyError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            self._logger.exception("Unexpected error loading dataset '%s'", name)
            raise RuntimeError(f"Failed loading dataset '{name}' from '{source}'") from exc

        self._logger.info("Loaded %s rows for dataset '%s'", len(frame), name)
        return frame

    def load_many(self, sources: dict[str, str | Path], **kwargs: Any) -> dict[str, pd.DataFrame]:
        return {name: self.load(name, source, **kwargs) for name, source in sources.items()}

    @classmethod
    def from_config(cls, loader_type: str, **loader_kwargs: Any) -> DatasetLoader:
        return cls(DataLoaderRegistry.create(loader_type, **loader_kwargs))


__all__ = ["DataLoader", "DatasetLoader"]
