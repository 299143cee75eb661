"""Built-in data loaders and the registry that names them."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import pandas as pd
from sklearn import datasets

from mlstack.core.registry import Registry

from .base import DataLoader

DataLoaderRegistry: Registry[DataLoader] = Registry("data loader")


class PandasFileLoader(DataLoader):
    """Read a file with one of the ``pandas.read_*`` functions.

    Keyword arguments given at construction are defaults for every ``load``;
    arguments passed to ``load`` take precedence.
    """

    reader: str = "read_csv"

    def __init__(self, **read_options: Any):
        self.read_options = read_options

    def load(self, source: str | Path, **kwargs: Any) -> pd.DataFrame:
        read = getattr(pd, self.reader)
        return read(source, **{**self.read_options, **kwargs})


@DataLoaderRegistry.register("csv")
class CSVDataLoader(PandasFileLoader):
    """Delimited text files."""

    def __init__(self, sep: str = ",", encoding: str = "utf-8", **read_options: Any):
        super().__init__(sep=sep, encoding=encoding, **read_options)


@DataLoaderRegistry.register("parquet")
class ParquetDataLoader(PandasFileLoader):
    reader = "read_parquet"


@DataLoaderRegistry.register("json")
class JSONDataLoader(PandasFileLoader):
    """JSON documents, one record per row by default."""

    reader = "read_json"

    def __init__(self, orient: str = "records", **read_options: Any):
        super().__init__(orient=orient, **read_options)


def _snake_case(column: str) -> str:
    return re.sub(r"[^0-9a-zA-Z]+", "_", str(column)).strip("_").lower()


@DataLoaderRegistry.register("sklearn")
class SklearnDatasetLoader(DataLoader):
    """Datasets bundled with scikit-learn (``iris``, ``wine``, ``diabetes``...).

    Feature names are snake_cased and, for classification datasets, integer
    target codes are replaced by the class names.
    """

    reads_files = False

    def __init__(self, target_column: str = "target", label_target: bool = True):
        self.target_column = target_column
        self.label_target = label_target

    def load(self, source: str | Path, **kwargs: Any) -> pd.DataFrame:
        loader = getattr(datasets, f"load_{source}", None)
        if loader is None:
            raise KeyError(f"scikit-learn has no bundled dataset named '{source}'")

        bunch = loader(as_frame=True, **kwargs)
        frame = bunch.frame.copy()
        target_names = getattr(bunch, "target_names", None)
        if self.label_target and target_names is not None:
            frame["target"] = pd.Series(target_names, dtype=object).take(frame["target"].to_numpy()).to_numpy()

        frame = frame.rename(columns={column: _snake_case(column) for column in frame.columns if column != "target"})
        return frame.rename(columns={"target": self.target_column})


__all__ = [
    "CSVDataLoader",
    "DataLoaderRegistry",
    "JSONDataLoader",
    "PandasFileLoader",
    "ParquetDataLoader",
    "SklearnDatasetLoader",
]
