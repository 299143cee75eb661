"""Data loading primitives."""

from .base import DataLoader
from .loader import DatasetLoader
from .registry import DataLoaderRegistry

__all__ = ["DataLoader", "DatasetLoader", "DataLoaderRegistry"]
