"""Named plugin registries used for learners and data loaders."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Registry(Generic[T]):
    """Map short, dotted names (``sklearn.pca``) to implementation classes.

    Registration happens at import time through the :meth:`register`
    decorator; configuration files then refer to implementations by name.
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._entries: dict[str, type[T]] = {}

    def register(self, name: str) -> Callable[[type[T]], type[T]]:
        def decorator(cls: type[T]) -> type[T]:
            if name in self._entries:
                raise ValueError(f"{self.kind.capitalize()} '{name}' already registered")
            self._entries[name] = cls
            return cls

        return decorator

    def get(self, name: str, /) -> type[T]:
        try:
            return self._entries[name]
        except KeyError:
            known = ", ".join(self.list()) or "<empty>"
            raise KeyError(f"Unknown {self.kind} '{name}'. Available: {known}") from None

    def create(self, name: str, /, **kwargs: Any) -> T:
        return self.get(name)(**kwargs)

    def list(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries


__all__ = ["Registry"]
