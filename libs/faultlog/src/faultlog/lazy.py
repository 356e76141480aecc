"""Thread-safe compute-once cell."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class LazyCell(Generic[T]):
    """Holds a value computed on first access, at most once.

    Concurrent callers block on a lock while the first one computes. If the
    factory raises, nothing is cached and the exception propagates to that
    caller; a later call runs the factory again.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._value: T | None = None
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    def get(self) -> T:
        with self._lock:
            if not self._ready:
                self._value = self._factory()
                self._ready = True
            return self._value  # type: ignore[return-value]
