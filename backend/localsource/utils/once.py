"""Compute-once gate — thread-safe lazy initializer with a cached outcome."""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class Once(Generic[T]):
    """Run a function at most once and cache its result or exception.

    The first caller of :meth:`get` runs the function while holding the
    lock; concurrent callers block until it finishes. Every caller then
    sees the same value, or the same exception object re-raised.
    """

    def __init__(self, func: Callable[[], T]):
        self._func = func
        self._lock = threading.Lock()
        self._done = False
        self._value: T | None = None
        self._error: BaseException | None = None

    @property
    def done(self) -> bool:
        return self._done

    def get(self) -> T:
        if not self._done:
            with self._lock:
                if not self._done:
                    try:
                        self._value = self._func()
                    except Exception as e:
                        self._error = e
                    # BaseException (e.g. KeyboardInterrupt) skips this and leaves the gate open
                    self._done = True
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]
