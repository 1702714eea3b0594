"""A minimal fixed-capacity object pool."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable


class ObjectPool:
    """Holds up to ``size`` reusable objects, allocating new ones when empty."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"pool size must not be negative: {size}")
        self._size = size
        self._values: deque[Any] = deque()
        self._lock = threading.Lock()
        self._alloc: Callable[[], Any] | None = None

    def init(self, alloc: Callable[[], Any]) -> None:
        """Set the allocator and fill the pool to capacity."""
        self._alloc = alloc
        with self._lock:
            while len(self._values) < self._size:
                self._values.append(alloc())

    def get(self) -> Any:
        """Take a pooled object, or allocate a new one if none is left."""
        with self._lock:
            if self._values:
                return self._values.popleft()
        if self._alloc is None:
            raise RuntimeError("object pool used before init")
        return self._alloc()

    def put(self, obj: Any) -> None:
        """Return an object to the pool; it is dropped when the pool is full."""
        with self._lock:
            if len(self._values) < self._size:
                self._values.append(obj)