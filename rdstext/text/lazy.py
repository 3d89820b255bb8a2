"""Process-wide lookup tables that are built once, on first use."""

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LazyTable(Generic[T]):
    """
    Read-only value built at most once, thread-safely.

    Uses double-checked locking so the hot path is a plain attribute read.
    The builder must return a value that is never mutated afterwards.
    """

    def __init__(self, name: str, builder: Callable[[], T]):
        self.name = name
        self._builder = builder
        self._value: Optional[T] = None
        self._lock = threading.Lock()

    def get(self) -> T:
        value = self._value
        if value is None:
            with self._lock:
                if self._value is None:
                    logger.debug(f"Building lookup table: {self.name}")
                    self._value = self._builder()
                value = self._value
        return value

    @property
    def is_built(self) -> bool:
        return self._value is not None
