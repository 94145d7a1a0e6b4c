"""Time-limited cached value."""

from __future__ import annotations

import time
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]


class CacheItem(Generic[T]):
    """
    Holds a value produced by an update function and hands it out until it
    is older than `lifetime_sec`; the next access then calls the update
    function again (synchronously, on the caller's thread).
    """

    def __init__(
        self,
        update: Optional[Callable[[], T]] = None,
        *,
        lifetime_sec: float = 60.0,
        clock: Clock = time.monotonic,
    ) -> None:
        self._update = update
        self._lifetime_sec = lifetime_sec
        self._clock = clock
        self._value: Optional[T] = None
        self._last_update: Optional[float] = None

    @property
    def value(self) -> T:
        if self._update is None:
            raise ValueError("CacheItem has no update function; use value_with_update")
        return self.value_with_update(self._update)

    def value_with_update(self, update: Callable[[], T]) -> T:
        """Return the cached value, refreshing it with `update` if out of date."""
        if self.out_of_date():
            self._value = update()
            self._last_update = self._clock()
        return self._value  # type: ignore[return-value]

    def set(self, value: T) -> None:
        """Store a value computed elsewhere as fresh."""
        self._value = value
        self._last_update = self._clock()

    def out_of_date(self) -> bool:
        if self._last_update is None:
            return True
        return self._clock() - self._last_update > self._lifetime_sec

    def last_value_without_update(self) -> Optional[T]:
        """Return whatever was last computed (possibly stale, possibly None)."""
        return self._value

    def obsolete(self) -> None:
        """Force an update on the next access, keeping the last value readable."""
        self._last_update = None

    def reset(self) -> None:
        """Forget the value entirely."""
        self._value = None
        self._last_update = None
