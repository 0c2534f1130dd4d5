"""A linear backoff with an upper bound."""

from __future__ import annotations

from datetime import timedelta
from typing import Generic, TypeVar

T = TypeVar("T", timedelta, int, float)


class SimpleBackoff(Generic[T]):
    """Waits ``step`` longer on each call until ``max_duration`` or a reset.

    Works with ``timedelta`` as well as plain numbers of seconds.
    """

    def __init__(self, step: T, max_duration: T) -> None:
        self._step = step
        self._max = max_duration
        self._zero = step * 0
        self._current = self._zero

    def reset(self) -> None:
        self._current = self._zero

    def duration(self) -> T:
        """Return the current wait and advance it, capped at the maximum."""
        value = self._current
        if self._current + self._step <= self._max:
            self._current = self._current + self._step
        return value