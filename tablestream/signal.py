"""A state holder that threads can wait on and observe."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple


@dataclass(eq=False)
class _Waiter:
    state: int
    min_state: bool = False
    done: threading.Event = field(default_factory=threading.Event)


class StateChangeObserver:
    """Receives every state change of a signal, one at a time.

    The signal blocks on a state change until the previous state has been
    consumed with :meth:`get`, so observers must be drained.
    """

    def __init__(self, stop_hook: Callable[["StateChangeObserver"], None]) -> None:
        self._cond = threading.Condition()
        self._pending: deque[int] = deque()
        self._closed = False
        self._stop_hook = stop_hook

    def _notify(self, state: int) -> None:
        with self._cond:
            while self._pending and not self._closed:
                self._cond.wait()
            if self._closed:
                return
            self._pending.append(state)
            self._cond.notify_all()

    def get(self, timeout: Optional[float] = None) -> Optional[int]:
        """Return the next state, or None once stopped and drained.

        Raises TimeoutError if nothing arrives within ``timeout`` seconds.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._pending or self._closed, timeout):
                raise TimeoutError("no state change observed")
            if self._pending:
                state = self._pending.popleft()
                self._cond.notify_all()
                return state
            return None

    def stop(self) -> None:
        """Stop observing; pending notifications are dropped."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()
        self._stop_hook(self)


class Signal:
    """Holds one of a set of allowed integer states.

    The initial state is 0. Setting a state outside the allowed set raises
    ValueError.
    """

    def __init__(self, *args: int) -> None:
        self._lock = threading.Lock()
        self._state = 0
        self._waiters: set[_Waiter] = set()
        self._observers: list[StateChangeObserver] = []
        self._allowed = frozenset(args)

    def set_state(self, state: int) -> "Signal":
        """Change the state and wake everyone waiting for it."""
        with self._lock:
            if state not in self._allowed:
                raise ValueError(f"trying to set illegal state {state}")
            if self._state == state:
                return self
            self._state = state

            reached = {
                w for w in self._waiters
                if w.state == state or (w.min_state and state >= w.state)
            }
            self._waiters -= reached
            for waiter in reached:
                waiter.done.set()

            for observer in list(self._observers):
                observer._notify(state)
        return self

    def is_state(self, state: int) -> bool:
        with self._lock:
            return self._state == state

    def state(self) -> int:
        with self._lock:
            return self._state

    def wait_for_state_min(self, state: int) -> threading.Event:
        """Return an event set once the state is ``state`` or higher."""
        return self._register(_Waiter(state, min_state=True))

    def wait_for_state_min_with_cleanup(
        self, state: int
    ) -> Tuple[threading.Event, Callable[[], None]]:
        """Like :meth:`wait_for_state_min`, plus a function to stop waiting."""
        waiter = _Waiter(state, min_state=True)

        def cleanup() -> None:
            with self._lock:
                self._waiters.discard(waiter)

        return self._register(waiter), cleanup

    def wait_for_state(self, state: int) -> threading.Event:
        """Return an event set once the state is exactly ``state``."""
        return self._register(_Waiter(state))

    def _register(self, waiter: _Waiter) -> threading.Event:
        with self._lock:
            current = self._state
            if waiter.state == current or (waiter.min_state and current >= waiter.state):
                waiter.done.set()
            else:
                self._waiters.add(waiter)
        return waiter.done

    def observe_state_change(self) -> StateChangeObserver:
        """Return an observer primed with the current state."""
        with self._lock:
            observer = StateChangeObserver(self._remove_observer)
            observer._notify(self._state)
            self._observers.append(observer)
            return observer

    def _remove_observer(self, observer: StateChangeObserver) -> None:
        with self._lock:
            self._observers = [o for o in self._observers if o is not observer]