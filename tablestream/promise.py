"""A promise resolved once with a produced message or an error."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional, Tuple

MessageCallback = Callable[[Any, Optional[BaseException]], None]
ErrorCallback = Callable[[Optional[BaseException]], None]
PromiseFinisher = Callable[[Any, Optional[BaseException]], "Promise"]


class Promise:
    """Collects callbacks and runs them once the promise is finished.

    Callbacks added after the promise has finished are run immediately
    with the stored message and error.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._err: Optional[BaseException] = None
        self._msg: Any = None
        self._finished = False
        self._callbacks: list[MessageCallback] = []

    def then(self, callback: ErrorCallback) -> "Promise":
        """Chain a callback that receives only the error (or None)."""
        return self.then_with_message(lambda _msg, err: callback(err))

    def then_with_message(self, callback: MessageCallback) -> "Promise":
        """Chain a callback that receives the message and the error."""
        with self._lock:
            if self._finished:
                callback(self._msg, self._err)
            else:
                self._callbacks.append(callback)
        return self

    def finish(self, msg: Any, err: Optional[BaseException]) -> "Promise":
        """Store the result and run all pending callbacks.

        Callbacks run only on the first call; later calls replace the stored
        result seen by late subscribers but do not re-run callbacks.
        """
        with self._lock:
            self._err = err
            self._msg = msg
            if not self._finished:
                for callback in self._callbacks:
                    callback(self._msg, self._err)
                self._finished = True
        return self


def new_promise_with_finisher() -> Tuple[Promise, PromiseFinisher]:
    """Create a promise together with the function that finishes it."""
    promise = Promise()
    return promise, promise.finish