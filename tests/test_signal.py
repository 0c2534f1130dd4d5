import threading

import pytest

from tablestream.signal import Signal


def test_set_state():
    sig = Signal(0, 1, 2)
    assert sig.is_state(0)
    assert not sig.is_state(1)

    sig.set_state(1)
    assert sig.is_state(1)
    assert not sig.is_state(0)

    with pytest.raises(ValueError):
        sig.set_state(3)


def test_wait():
    sig = Signal(0, 1, 2)
    assert sig.wait_for_state(0).wait(timeout=1)

    has_state = threading.Event()
    event = sig.wait_for_state(1)

    def waiter():
        event.wait()
        has_state.set()

    thread = threading.Thread(target=waiter)
    thread.start()
    assert not has_state.is_set()
    sig.set_state(1)
    thread.join(timeout=5)
    assert has_state.is_set()


def test_wait_min():
    sig = Signal(0, 1, 2)
    has_state = threading.Event()
    event = sig.wait_for_state_min(1)
    assert not event.is_set()

    def waiter():
        event.wait()
        has_state.set()

    thread = threading.Thread(target=waiter)
    thread.start()
    assert not has_state.is_set()
    sig.set_state(2)
    assert event.is_set()
    thread.join(timeout=5)
    assert has_state.is_set()


def test_state_reader():
    setup, running = 2, 3
    state = Signal(setup, running)
    state.set_state(running)
    assert state.state() == running


def test_exact_wait_not_released_by_higher_state():
    sig = Signal(0, 1, 2)
    event = sig.wait_for_state(1)
    sig.set_state(2)
    assert not event.is_set()
    sig.set_state(1)
    assert event.is_set()


def test_wait_min_already_reached():
    sig = Signal(0, 1, 2)
    sig.set_state(2)
    assert sig.wait_for_state_min(1).is_set()


def test_wait_min_cleanup_removes_waiter():
    sig = Signal(0, 1, 2)
    event, cleanup = sig.wait_for_state_min_with_cleanup(2)
    cleanup()
    sig.set_state(2)
    assert not event.is_set()


def test_set_state_returns_signal():
    sig = Signal(0, 1)
    assert sig.set_state(1) is sig


def test_observer_receives_changes():
    sig = Signal(0, 1, 2)
    observer = sig.observe_state_change()
    assert observer.get(timeout=1) == 0
    sig.set_state(1)
    assert observer.get(timeout=1) == 1
    sig.set_state(2)
    assert observer.get(timeout=1) == 2


def test_observer_not_notified_for_same_state():
    sig = Signal(0, 1)
    observer = sig.observe_state_change()
    assert observer.get(timeout=1) == 0
    sig.set_state(0)
    with pytest.raises(TimeoutError):
        observer.get(timeout=0.05)


def test_observer_stop():
    sig = Signal(0, 1)
    observer = sig.observe_state_change()
    assert observer.get(timeout=1) == 0
    observer.stop()
    sig.set_state(1)
    assert observer.get(timeout=1) is None