"""Processor states, consumed messages and offset committing."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Callable, List, Optional, Tuple

from tablestream.signal import Signal

CommitCallback = Callable[["Message", str], None]


class ProcState(IntEnum):
    """Lifecycle states of a processor, in the order they are reached."""

    IDLE = 0
    STARTING = 1
    SETUP = 2
    RUNNING = 3
    STOPPING = 4


@dataclass
class Message:
    """A message consumed from one partition of a topic."""

    key: str = ""
    topic: str = ""
    offset: int = 0
    partition: int = 0
    timestamp: Optional[datetime] = None
    headers: List[Tuple[bytes, bytes]] = field(default_factory=list)
    value: Optional[bytes] = None


def new_processor_state() -> Signal:
    """Return a signal that accepts every processor state, starting idle."""
    return Signal(*ProcState).set_state(ProcState.IDLE)


def create_message_committer(session: Any) -> CommitCallback:
    """Return a callback that commits a message into ``session``.

    The committed offset is the one to be consumed next, that is the
    message's offset plus one. ``session`` must offer
    ``mark_offset(topic, partition, offset, metadata)``.
    """

    def commit(msg: Message, metadata: str) -> None:
        session.mark_offset(msg.topic, msg.partition, msg.offset + 1, metadata)

    return commit