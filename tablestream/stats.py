"""Statistics for partitions, tables, views and processors."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import IntEnum
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

STATS_HWM_UPDATE_INTERVAL = timedelta(seconds=5)
FETCH_STATS_TIMEOUT = timedelta(seconds=10)


class PartitionStatus(IntEnum):
    """Status of a table partition."""

    STOPPED = 0
    INITIALIZING = 1
    CONNECTING = 2
    RECOVERING = 3
    PREPARING = 4
    RUNNING = 5


@dataclass
class InputStats:
    """Messages and bytes consumed from a topic."""

    count: int = 0
    bytes: int = 0
    offset_lag: int = 0
    last_offset: int = 0
    delay: timedelta = field(default_factory=timedelta)

    def clone(self) -> "InputStats":
        return dataclasses.replace(self)


@dataclass
class OutputStats:
    """Messages and bytes emitted into a topic."""

    count: int = 0
    bytes: int = 0

    def clone(self) -> "OutputStats":
        return dataclasses.replace(self)


@dataclass
class RecoveryStats:
    """Progress of a partition's recovery."""

    start_time: Optional[datetime] = None
    recovery_time: Optional[datetime] = None
    offset: int = 0
    hwm: int = 0

    def clone(self) -> "RecoveryStats":
        return dataclasses.replace(self)


@dataclass
class TableStats:
    """Stats of one table partition."""

    stalled: bool = False
    status: PartitionStatus = PartitionStatus.STOPPED
    run_mode: int = 0
    recovery: RecoveryStats = field(default_factory=RecoveryStats)
    input: InputStats = field(default_factory=InputStats)
    writes: OutputStats = field(default_factory=OutputStats)

    def reset(self) -> None:
        """Start fresh input and write counters; recovery is kept."""
        self.input = InputStats()
        self.writes = OutputStats()

    def clone(self) -> "TableStats":
        """Copy counters, recovery and the stalled flag."""
        return TableStats(
            stalled=self.stalled,
            recovery=self.recovery.clone(),
            input=self.input.clone(),
            writes=self.writes.clone(),
        )


@dataclass
class PartitionProcStats:
    """Stats of a partition processor."""

    now: datetime = field(default_factory=datetime.now)
    table_stats: Optional[TableStats] = None
    joined: dict[str, TableStats] = field(default_factory=dict)
    input: dict[str, InputStats] = field(default_factory=dict)
    output: dict[str, OutputStats] = field(default_factory=dict)

    @classmethod
    def create(
        cls, inputs: Iterable[str] = (), outputs: Iterable[str] = ()
    ) -> "PartitionProcStats":
        """Create stats with empty counters for the given topics."""
        return cls(
            input={topic: InputStats() for topic in inputs or ()},
            output={topic: OutputStats() for topic in outputs or ()},
        )

    def clone(self) -> "PartitionProcStats":
        """Copy input and output counters with a fresh timestamp."""
        return PartitionProcStats(
            now=datetime.now(),
            joined={},
            input={k: v.clone() for k, v in self.input.items()},
            output={k: v.clone() for k, v in self.output.items()},
        )

    def track_output(self, topic: str, value_len: int) -> None:
        """Count one emitted message of ``value_len`` bytes to ``topic``."""
        stats = self.output.get(topic)
        if stats is None:
            logger.warning("no out stats for topic %s", topic)
            return
        stats.count += 1
        stats.bytes += value_len


@dataclass
class ViewStats:
    """Stats of all partitions of a view."""

    partitions: dict[int, TableStats] = field(default_factory=dict)


@dataclass
class ProcessorStats:
    """Stats of a processor's group partitions and lookup tables."""

    group: dict[int, PartitionProcStats] = field(default_factory=dict)
    lookup: dict[str, ViewStats] = field(default_factory=dict)