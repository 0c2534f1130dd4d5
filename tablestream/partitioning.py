"""Key hashing, partition checks and assignments shared by processors."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence

OFFSET_NEWEST = -1
OFFSET_OLDEST = -2

_INT32_MIN = -(2**31)


class CopartitionError(Exception):
    """Raised when topics or claims do not share the same partitions."""


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 2**32 if value >= 2**31 else value


def hash_key(hasher_factory: Callable[[], Any], key: str, partition_count: int) -> int:
    """Return the partition of ``key`` among ``partition_count`` partitions.

    ``hasher_factory`` returns a fresh hasher with ``update(data)`` and
    ``sum32()``. The 32-bit sum is taken as a signed integer and made
    non-negative before the modulo.
    """
    hasher = hasher_factory()
    hasher.update(key.encode())
    value = _to_int32(hasher.sum32())
    if value < 0 and value != _INT32_MIN:
        value = -value
    if partition_count == 0:
        raise ValueError("can't hash with 0 partitions")
    remainder = abs(value) % partition_count
    # a negative 32-bit minimum cannot be negated and keeps its sign
    return -remainder if value < 0 else remainder


def ensure_copartitioned(topic_manager: Any, topics: Iterable[str]) -> int:
    """Return the partition count shared by ``topics``.

    ``topic_manager.partitions(topic)`` must return the topic's partition
    ids. Raises CopartitionError if a topic has gaps in its partitions or
    a different number of partitions than the others.
    """
    npar = 0
    for topic in topics:
        try:
            partitions = list(topic_manager.partitions(topic))
        except Exception as exc:
            raise CopartitionError(
                f"Error fetching partitions for topic {topic}: {exc}"
            ) from exc

        if any(index != int(part) for index, part in enumerate(partitions)):
            raise CopartitionError(f"Topic {topic} has partition gap: {partitions}")

        if npar == 0:
            npar = len(partitions)
        if len(partitions) != npar:
            raise CopartitionError(
                f"topics are not copartitioned! Topic '{topic}' does not have "
                f"{npar} partitions like the rest but {len(partitions)}"
            )
    return npar


def assignment_from_claims(claims: Mapping[str, Sequence[int]]) -> Dict[int, int]:
    """Build the partition assignment from a session's claims.

    Every claimed topic must cover exactly the same partitions; each
    assigned partition starts at the newest offset.
    """
    assignment: Optional[Dict[int, int]] = None
    for claim in claims.values():
        if assignment is None:
            assignment = {part: OFFSET_NEWEST for part in claim}
            continue
        if len(claim) != len(assignment) or any(p not in assignment for p in claim):
            raise CopartitionError(
                f"session claims are not copartitioned: {dict(claims)!r}"
            )
    return assignment if assignment is not None else {}