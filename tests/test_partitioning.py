import pytest

from tablestream.partitioning import (
    OFFSET_NEWEST,
    CopartitionError,
    assignment_from_claims,
    ensure_copartitioned,
    hash_key,
)


class FixedHasher:
    def __init__(self, value):
        self.value = value
        self.data = b""

    def update(self, data):
        self.data += data

    def sum32(self):
        return self.value


class SumHasher:
    def __init__(self):
        self.total = 0

    def update(self, data):
        self.total += sum(data) * 2654435761

    def sum32(self):
        return self.total & 0xFFFFFFFF


class FakeTopicManager:
    def __init__(self, topics):
        self.topics = topics

    def partitions(self, topic):
        if topic not in self.topics:
            raise KeyError("requested topic was not found")
        return self.topics[topic]


def test_hash_key_uses_sum_modulo():
    assert hash_key(lambda: FixedHasher(7), "key", 100) == 7


def test_hash_key_negative_sum_is_made_positive():
    assert hash_key(lambda: FixedHasher(0xFFFFFFFF), "key", 100) == 1


@pytest.mark.parametrize("key", ["a", "key1", "key2", "some-longer-key", ""])
def test_hash_key_in_range_and_deterministic(key):
    first = hash_key(SumHasher, key, 10)
    assert 0 <= first < 10
    assert hash_key(SumHasher, key, 10) == first


def test_hash_key_zero_partitions():
    with pytest.raises(ValueError, match="0 partitions"):
        hash_key(lambda: FixedHasher(3), "key", 0)


def test_ensure_copartitioned_returns_count():
    tm = FakeTopicManager({"a": [0, 1, 2], "b": [0, 1, 2]})
    assert ensure_copartitioned(tm, ["a", "b"]) == 3


def test_ensure_copartitioned_no_topics():
    assert ensure_copartitioned(FakeTopicManager({}), []) == 0


def test_ensure_copartitioned_gap():
    tm = FakeTopicManager({"a": [0, 2]})
    with pytest.raises(CopartitionError, match="partition gap"):
        ensure_copartitioned(tm, ["a"])


def test_ensure_copartitioned_mismatch():
    tm = FakeTopicManager({"a": [0, 1], "b": [0, 1, 2]})
    with pytest.raises(CopartitionError, match="not copartitioned"):
        ensure_copartitioned(tm, ["a", "b"])


def test_ensure_copartitioned_fetch_error():
    tm = FakeTopicManager({"a": [0]})
    with pytest.raises(CopartitionError, match="missing"):
        ensure_copartitioned(tm, ["a", "missing"])


def test_assignment_from_claims():
    claims = {"input": [0, 1], "loop": [1, 0]}
    assert assignment_from_claims(claims) == {0: OFFSET_NEWEST, 1: OFFSET_NEWEST}


def test_assignment_from_no_claims():
    assert assignment_from_claims({}) == {}


@pytest.mark.parametrize(
    "claims",
    [
        {"input": [0, 1], "loop": [0]},
        {"input": [0, 1], "loop": [0, 2]},
    ],
)
def test_assignment_not_copartitioned(claims):
    with pytest.raises(CopartitionError, match="not copartitioned"):
        assignment_from_claims(claims)