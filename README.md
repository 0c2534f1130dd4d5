# tablestream

`tablestream` collects building blocks for a stateful stream processor. Such a
processor reads keyed messages from partitioned topics. The package provides:

- **State signals** (`tablestream.signal`). `Signal` holds the state a
  component is in. Threads can wait for an exact state or a minimum state, and
  `StateChangeObserver` receives every state change.
- **Promises** (`tablestream.promise`). A `Promise` resolves once with a
  message or an error.
- **Backoff** (`tablestream.backoff`). `SimpleBackoff` gives a wait that grows
  by a fixed step, up to a maximum, until it is reset.
- **Statistics** (`tablestream.stats`). Dataclasses hold input, output,
  recovery, table, view and processor statistics.
- **Partitioning helpers** (`tablestream.partitioning`). These hash keys to
  partitions, check that topics are co-partitioned, and build partition
  assignments from consumer-group claims.
- **Processor pieces** (`tablestream.processor`). These are the processor life
  cycle states, the consumed message record, and offset committing.
- **Fault injection** (`tablestream.faultproxy`). `FaultInjectingProxy` dials
  TCP connections whose reads and writes can be made to fail on demand.

## Installation

The package uses only the standard library and supports Python 3.10 and
later. Install the `test` extra to run the tests with pytest.

## Usage

### Waiting for state

```python
from tablestream.signal import Signal

signal = Signal(0, 1, 2)      # the allowed states; the signal starts at 0
assert signal.is_state(0)

reached = signal.wait_for_state_min(1)   # a threading.Event
signal.set_state(2)
assert reached.is_set()
assert signal.state() == 2
```

`set_state` raises `ValueError` for a state that was not passed to the
constructor. Setting the current state again does nothing.

There are two ways to wait for a state:

- `wait_for_state(state)` returns an event that is set once the signal is
  exactly in `state`.
- `wait_for_state_min(state)` returns an event that is set once the signal is
  in `state` or a higher one.

`wait_for_state_min_with_cleanup(state)` returns the same event together with
a function. Calling that function withdraws the wait.

`observe_state_change()` returns a `StateChangeObserver` that already holds the
current state. Read each change with `get(timeout)`, which raises
`TimeoutError` if nothing arrives in time. Once the observer is stopped and
empty, `get` returns `None`. Call `stop()` to stop it. The signal waits for
each observed state to be read before it passes on the next one, so keep
observers drained.

### Promises

```python
from tablestream.promise import Promise, new_promise_with_finisher

errors = []
promise = Promise()
promise.then(errors.append)
promise.finish(None, RuntimeError("delivery failed"))
assert str(errors[0]) == "delivery failed"

promise, finish = new_promise_with_finisher()
promise.then_with_message(lambda msg, err: print(msg, err))
finish("message", None)
```

Callbacks run only the first time a promise is finished. A callback added
after that runs immediately with the stored message and error.

### Backoff

```python
from datetime import timedelta
from tablestream.backoff import SimpleBackoff

backoff = SimpleBackoff(timedelta(seconds=1), timedelta(seconds=10))
backoff.duration()   # 0 seconds
backoff.duration()   # 1 second
backoff.reset()      # back to 0
```

Plain numbers work as well as `timedelta`. The wait stops growing once another
step would pass the maximum.

### Statistics

`tablestream.stats` defines these statistics:

- `PartitionStatus`, the status of a table partition.
- `InputStats` and `OutputStats`, which count messages and bytes.
- `RecoveryStats`, the progress of a partition's recovery.
- `TableStats`, for one table partition. `reset()` replaces its input and
  write counters with fresh ones.
- `PartitionProcStats`. `PartitionProcStats.create(inputs, outputs)` makes
  empty counters for the given topics. `track_output(topic, value_len)`
  counts an emitted message, and logs a warning for an unknown topic.
- `ViewStats` and `ProcessorStats`, which gather these per partition and per
  lookup table.

The stats classes that have a `clone()` method return copies from it.

### Partitioning

```python
import zlib
from tablestream.partitioning import (
    assignment_from_claims, ensure_copartitioned, hash_key, OFFSET_NEWEST,
)

class Crc32:
    def __init__(self):
        self.value = 0
    def update(self, data):
        self.value = zlib.crc32(data, self.value)
    def sum32(self):
        return self.value

partition = hash_key(Crc32, "user-17", 10)

assignment = assignment_from_claims({"orders": [0, 1], "payments": [1, 0]})
assert assignment == {0: OFFSET_NEWEST, 1: OFFSET_NEWEST}
```

`hash_key` works as follows:

- It calls the hasher factory once for each key.
- It reads the 32-bit sum as a signed number and makes it non-negative.
- It takes the result modulo the partition count.
- It raises `ValueError` when the partition count is 0.

`ensure_copartitioned(topic_manager, topics)` calls
`topic_manager.partitions(topic)` for each topic and returns the shared
partition count. It raises `CopartitionError` in three cases:

- the partitions have gaps;
- the topics have different numbers of partitions;
- fetching the partitions fails.

`assignment_from_claims` raises `CopartitionError` if the claimed topics do not
cover the same partitions.

### Processor state and commits

`ProcState` lists the processor states in order: `IDLE`, `STARTING`, `SETUP`,
`RUNNING` and `STOPPING`. `new_processor_state()` returns a `Signal` that
accepts all of them and is set to `IDLE`.

`Message` is a consumed record. It has a key, topic, offset, partition,
timestamp, headers and value.

`create_message_committer(session)` returns a callback for a session object
that has `mark_offset(topic, partition, offset, metadata)`. The callback
commits the message's offset plus one, which is the next offset to consume.

### Fault injection

```python
from tablestream.faultproxy import FaultInjectingProxy

proxy = FaultInjectingProxy()
with proxy.dial("localhost:9092") as conn:
    proxy.set_read_error(ConnectionResetError("injected"))
    # conn.read(...) now raises the injected error
    proxy.reset_errors()
```

`dial` accepts `"host:port"` or a `(host, port)` tuple.
`connections()` lists the local addresses of the connections that are still
open. `set_write_error` makes writes fail in the same way that
`set_read_error` makes reads fail.

## What the package does not do

- It talks to no message broker. There is no consumer, producer, topic
  manager or processor run loop.
- It has no table storage. The `tablestream.storage` sub-package is empty:
  there are no in-memory, on-disk or Redis storages and no iterators over
  them.

You must bring these yourself. The helpers above only describe the objects
they expect, such as hasher factories, topic managers and sessions.