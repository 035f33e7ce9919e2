# kafkaparts

Building blocks for Kafka clients, written in plain Python with no
dependencies:

- `kafkaparts.topic_partition_list` holds `Offset`, which is a Kafka offset,
  and `TopicPartitionList`, which is an ordered list of topic/partition
  entries with offsets, metadata and an optional error code.
- `kafkaparts.timeouts` holds `Timeout`, `Deadline`, helpers that give epoch
  milliseconds, and a small asyncio-based runtime (`AsyncRuntime`,
  `AsyncioRuntime`).

## Installation

```
pip install .
```

## Offsets

An `Offset` is one of beginning, end, stored, invalid, an absolute offset or
an offset counted back from the end of the partition. It converts to and from
the integer form that Kafka uses.

```python
from kafkaparts.topic_partition_list import Offset

Offset.at(123).to_raw()        # 123
Offset.tail(10).to_raw()       # -2010
Offset.from_raw(-2010)         # equal to Offset.tail(10)
Offset.beginning().to_raw()    # -2
Offset.end().to_raw()          # -1
Offset.stored().to_raw()       # -1000
Offset.invalid().to_raw()      # -1001
Offset.at(-1).to_raw()         # None: this offset cannot be represented
Offset.tail(0).to_raw()        # None
```

Every offset has a `kind` (an `OffsetKind` member) and, for absolute and tail
offsets, a `value`.

## Topic partition lists

```python
from kafkaparts.topic_partition_list import (
    Offset, SetPartitionOffsetError, TopicPartitionList,
)

tpl = TopicPartitionList()
tpl.add_partition("topic1", 0)
tpl.add_partition_range("topic2", 0, 3)      # partitions 0, 1, 2 and 3
tpl.set_partition_offset("topic1", 0, Offset.at(42))

elem = tpl.find_partition("topic1", 0)
elem.topic, elem.partition, elem.offset      # ("topic1", 0, Offset.at(42))
elem.metadata = "note"

try:
    tpl.set_partition_offset("missing", 0, Offset.at(0))
except SetPartitionOffsetError as err:
    err.code                                 # "UnknownPartition"

mapping = tpl.to_topic_map()                 # {("topic1", 0): Offset.at(42), ...}
same = TopicPartitionList.from_topic_map(mapping)
len(tpl), tpl.copy() == tpl
```

- A new entry starts with the offset `Offset.invalid()`; `add_topic_unassigned`
  adds an entry with partition `-1`.
- `add_partition_offset` adds an entry and sets its offset in one call.
- `set_all_offsets` sets the same offset on every entry.
- `elements()` returns all entries in order, `elements_for_topic(topic)` those
  of one topic, and iterating the list yields its entries.
- Setting an offset that cannot be represented raises
  `SetPartitionOffsetError` with the code `"InvalidArgument"`.
- An entry's `error` holds an error code or `None`; `check_error()` raises
  `OffsetFetchError` carrying that code when one is set.
- Two lists are equal when they have the same length and every entry of one
  has a matching topic, partition, offset and metadata in the other.
- All errors derive from `KafkaError`.

## Timeouts and deadlines

Durations may be given as a `timedelta` or as a number of seconds; negative
durations raise `ValueError`.

```python
from datetime import timedelta
from kafkaparts.timeouts import Deadline, Timeout, current_time_millis

t = Timeout.after(timedelta(seconds=2))
t.as_millis()                                          # 2000
Timeout.never().as_millis()                            # -1
Timeout.from_duration(None) == Timeout.never()         # True
t.saturating_sub(timedelta(seconds=5)).is_zero()       # True
(t - Timeout.after(1)).as_millis()                     # 1000

deadline = Deadline.from_timeout(t)
deadline.remaining()                                   # a timedelta, never negative
deadline.remaining_millis_i32()                        # capped at 2**31 - 1
deadline.elapsed()
deadline.to_timeout()

current_time_millis()
```

Subtracting `Timeout.never()` from a timeout raises `ValueError`, as does a
subtraction that would go below zero. `millis_to_epoch(datetime)` gives the
milliseconds since the Unix epoch, `0` for earlier times; naive datetimes are
read as local time.

## Async runtime

`AsyncRuntime` is an abstract base with `spawn(task)` and
`delay_for(duration)`. `AsyncioRuntime` implements it on asyncio: `spawn`
schedules a coroutine as a task and keeps a reference until it finishes, and
`delay_for` returns an awaitable sleep.

## What this package does not do

It holds data structures and time helpers only. It does not connect to Kafka
brokers, and it has no producer, consumer or admin client and no command-line
tool.

## Running the tests

```
pip install .[test]
pytest
```