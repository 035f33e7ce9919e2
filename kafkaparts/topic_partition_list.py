"""Topics, partitions and offsets, and lists of them."""

from __future__ import annotations

import enum
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

__all__ = [
    "KafkaError",
    "Offset",
    "OffsetFetchError",
    "OffsetKind",
    "SetPartitionOffsetError",
    "TopicPartitionList",
    "TopicPartitionListElem",
]

PARTITION_UNASSIGNED = -1

OFFSET_BEGINNING = -2
OFFSET_END = -1
OFFSET_STORED = -1000
OFFSET_INVALID = -1001
OFFSET_TAIL_BASE = -2000

INVALID_ARGUMENT = "InvalidArgument"
UNKNOWN_PARTITION = "UnknownPartition"

_DEFAULT_CAPACITY = 5
_MIN_GROWTH = 32


class KafkaError(Exception):
    """Base class for errors carrying a Kafka error code."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KafkaError):
            return NotImplemented
        return type(self) is type(other) and self.code == other.code

    def __hash__(self) -> int:
        return hash((type(self), self.code))

    def __str__(self) -> str:
        return f"{self.description}: {self.code}"

    description = "Kafka error"


class SetPartitionOffsetError(KafkaError):
    """An offset could not be set on a partition."""

    description = "Set partition offset error"


class OffsetFetchError(KafkaError):
    """An entry of a partition list carries an error."""

    description = "Offset fetch error"


class OffsetKind(enum.Enum):
    BEGINNING = "beginning"
    END = "end"
    STORED = "stored"
    INVALID = "invalid"
    OFFSET = "offset"
    OFFSET_TAIL = "offset_tail"


_SPECIAL_RAW = {
    OffsetKind.BEGINNING: OFFSET_BEGINNING,
    OffsetKind.END: OFFSET_END,
    OffsetKind.STORED: OFFSET_STORED,
    OffsetKind.INVALID: OFFSET_INVALID,
}
_RAW_SPECIAL = {raw: kind for kind, raw in _SPECIAL_RAW.items()}


@dataclass(frozen=True)
class Offset:
    """A Kafka offset: a special position, an absolute offset or one relative to the end."""

    kind: OffsetKind
    value: int | None = None

    def __post_init__(self) -> None:
        numeric = self.kind in (OffsetKind.OFFSET, OffsetKind.OFFSET_TAIL)
        if numeric and not isinstance(self.value, int):
            raise TypeError(f"{self.kind.value} offsets need an integer value")
        if not numeric and self.value is not None:
            raise ValueError(f"{self.kind.value} offsets carry no value")

    @classmethod
    def beginning(cls) -> Offset:
        return cls(OffsetKind.BEGINNING)

    @classmethod
    def end(cls) -> Offset:
        return cls(OffsetKind.END)

    @classmethod
    def stored(cls) -> Offset:
        return cls(OffsetKind.STORED)

    @classmethod
    def invalid(cls) -> Offset:
        return cls(OffsetKind.INVALID)

    @classmethod
    def at(cls, value: int) -> Offset:
        """A specific offset; negative values cannot be represented."""
        return cls(OffsetKind.OFFSET, value)

    @classmethod
    def tail(cls, value: int) -> Offset:
        """An offset ``value`` messages before the end of the partition."""
        return cls(OffsetKind.OFFSET_TAIL, value)

    @classmethod
    def from_raw(cls, raw_offset: int) -> Offset:
        """Decode the integer form of an offset."""
        kind = _RAW_SPECIAL.get(raw_offset)
        if kind is not None:
            return cls(kind)
        if raw_offset <= OFFSET_TAIL_BASE:
            return cls.tail(-(raw_offset - OFFSET_TAIL_BASE))
        return cls.at(raw_offset)

    def to_raw(self) -> int | None:
        """The integer form of the offset, or None if it has none."""
        if self.kind in _SPECIAL_RAW:
            return _SPECIAL_RAW[self.kind]
        assert self.value is not None
        if self.kind is OffsetKind.OFFSET:
            return self.value if self.value >= 0 else None
        return OFFSET_TAIL_BASE - self.value if self.value > 0 else None

    def __repr__(self) -> str:
        if self.kind is OffsetKind.OFFSET:
            return f"Offset({self.value})"
        if self.kind is OffsetKind.OFFSET_TAIL:
            return f"OffsetTail({self.value})"
        return self.kind.name.capitalize()


def _check_topic(topic: str) -> str:
    if "\0" in topic:
        raise ValueError("topic name contains a NUL character")
    return topic


@dataclass(eq=False)
class TopicPartitionListElem:
    """One entry of a topic partition list."""

    topic: str
    partition: int
    _raw_offset: int = field(default=OFFSET_INVALID, repr=False)
    metadata: str = ""
    error: str | None = None

    @property
    def offset(self) -> Offset:
        return Offset.from_raw(self._raw_offset)

    def set_offset(self, offset: Offset) -> None:
        """Set the offset, refusing offsets that cannot be represented."""
        raw = offset.to_raw()
        if raw is None:
            raise SetPartitionOffsetError(INVALID_ARGUMENT)
        self._raw_offset = raw

    def check_error(self) -> None:
        """Raise the error attached to this entry, if any."""
        if self.error is not None:
            raise OffsetFetchError(self.error)

    def _copy(self) -> TopicPartitionListElem:
        return TopicPartitionListElem(
            self.topic, self.partition, self._raw_offset, self.metadata, self.error
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TopicPartitionListElem):
            return NotImplemented
        return (
            self.topic == other.topic
            and self.partition == other.partition
            and self._raw_offset == other._raw_offset
            and self.metadata == other.metadata
        )

    __hash__ = None  # type: ignore[assignment]


class TopicPartitionList:
    """An ordered list of topics and partitions with optional offsets."""

    def __init__(self, capacity: int = _DEFAULT_CAPACITY) -> None:
        if capacity < 0:
            raise ValueError("capacity cannot be negative")
        self._elems: list[TopicPartitionListElem] = []
        self._capacity = capacity

    @classmethod
    def from_topic_map(cls, topic_map: Mapping[tuple[str, int], Offset]) -> TopicPartitionList:
        """Build a list from a mapping of (topic, partition) to offset."""
        tpl = cls(len(topic_map))
        for (topic, partition), offset in topic_map.items():
            tpl.add_partition_offset(topic, partition, offset)
        return tpl

    def __len__(self) -> int:
        return len(self._elems)

    def __iter__(self) -> Iterator[TopicPartitionListElem]:
        return iter(self._elems)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TopicPartitionList):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(
            (found := other.find_partition(elem.topic, elem.partition)) is not None
            and elem == found
            for elem in self._elems
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        entries = "; ".join(
            f"{elem.topic}/{elem.partition}: offset={elem.offset!r} "
            f"metadata={elem.metadata!r}, error={elem.error!r}"
            for elem in self._elems
        )
        return f"TPL {{{entries}}}"

    def capacity(self) -> int:
        return self._capacity

    def copy(self) -> TopicPartitionList:
        """A deep copy of the list."""
        new = TopicPartitionList(self._capacity)
        new._elems = [elem._copy() for elem in self._elems]
        return new

    def _grow(self) -> None:
        add = 1
        if add < self._capacity:
            add = max(self._capacity, _MIN_GROWTH)
        self._capacity += add

    def add_topic_unassigned(self, topic: str) -> TopicPartitionListElem:
        """Add a topic with no partition assigned."""
        return self.add_partition(topic, PARTITION_UNASSIGNED)

    def add_partition(self, topic: str, partition: int) -> TopicPartitionListElem:
        """Append a topic and partition, returning the new entry."""
        elem = TopicPartitionListElem(_check_topic(topic), partition)
        if len(self._elems) >= self._capacity:
            self._grow()
        self._elems.append(elem)
        return elem

    def add_partition_range(self, topic: str, start_partition: int, stop_partition: int) -> None:
        """Add partitions ``start_partition`` to ``stop_partition``, both included."""
        for partition in range(start_partition, stop_partition + 1):
            self.add_partition(topic, partition)

    def set_partition_offset(self, topic: str, partition: int, offset: Offset) -> None:
        """Set the offset of an entry already in the list."""
        _check_topic(topic)
        if offset.to_raw() is None:
            raise SetPartitionOffsetError(INVALID_ARGUMENT)
        elem = self.find_partition(topic, partition)
        if elem is None:
            raise SetPartitionOffsetError(UNKNOWN_PARTITION)
        elem.set_offset(offset)

    def add_partition_offset(self, topic: str, partition: int, offset: Offset) -> None:
        """Add a topic and partition with the given offset."""
        self.add_partition(topic, partition)
        self.set_partition_offset(topic, partition, offset)

    def find_partition(self, topic: str, partition: int) -> TopicPartitionListElem | None:
        """The first entry for the topic and partition, or None."""
        _check_topic(topic)
        return next(
            (e for e in self._elems if e.topic == topic and e.partition == partition),
            None,
        )

    def set_all_offsets(self, offset: Offset) -> None:
        """Set every entry to the same offset."""
        for elem in self._elems:
            elem.set_offset(offset)

    def elements(self) -> list[TopicPartitionListElem]:
        return list(self._elems)

    def elements_for_topic(self, topic: str) -> list[TopicPartitionListElem]:
        return [elem for elem in self._elems if elem.topic == topic]

    def to_topic_map(self) -> dict[tuple[str, int], Offset]:
        """A mapping of (topic, partition) to offset."""
        return {(elem.topic, elem.partition): elem.offset for elem in self._elems}