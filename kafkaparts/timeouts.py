"""Timeouts, deadlines, epoch helpers and a pluggable async runtime."""

from __future__ import annotations

import abc
import asyncio
import functools
import time as _time
from collections.abc import Awaitable, Coroutine
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Union

__all__ = [
    "AsyncRuntime",
    "AsyncioRuntime",
    "Deadline",
    "Timeout",
    "current_time_millis",
    "millis_to_epoch",
]

DurationLike = Union[timedelta, int, float]

_ONE_MILLI = timedelta(milliseconds=1)
_I32_MAX = 2**31 - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _to_timedelta(duration: DurationLike) -> timedelta:
    """Normalise a duration given as a timedelta or as seconds."""
    if isinstance(duration, bool):
        raise TypeError("a duration cannot be a bool")
    if isinstance(duration, timedelta):
        result = duration
    elif isinstance(duration, (int, float)):
        result = timedelta(seconds=duration)
    else:
        raise TypeError(f"expected a timedelta or seconds, got {type(duration).__name__}")
    if result < timedelta(0):
        raise ValueError("durations cannot be negative")
    return result


def _wrap_i32(value: int) -> int:
    """Truncate an integer to a signed 32-bit value."""
    return ((value + 2**31) % 2**32) - 2**31


@functools.total_ordering
@dataclass(frozen=True, eq=True)
class Timeout:
    """A timeout for a Kafka operation: a duration, or ``None`` to block forever."""

    duration: timedelta | None = None

    def __post_init__(self) -> None:
        if self.duration is not None:
            object.__setattr__(self, "duration", _to_timedelta(self.duration))

    @classmethod
    def after(cls, duration: DurationLike) -> Timeout:
        """Time out after ``duration`` elapses."""
        return cls(_to_timedelta(duration))

    @classmethod
    def never(cls) -> Timeout:
        """Block forever."""
        return cls(None)

    @classmethod
    def from_duration(cls, duration: DurationLike | None) -> Timeout:
        """Build a timeout from an optional duration; ``None`` means never."""
        return cls.never() if duration is None else cls.after(duration)

    @property
    def is_never(self) -> bool:
        return self.duration is None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Timeout):
            return NotImplemented
        if self.duration is None:
            return False
        if other.duration is None:
            return True
        return self.duration < other.duration

    def as_millis(self) -> int:
        """Milliseconds as a signed 32-bit value; ``-1`` means never."""
        if self.duration is None:
            return -1
        return _wrap_i32(self.duration // _ONE_MILLI)

    def saturating_sub(self, rhs: DurationLike) -> Timeout:
        """Subtract a duration, stopping at zero."""
        if self.duration is None:
            return self
        remaining = self.duration - _to_timedelta(rhs)
        return Timeout(max(remaining, timedelta(0)))

    def is_zero(self) -> bool:
        """True if the timeout is a zero duration."""
        return self.duration is not None and self.duration == timedelta(0)

    def __sub__(self, other: object) -> Timeout:
        if not isinstance(other, Timeout):
            return NotImplemented
        if other.duration is None:
            raise ValueError("subtraction of a never-ending timeout is ill-defined")
        if self.duration is None:
            return self
        remaining = self.duration - other.duration
        if remaining < timedelta(0):
            raise ValueError("overflow when subtracting timeouts")
        return Timeout(remaining)


class Deadline:
    """A point in time after which an operation should give up."""

    # The flush interface takes a signed 32-bit millisecond timeout.
    MAX_FLUSH_DURATION = timedelta(milliseconds=_I32_MAX)

    def __init__(self, duration: DurationLike | None) -> None:
        if duration is None:
            self._at: float | None = None
        else:
            self._at = _time.monotonic() + _to_timedelta(duration).total_seconds()

    @classmethod
    def from_timeout(cls, timeout: Timeout) -> Deadline:
        return cls(timeout.duration)

    @property
    def is_never(self) -> bool:
        return self._at is None

    def remaining(self) -> timedelta:
        """Time left until the deadline, never negative."""
        if self._at is None:
            return timedelta.max
        return timedelta(seconds=max(0.0, self._at - _time.monotonic()))

    def remaining_millis_i32(self) -> int:
        """Remaining milliseconds, capped to fit a signed 32-bit value."""
        return min(self.MAX_FLUSH_DURATION, self.remaining()) // _ONE_MILLI

    def elapsed(self) -> bool:
        return self.remaining() <= timedelta(0)

    def to_timeout(self) -> Timeout:
        if self._at is None:
            return Timeout.never()
        return Timeout.after(self.remaining())

    def __repr__(self) -> str:
        if self._at is None:
            return "Deadline(never)"
        return f"Deadline(remaining={self.remaining()!r})"


def millis_to_epoch(time: datetime) -> int:
    """Milliseconds since the Unix epoch; times before the epoch give 0.

    Naive datetimes are taken to be in local time.
    """
    if time.tzinfo is None:
        time = time.astimezone()
    delta = time - _EPOCH
    if delta < timedelta(0):
        return 0
    return delta // _ONE_MILLI


def current_time_millis() -> int:
    """The current time in milliseconds since the Unix epoch."""
    return _time.time_ns() // 1_000_000


class AsyncRuntime(abc.ABC):
    """An asynchronous runtime that can spawn tasks and sleep."""

    @abc.abstractmethod
    def spawn(self, task: Coroutine[Any, Any, Any]) -> Any:
        """Run ``task`` in the background until it completes."""

    @abc.abstractmethod
    def delay_for(self, duration: DurationLike) -> Awaitable[None]:
        """Return an awaitable that completes after ``duration``."""


class AsyncioRuntime(AsyncRuntime):
    """The default runtime, backed by asyncio."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def spawn(self, task: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        spawned = asyncio.ensure_future(task)
        self._tasks.add(spawned)
        spawned.add_done_callback(self._tasks.discard)
        return spawned

    def delay_for(self, duration: DurationLike) -> Awaitable[None]:
        return asyncio.sleep(_to_timedelta(duration).total_seconds())