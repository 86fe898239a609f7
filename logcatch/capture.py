from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar, overload

from loguru import logger

from logcatch.levels import Level
from logcatch.matchers import as_matcher
from logcatch.record import EventRecord


if TYPE_CHECKING:
    import types
    from collections.abc import Callable, Iterable, Iterator

    import loguru

    from logcatch.matchers import StringMatcher

__all__ = ["CaptureIterator", "EventCapture", "UnsupportedOperationError", "capture"]


class UnsupportedOperationError(TypeError):
    """Raised on any attempt to modify a capture through its read-only list interface."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"EventCapture is read-only: '{operation}' is not supported")
        self.operation = operation


class _StdlibBridge(logging.Handler):
    """Deliver standard ``logging`` records straight to a capture."""

    def __init__(self, target: EventCapture) -> None:
        super().__init__(level=logging.NOTSET)
        self.target = target

    def emit(self, record: logging.LogRecord) -> None:
        error = record.exc_info[1] if record.exc_info else None
        self.target.receive(
            int(record.created * 1000),
            record.name,
            Level.of(record.levelno),
            record.getMessage() if record.args else record.msg,
            error,
        )


class _BridgeState:
    """Root-logger bookkeeping shared by every capture with a stdlib bridge."""

    lock: ClassVar[threading.Lock] = threading.Lock()
    installed: int = 0
    saved_root_level: int | None = None


_bridges = _BridgeState()


class EventCapture(Sequence[EventRecord]):
    """Collect log events while active, and answer questions about them.

    The capture attaches to loguru as soon as it is created and detaches on :meth:`close` (or at the end of a
    ``with`` block). Only events whose origin passes the filter are kept. Callers can read the captured
    records like a list, but any attempt to modify it raises :class:`UnsupportedOperationError`.

    The origin of a loguru event is the module that logged it, unless the logger was bound with
    ``logger.bind(origin="...")``.
    """

    def __init__(
        self,
        origin: str | type | types.ModuleType | StringMatcher | Callable[[str], bool] | None = None,
        *,
        capture_stdlib: bool = False,
    ) -> None:
        self._records: list[EventRecord] = []
        self._lock = threading.Lock()
        self._matcher: StringMatcher | None = as_matcher(origin)
        self._active = True

        self._bridge: _StdlibBridge | None = None

        logger.debug("Attaching event capture (origin filter: {})", self._matcher)
        self._handler_id: int | None = logger.add(self._sink, level=0, format="{message}", catch=False)

        if capture_stdlib:
            self._install_stdlib_bridge()

    def _install_stdlib_bridge(self) -> None:
        root = logging.getLogger()
        self._bridge = _StdlibBridge(self)
        with _bridges.lock:
            if _bridges.installed == 0:
                _bridges.saved_root_level = root.level
                root.setLevel(logging.NOTSET)
            _bridges.installed += 1
            root.addHandler(self._bridge)

    def _remove_stdlib_bridge(self) -> None:
        if self._bridge is None:
            return
        root = logging.getLogger()
        with _bridges.lock:
            root.removeHandler(self._bridge)
            _bridges.installed -= 1
            # The root level goes back only once the last bridge is gone
            if _bridges.installed == 0 and _bridges.saved_root_level is not None:
                root.setLevel(_bridges.saved_root_level)
                _bridges.saved_root_level = None
        self._bridge = None

    def _sink(self, message: loguru.Message) -> None:
        record = message.record
        exception = record["exception"]
        self.receive(
            int(record["time"].timestamp() * 1000),
            record["extra"].get("origin") or record["name"] or "",
            Level.of(record["level"].no),
            record["message"],
            exception.value if exception is not None else None,
        )

    def receive(
        self,
        timestamp: int,
        origin: str,
        level: Level,
        message: object,
        error: BaseException | None = None,
    ) -> None:
        """Store the event if the capture is active and its origin passes the filter."""
        if not self._active:
            return
        if self._matcher is not None and not self._matcher.match(origin):
            return

        record = EventRecord(timestamp, origin, level, message, error)
        with self._lock:
            self._records.append(record)

    # Lifecycle

    @property
    def active(self) -> bool:
        return self._active

    def close(self) -> None:
        """Stop receiving events. Closing twice is harmless."""
        if not self._active:
            return
        self._active = False

        if self._handler_id is not None:
            try:
                logger.remove(self._handler_id)
            except ValueError:
                # Someone already called logger.remove() for every sink
                logger.debug("Event capture sink {} was already removed", self._handler_id)
            self._handler_id = None
        self._remove_stdlib_bridge()

        logger.debug("Detached event capture holding {} record(s)", len(self))

    def __enter__(self) -> EventCapture:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Queries

    def size(self) -> int:
        return len(self)

    def snapshot(self) -> list[EventRecord]:
        """Independent copy of the records captured so far."""
        with self._lock:
            return list(self._records)

    def records(self, level: Level | int | str | None = None) -> list[EventRecord]:
        if level is None:
            return self.snapshot()
        level = Level.of(level)
        return [r for r in self.snapshot() if r.level == level]

    def has_level(self, level: Level | int | str, message: object) -> bool:
        level = Level.of(level)
        return any(r.level == level and r.message == message for r in self.snapshot())

    def has_level_containing(self, level: Level | int | str, content: str) -> bool:
        level = Level.of(level)
        return any(r.level == level and content in r.message_string for r in self.snapshot())

    def has_trace(self, message: object) -> bool:
        return self.has_level(Level.TRACE, message)

    def has_debug(self, message: object) -> bool:
        return self.has_level(Level.DEBUG, message)

    def has_info(self, message: object) -> bool:
        return self.has_level(Level.INFO, message)

    def has_warn(self, message: object) -> bool:
        return self.has_level(Level.WARN, message)

    def has_error(self, message: object) -> bool:
        return self.has_level(Level.ERROR, message)

    def has_trace_containing(self, content: str) -> bool:
        return self.has_level_containing(Level.TRACE, content)

    def has_debug_containing(self, content: str) -> bool:
        return self.has_level_containing(Level.DEBUG, content)

    def has_info_containing(self, content: str) -> bool:
        return self.has_level_containing(Level.INFO, content)

    def has_warn_containing(self, content: str) -> bool:
        return self.has_level_containing(Level.WARN, content)

    def has_error_containing(self, content: str) -> bool:
        return self.has_level_containing(Level.ERROR, content)

    # Read-only sequence

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    @overload
    def __getitem__(self, index: int) -> EventRecord: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[EventRecord, ...]: ...

    def __getitem__(self, index: int | slice) -> EventRecord | tuple[EventRecord, ...]:
        with self._lock:
            if isinstance(index, slice):
                return tuple(self._records[index])
            try:
                return self._records[index]
            except IndexError:
                raise IndexError(f"Index {index} out of range for capture of size {len(self._records)}") from None

    def __iter__(self) -> Iterator[EventRecord]:
        return iter(self.snapshot())

    def __reversed__(self) -> Iterator[EventRecord]:
        return reversed(self.snapshot())

    def __contains__(self, value: object) -> bool:
        return value in self.snapshot()

    def index(self, value: object, start: int = 0, stop: int | None = None) -> int:
        records = self.snapshot()
        return records.index(value, start, len(records) if stop is None else stop)

    def last_index(self, value: object) -> int:
        records = self.snapshot()
        for i in range(len(records) - 1, -1, -1):
            if records[i] == value:
                return i
        raise ValueError(f"{value!r} is not in capture")

    def count(self, value: object) -> int:
        return self.snapshot().count(value)

    def list_iterator(self, index: int = 0) -> CaptureIterator:
        return CaptureIterator(self, index)

    def __repr__(self) -> str:
        state = "active" if self._active else "closed"
        return f"<EventCapture {state} filter={self._matcher!r} records={len(self)}>"

    # Every mutation is refused

    def append(self, record: EventRecord) -> None:
        raise UnsupportedOperationError("append")

    def extend(self, records: Iterable[EventRecord]) -> None:
        raise UnsupportedOperationError("extend")

    def insert(self, index: int, record: EventRecord) -> None:
        raise UnsupportedOperationError("insert")

    def remove(self, record: EventRecord) -> None:
        raise UnsupportedOperationError("remove")

    def pop(self, index: int = -1) -> EventRecord:
        raise UnsupportedOperationError("pop")

    def clear(self) -> None:
        raise UnsupportedOperationError("clear")

    def __setitem__(self, index: int | slice, value: object) -> None:
        raise UnsupportedOperationError("__setitem__")

    def __delitem__(self, index: int | slice) -> None:
        raise UnsupportedOperationError("__delitem__")

    def __iadd__(self, other: Iterable[EventRecord]) -> EventCapture:
        raise UnsupportedOperationError("__iadd__")


class CaptureIterator:
    """Cursor over a capture that can move in both directions.

    The cursor sits between elements: ``next()`` returns the element after it, ``previous()`` the one before.
    """

    def __init__(self, source: Sequence[EventRecord], index: int = 0) -> None:
        size = len(source)
        if not 0 <= index <= size:
            raise IndexError(f"Index {index} beyond end of capture of size {size}")
        self._source = source
        self._index = index

    def has_next(self) -> bool:
        return self._index < len(self._source)

    def next(self) -> EventRecord:
        if not self.has_next():
            raise StopIteration(self._index)
        record = self._source[self._index]
        self._index += 1
        return record

    def has_previous(self) -> bool:
        return self._index > 0

    def previous(self) -> EventRecord:
        if not self.has_previous():
            raise StopIteration(self._index)
        self._index -= 1
        return self._source[self._index]

    def next_index(self) -> int:
        return self._index

    def previous_index(self) -> int:
        return self._index - 1

    def __iter__(self) -> CaptureIterator:
        return self

    def __next__(self) -> EventRecord:
        return self.next()

    def remove(self) -> None:
        raise UnsupportedOperationError("remove")

    def set(self, record: EventRecord) -> None:
        raise UnsupportedOperationError("set")

    def add(self, record: EventRecord) -> None:
        raise UnsupportedOperationError("add")


def capture(
    origin: str | type | types.ModuleType | StringMatcher | Callable[[str], bool] | None = None,
    *,
    capture_stdlib: bool = False,
) -> EventCapture:
    """Start capturing events; use the result as a context manager to bound the capture to a block."""
    return EventCapture(origin, capture_stdlib=capture_stdlib)
