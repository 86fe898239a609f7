from collections.abc import Generator, Sequence

import pytest
from loguru import logger

from logcatch import CaptureIterator, EventCapture, EventRecord, Level, UnsupportedOperationError


@pytest.fixture
def captured() -> Generator[EventCapture, None, None]:
    with EventCapture() as sut:
        logger.info("one")
        logger.warning("two")
        logger.info("three")
        yield sut


def test_is_a_sequence(captured):
    assert isinstance(captured, Sequence)
    assert len(captured) == 3
    assert [r.message for r in captured] == ["one", "two", "three"]
    assert [r.message for r in reversed(captured)] == ["three", "two", "one"]


def test_indexing(captured):
    assert captured[0].message == "one"
    assert captured[-1].message == "three"


def test_index_out_of_range(captured):
    with pytest.raises(IndexError, match="Index 3 out of range for capture of size 3"):
        _ = captured[3]


def test_slice_is_read_only(captured):
    sub = captured[1:3]
    assert isinstance(sub, tuple)
    assert [r.message for r in sub] == ["two", "three"]


def test_contains_and_index(captured):
    first = captured[0]
    assert first in captured
    assert captured.index(first) == 0
    assert captured.last_index(first) == 0
    assert captured.count(first) == 1
    assert EventRecord(0, "nowhere", Level.INFO, "one") not in captured


def test_first_and_last_index_of_duplicates():
    with EventCapture() as captured:
        captured.receive(7, "x", Level.INFO, "same")
        captured.receive(8, "x", Level.INFO, "other")
        captured.receive(7, "x", Level.INFO, "same")

    record = EventRecord(7, "x", Level.INFO, "same")
    assert captured.index(record) == 0
    assert captured.last_index(record) == 2
    assert captured.count(record) == 2


def test_index_of_missing_record(captured):
    missing = EventRecord(0, "nowhere", Level.INFO, "one")
    with pytest.raises(ValueError):
        captured.index(missing)
    with pytest.raises(ValueError, match="is not in capture"):
        captured.last_index(missing)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda c: c.remove(c[0]),
        lambda c: c.append(c[0]),
        lambda c: c.extend([c[0]]),
        lambda c: c.insert(0, c[0]),
        lambda c: c.pop(),
        lambda c: c.clear(),
        lambda c: c.__setitem__(0, c[1]),
        lambda c: c.__delitem__(0),
        lambda c: c.__iadd__([c[0]]),
    ],
)
def test_mutations_are_rejected(captured, mutate):
    before = captured.snapshot()

    with pytest.raises(UnsupportedOperationError):
        mutate(captured)

    assert captured.size() == 3
    assert captured.snapshot() == before


def test_item_syntax_is_rejected(captured):
    with pytest.raises(TypeError):
        captured[0] = captured[1]
    with pytest.raises(TypeError):
        del captured[0]
    assert captured.size() == 3


def test_unsupported_operation_names_the_operation(captured):
    with pytest.raises(UnsupportedOperationError, match="'remove' is not supported") as exc_info:
        captured.remove(captured[0])
    assert exc_info.value.operation == "remove"


def test_iterator_walks_both_ways(captured):
    it = captured.list_iterator()
    assert it.has_previous() is False
    assert it.next_index() == 0
    assert it.previous_index() == -1

    assert it.next().message == "one"
    assert next(it).message == "two"
    assert it.previous().message == "two"
    assert it.previous().message == "one"

    with pytest.raises(StopIteration):
        it.previous()


def test_iterator_from_end(captured):
    it = captured.list_iterator(captured.size())
    assert it.has_previous() is True
    assert it.has_next() is False

    with pytest.raises(StopIteration):
        it.next()

    assert it.previous().message == "three"


def test_iterator_in_for_loop(captured):
    assert [r.message for r in captured.list_iterator(1)] == ["two", "three"]


@pytest.mark.parametrize("index", [-1, 4])
def test_iterator_index_checked_on_construction(captured, index):
    with pytest.raises(IndexError, match=f"Index {index} beyond end of capture of size 3"):
        captured.list_iterator(index)


def test_iterator_rejects_mutation(captured):
    it = captured.list_iterator()
    it.next()
    with pytest.raises(UnsupportedOperationError):
        it.remove()
    with pytest.raises(UnsupportedOperationError):
        it.set(captured[1])
    with pytest.raises(UnsupportedOperationError):
        it.add(captured[1])
    assert captured.size() == 3


def test_iterator_over_plain_sequence():
    it = CaptureIterator([])
    assert it.has_next() is False
    assert it.has_previous() is False
