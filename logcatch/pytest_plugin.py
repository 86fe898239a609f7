"""Pytest plugin providing logcatch fixtures.

The plugin is automatically loaded by pytest when logcatch is installed,
thanks to the pytest11 entry point defined in pyproject.toml.

``log_capture`` records every loguru event emitted during the test::

    def test_signup(log_capture):
        create_account("wombat")
        assert log_capture.has_info("Account created")

``log_capture_factory`` builds filtered captures; all of them are closed at teardown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from logcatch.capture import EventCapture


if TYPE_CHECKING:
    from collections.abc import Callable, Generator


@pytest.fixture
def log_capture() -> Generator[EventCapture, None, None]:
    """Capture of all loguru events emitted while the test runs."""
    with EventCapture() as captured:
        yield captured


@pytest.fixture
def log_capture_factory() -> Generator[Callable[..., EventCapture], None, None]:
    """Factory with the signature of :class:`EventCapture`; every capture it makes is closed at teardown."""
    created: list[EventCapture] = []

    def _factory(*args: object, **kwargs: object) -> EventCapture:
        captured = EventCapture(*args, **kwargs)
        created.append(captured)
        return captured

    try:
        yield _factory
    finally:
        for captured in reversed(created):
            captured.close()
