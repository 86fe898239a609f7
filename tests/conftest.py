from collections.abc import Generator

import pytest
from loguru import logger

from logcatch import record as record_module


pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def silence_logger() -> Generator[None, None, None]:
    logger.remove()  # Silence any output
    try:
        yield
    finally:
        logger.remove()  # And restore any handlers we added


@pytest.fixture(autouse=True)
def restore_default_timezone() -> Generator[None, None, None]:
    original = record_module._settings.timezone
    try:
        yield
    finally:
        record_module._settings.timezone = original


class Shouty:
    """Message object with a custom string form that counts how often it is converted."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.conversions = 0

    def __str__(self) -> str:
        self.conversions += 1
        return self.text.upper()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Shouty) and other.text == self.text

    def __hash__(self) -> int:
        return hash(self.text)


@pytest.fixture
def shouty() -> Shouty:
    return Shouty("quiet please")
