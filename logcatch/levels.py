from __future__ import annotations

from enum import IntEnum

import loguru._logger
from loguru import logger


__all__ = ["Level"]


class Level(IntEnum):
    """Severity tiers of a captured event, numbered like loguru's own levels."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def of(cls, value: Level | int | str | loguru.Level) -> Level:
        """Fold a loguru/stdlib level (number, name or ``loguru.Level``) into one of the five tiers.

        Numbers map onto the highest tier not above them, so SUCCESS becomes INFO and CRITICAL becomes ERROR.
        """
        if isinstance(value, Level):
            return value
        if isinstance(value, int):
            no = value
        elif isinstance(value, str):
            name = value.upper()
            if name == "WARN":
                return cls.WARN
            no = logger.level(name).no
        elif isinstance(value, loguru._logger.Level):
            no = value.no
        else:
            raise TypeError(f"'{value}' is {type(value)}, expecting int/str/Level")

        found = cls.TRACE
        for tier in cls:
            if tier.value <= no:
                found = tier
        return found

    def __str__(self) -> str:
        return self.name
