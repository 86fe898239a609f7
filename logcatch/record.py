from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, tzinfo
from functools import cached_property
from typing import Final
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from logcatch.levels import Level


__all__ = ["DEFAULT_TIMEZONE", "EventRecord", "set_default_timezone"]


def _timezone_from_environment() -> tzinfo | None:
    name = os.environ.get("LOGCATCH_TIMEZONE", "").strip()
    if not name:
        return None  # Local time
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"LOGCATCH_TIMEZONE: unknown time zone {name!r}") from e


DEFAULT_TIMEZONE: Final[tzinfo | None] = _timezone_from_environment()


class _Settings:
    """Container for the rendering defaults to avoid module-level globals."""

    timezone: tzinfo | None = DEFAULT_TIMEZONE


_settings = _Settings()


def set_default_timezone(tz: tzinfo | None) -> None:
    """Set the time zone :meth:`EventRecord.render` uses when none is given (``None`` means local time)."""
    if tz is not None and not isinstance(tz, tzinfo):
        raise TypeError(f"'{tz}' is {type(tz)}, expecting tzinfo or None")
    _settings.timezone = tz


@dataclass(frozen=True)
class EventRecord:
    """One captured log event.

    Records compare (and hash) on all five fields. ``message`` can be any object; its string form is only
    computed when asked for, and then remembered.
    """

    timestamp: int
    origin: str
    level: Level
    message: object
    error: BaseException | None = None

    @cached_property
    def message_string(self) -> str:
        return "" if self.message is None else str(self.message)

    def render(self, separator: str = " ", tz: tzinfo | None = None) -> str:
        """Format as ``HH:MM:SS.mmm origin LEVEL message [ErrorType error-text]``."""
        if tz is None:
            tz = _settings.timezone

        seconds, millis = divmod(self.timestamp, 1000)
        when = datetime.fromtimestamp(seconds, tz)

        parts = [
            f"{when:%H:%M:%S}.{millis:03d}",
            self.origin,
            self.level.name,
            self.message_string,
        ]
        if self.error is not None:
            parts += [type(self.error).__name__, str(self.error)]
        return separator.join(parts)

    def __str__(self) -> str:
        return self.render()
