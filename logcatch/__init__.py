from __future__ import annotations

from loguru import logger

from logcatch.capture import CaptureIterator, EventCapture, UnsupportedOperationError, capture
from logcatch.levels import Level
from logcatch.matchers import ExactMatcher, PredicateMatcher, StringMatcher, WildcardMatcher
from logcatch.record import EventRecord, set_default_timezone


__all__ = [
    "CaptureIterator",
    "EventCapture",
    "EventRecord",
    "ExactMatcher",
    "Level",
    "PredicateMatcher",
    "StringMatcher",
    "UnsupportedOperationError",
    "WildcardMatcher",
    "capture",
    "logger",
    "set_default_timezone",
]

# Library diagnostics stay quiet unless the application calls logger.enable("logcatch")
logger.disable("logcatch")
