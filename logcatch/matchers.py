"""Origin filters for :class:`logcatch.EventCapture`.

A capture only needs something with a ``match(candidate) -> bool`` method. The helpers here cover the usual
cases: an exact name, a shell-style wildcard and an arbitrary predicate.
"""

from __future__ import annotations

import fnmatch
import types
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["ExactMatcher", "PredicateMatcher", "StringMatcher", "WildcardMatcher", "as_matcher", "canonical_name"]


@runtime_checkable
class StringMatcher(Protocol):
    def match(self, candidate: str) -> bool: ...


class ExactMatcher:
    def __init__(self, text: str) -> None:
        self.text = text

    def match(self, candidate: str) -> bool:
        return candidate == self.text

    def __repr__(self) -> str:
        return f"ExactMatcher({self.text!r})"


class WildcardMatcher:
    """Case-sensitive match of the whole candidate against ``*``, ``?`` and ``[...]`` patterns."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern

    def match(self, candidate: str) -> bool:
        return fnmatch.fnmatchcase(candidate, self.pattern)

    def __repr__(self) -> str:
        return f"WildcardMatcher({self.pattern!r})"


class PredicateMatcher:
    def __init__(self, predicate: Callable[[str], bool]) -> None:
        self.predicate = predicate

    def match(self, candidate: str) -> bool:
        return bool(self.predicate(candidate))

    def __repr__(self) -> str:
        return f"PredicateMatcher({self.predicate!r})"


def canonical_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def as_matcher(
    value: str | type | types.ModuleType | StringMatcher | Callable[[str], bool] | None,
) -> StringMatcher | None:
    """Turn an origin filter specification into a matcher (``None`` means: accept every origin)."""
    if value is None:
        return None
    if isinstance(value, str):
        return ExactMatcher(value)
    if isinstance(value, type):
        return ExactMatcher(canonical_name(value))
    if isinstance(value, types.ModuleType):
        return ExactMatcher(value.__name__)
    if isinstance(value, StringMatcher):
        return value
    if callable(value):
        return PredicateMatcher(value)
    raise TypeError(f"'{value}' is {type(value)}, expecting str/type/module/StringMatcher/callable")
