"""Matcher protocol, failure records and the boolean combinators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class MatcherResult:
    """Describes why a matcher did (or did not) accept a value."""

    actual: Any = None
    message: str = ""
    expected: Any = None
    missing_elements: Any = None
    found_elements: Any = None
    extra_elements: Any = None
    transformer_chain: list = field(default_factory=list)
    untransformed_value: Any = None


class GossMatcher(ABC):
    """A test assertion that can be applied to an actual value."""

    @abstractmethod
    def match(self, actual: Any) -> bool:
        """Return whether ``actual`` satisfies the matcher; raise on bad input."""

    @abstractmethod
    def failure_result(self, actual: Any) -> MatcherResult:
        """Describe a failed positive match."""

    @abstractmethod
    def negated_failure_result(self, actual: Any) -> MatcherResult:
        """Describe a failed negated match."""

    @abstractmethod
    def to_json(self) -> Any:
        """Return the JSON-compatible form of the matcher."""


def to_jsonable(value: Any) -> Any:
    """Convert matchers, results and containers into JSON-compatible data."""
    if isinstance(value, MatcherResult):
        chain = [to_jsonable(t) for t in value.transformer_chain]
        return {
            "actual": to_jsonable(value.actual),
            "message": value.message,
            "expected": to_jsonable(value.expected),
            "missing-elements": to_jsonable(value.missing_elements),
            "found-elements": to_jsonable(value.found_elements),
            "extra-elements": to_jsonable(value.extra_elements),
            "transform-chain": chain or None,
            "untransformed-value": to_jsonable(value.untransformed_value),
        }
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return to_jsonable(to_json())
    if isinstance(value, Mapping):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


@dataclass
class AndMatcher(GossMatcher):
    """Succeeds when every inner matcher succeeds."""

    matchers: list
    _first_failed: GossMatcher | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def match(self, actual: Any) -> bool:
        self._first_failed = None
        for matcher in self.matchers:
            try:
                success = matcher.match(actual)
            except Exception:
                self._first_failed = matcher
                raise
            if not success:
                self._first_failed = matcher
                return False
        return True

    def failure_result(self, actual: Any) -> MatcherResult:
        if self._first_failed is None:
            raise RuntimeError("no inner matcher has failed")
        return self._first_failed.failure_result(actual)

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(
            actual=actual,
            message="not to satisfy all of these matchers",
            expected=self.matchers,
        )

    def to_json(self) -> Any:
        if len(self.matchers) == 1:
            return to_jsonable(self.matchers[0])
        return {"and": to_jsonable(self.matchers)}


@dataclass
class OrMatcher(GossMatcher):
    """Succeeds when at least one inner matcher succeeds."""

    matchers: list
    _first_successful: GossMatcher | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def match(self, actual: Any) -> bool:
        self._first_successful = None
        for matcher in self.matchers:
            if matcher.match(actual):
                self._first_successful = matcher
                return True
        return False

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(
            actual=actual,
            message="to satisfy at least one of these matchers",
            expected=self.matchers,
        )

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        if self._first_successful is None:
            raise RuntimeError("no inner matcher has succeeded")
        return self._first_successful.negated_failure_result(actual)

    def to_json(self) -> Any:
        return {"or": to_jsonable(self.matchers)}


@dataclass
class NotMatcher(GossMatcher):
    """Inverts the outcome of an inner matcher."""

    matcher: GossMatcher

    def match(self, actual: Any) -> bool:
        return not self.matcher.match(actual)

    def failure_result(self, actual: Any) -> MatcherResult:
        return self.matcher.negated_failure_result(actual)

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return self.matcher.failure_result(actual)

    def to_json(self) -> Any:
        return {"not": to_jsonable(self.matcher)}


def all_of(*args: GossMatcher) -> AndMatcher:
    """Combine matchers so that all must succeed."""
    return AndMatcher(list(args))


def any_of(*args: GossMatcher) -> OrMatcher:
    """Combine matchers so that one must succeed."""
    return OrMatcher(list(args))


def not_(matcher: GossMatcher) -> NotMatcher:
    """Negate a matcher."""
    return NotMatcher(matcher)