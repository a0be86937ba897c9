"""Value, string, collection and numeric matchers."""

from __future__ import annotations

import operator
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sysgoss.matchers.core import GossMatcher, MatcherResult, to_jsonable

_COMPARATORS = {
    "gt": ">",
    "ge": ">=",
    "lt": "<",
    "le": "<=",
    "eq": "==",
}

_OPERATIONS = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "==": operator.eq,
}


def _format_object(obj: Any) -> str:
    return f"\n    <{type(obj).__name__}>: {obj!r}"


def _deep_equal(left: Any, right: Any) -> bool:
    if type(left) is not type(right):
        return False
    if isinstance(left, dict):
        return left.keys() == right.keys() and all(
            _deep_equal(value, right[key]) for key, value in left.items()
        )
    if isinstance(left, (list, tuple)):
        return len(left) == len(right) and all(
            _deep_equal(a, b) for a, b in zip(left, right)
        )
    return left == right


def _as_string(actual: Any, name: str) -> str:
    if isinstance(actual, str):
        return actual
    if isinstance(actual, (bytes, bytearray)):
        return bytes(actual).decode()
    raise TypeError(f"{name} matcher requires a string or stringer.  Got:{_format_object(actual)}")


def _formatted(text: str, args: tuple) -> str:
    return text % args if args else text


def _collection_values(actual: Any, name: str) -> list:
    if isinstance(actual, Mapping):
        return list(actual.values())
    if isinstance(actual, (list, tuple, set, frozenset)):
        return list(actual)
    raise TypeError(f"{name} matcher expects an array/slice/map.  Got:{_format_object(actual)}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _flatten(elements: tuple) -> list:
    if len(elements) == 1 and isinstance(elements[0], (list, tuple)):
        return list(elements[0])
    return list(elements)


def _as_matcher(element: Any) -> GossMatcher:
    return element if isinstance(element, GossMatcher) else EqualMatcher(element)


def _as_element(matcher: GossMatcher) -> Any:
    return matcher.expected if isinstance(matcher, EqualMatcher) else matcher


def _accepts(matcher: GossMatcher, value: Any) -> bool:
    try:
        return matcher.match(value)
    except (TypeError, ValueError):
        return False


def _unmatched(values: list, matchers: list) -> tuple[list, list]:
    """Return the values and matchers left free by a maximum bipartite matching."""
    neighbours = [
        [j for j, matcher in enumerate(matchers) if _accepts(matcher, value)]
        for value in values
    ]
    owner: dict[int, int] = {}

    def assign(value_index: int, seen: set) -> bool:
        for matcher_index in neighbours[value_index]:
            if matcher_index in seen:
                continue
            seen.add(matcher_index)
            if matcher_index not in owner or assign(owner[matcher_index], seen):
                owner[matcher_index] = value_index
                return True
        return False

    for value_index in range(len(values)):
        assign(value_index, set())
    used_values = set(owner.values())
    free_values = [v for i, v in enumerate(values) if i not in used_values]
    free_matchers = [m for j, m in enumerate(matchers) if j not in owner]
    return free_values, free_matchers


@dataclass
class EqualMatcher(GossMatcher):
    """Succeeds when the actual value deeply equals the expected one."""

    expected: Any

    def match(self, actual: Any) -> bool:
        if actual is None and self.expected is None:
            raise ValueError(
                "Refusing to compare <nil> to <nil>.\nBe explicit and use BeNil() instead.  "
                "This is to avoid mistakes where both sides of an assertion are erroneously uninitialized."
            )
        return _deep_equal(actual, self.expected)

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="to equal", expected=self.expected)

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="not to equal", expected=self.expected)

    def to_json(self) -> Any:
        return to_jsonable(self.expected)


@dataclass
class HaveKeyMatcher(GossMatcher):
    """Succeeds when a mapping has a key equal to, or matched by, ``key``."""

    key: Any

    def match(self, actual: Any) -> bool:
        if not isinstance(actual, Mapping):
            raise TypeError(f"HaveKey matcher expects a map.  Got:{_format_object(actual)}")
        key_matcher = _as_matcher(self.key)
        for candidate in actual:
            try:
                if key_matcher.match(candidate):
                    return True
            except (TypeError, ValueError) as exc:
                raise ValueError(f"HaveKey's key matcher failed with:\n    {exc}") from exc
        return False

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="to have key matching", expected=self.key)

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="not to have key matching", expected=self.key)

    def to_json(self) -> Any:
        return {"have-key": to_jsonable(self.key)}


@dataclass
class HaveLenMatcher(GossMatcher):
    """Succeeds when the actual value has exactly ``count`` items."""

    count: int

    def match(self, actual: Any) -> bool:
        if not isinstance(actual, (str, bytes, bytearray, list, tuple, Mapping, set, frozenset)):
            raise TypeError(
                f"HaveLen matcher expects a string/array/map/channel/slice.  Got:{_format_object(actual)}"
            )
        return len(actual) == self.count

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="to have length", expected=self.count)

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="not to have length", expected=self.count)

    def to_json(self) -> Any:
        return {"have-len": self.count}


@dataclass
class HavePrefixMatcher(GossMatcher):
    """Succeeds when the actual string starts with the prefix."""

    prefix: str
    args: tuple = ()

    def match(self, actual: Any) -> bool:
        return _as_string(actual, "HavePrefix").startswith(_formatted(self.prefix, self.args))

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="to have prefix", expected=self.prefix)

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="not to have prefix", expected=self.prefix)

    def to_json(self) -> Any:
        return {"have-prefix": self.prefix}


@dataclass
class HaveSuffixMatcher(GossMatcher):
    """Succeeds when the actual string ends with the suffix."""

    suffix: str
    args: tuple = ()

    def match(self, actual: Any) -> bool:
        return _as_string(actual, "HaveSuffix").endswith(_formatted(self.suffix, self.args))

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="to have suffix", expected=self.suffix)

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="not to have suffix", expected=self.suffix)

    def to_json(self) -> Any:
        return {"have-suffix": self.suffix}


@dataclass
class MatchRegexpMatcher(GossMatcher):
    """Succeeds when the regular expression finds a match in the actual string."""

    regexp: str
    args: tuple = ()

    def match(self, actual: Any) -> bool:
        text = _as_string(actual, "MatchRegexp")
        source = _formatted(self.regexp, self.args)
        try:
            pattern = re.compile(source)
        except re.error as exc:
            raise ValueError(f"RegExp must compile.  Got:{_format_object(source)}\n{exc}") from exc
        return pattern.search(text) is not None

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="to match regular expression", expected=self.regexp)

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(
            actual=actual, message="not to match regular expression", expected=self.regexp
        )

    def to_json(self) -> Any:
        return {"match-regexp": self.regexp}


@dataclass
class ContainSubstringMatcher(GossMatcher):
    """Succeeds when the actual string contains the substring."""

    substr: str
    args: tuple = ()

    def match(self, actual: Any) -> bool:
        return _formatted(self.substr, self.args) in _as_string(actual, "ContainSubstring")

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="to contain substring", expected=self.substr)

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="not to contain substring", expected=self.substr)

    def to_json(self) -> Any:
        return {"contain-substring": self.substr}


@dataclass
class ContainElementMatcher(GossMatcher):
    """Succeeds when a collection holds an element equal to, or matched by, ``element``."""

    element: Any

    def match(self, actual: Any) -> bool:
        values = _collection_values(actual, "ContainElement")
        matcher = _as_matcher(self.element)
        last_error: Exception | None = None
        for value in values:
            try:
                if matcher.match(value):
                    return True
            except (TypeError, ValueError) as exc:
                last_error = exc
        if last_error is not None:
            raise last_error
        return False

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="to contain element matching", expected=self.element)

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(
            actual=actual, message="not to contain element matching", expected=self.element
        )

    def to_json(self) -> Any:
        return {"contain-element": to_jsonable(self.element)}


@dataclass
class ContainElementsMatcher(GossMatcher):
    """Succeeds when every expected element is found in the collection."""

    elements: tuple
    _missing: list | None = field(default=None, init=False, repr=False, compare=False)

    def match(self, actual: Any) -> bool:
        self._missing = None
        values = _collection_values(actual, "ContainElements")
        matchers = [_as_matcher(e) for e in _flatten(self.elements)]
        _, free_matchers = _unmatched(values, matchers)
        if not free_matchers:
            return True
        self._missing = [_as_element(m) for m in free_matchers]
        return False

    def failure_result(self, actual: Any) -> MatcherResult:
        missing = self._missing or []
        found = [e for e in _flatten(self.elements) if e not in missing]
        return MatcherResult(
            actual=actual,
            message="to contain elements matching",
            expected=self.elements,
            missing_elements=self._missing,
            found_elements=found,
        )

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(
            actual=actual, message="not to contain elements matching", expected=self.elements
        )

    def to_json(self) -> Any:
        return {"contain-elements": to_jsonable(self.elements)}


@dataclass
class ConsistOfMatcher(GossMatcher):
    """Succeeds when the collection holds exactly the expected elements, in any order."""

    elements: tuple
    _missing: list | None = field(default=None, init=False, repr=False, compare=False)
    _extra: list | None = field(default=None, init=False, repr=False, compare=False)

    def match(self, actual: Any) -> bool:
        self._missing = None
        self._extra = None
        values = _collection_values(actual, "ConsistOf")
        matchers = [_as_matcher(e) for e in _flatten(self.elements)]
        free_values, free_matchers = _unmatched(values, matchers)
        if not free_values and not free_matchers:
            return True
        self._extra = free_values
        self._missing = [_as_element(m) for m in free_matchers]
        return False

    def failure_result(self, actual: Any) -> MatcherResult:
        missing = self._missing or []
        found = [e for e in _flatten(self.elements) if e not in missing]
        return MatcherResult(
            actual=actual,
            message="to consist of",
            expected=self.elements,
            missing_elements=self._missing,
            extra_elements=self._extra,
            found_elements=found,
        )

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(actual=actual, message="not to consist of", expected=self.elements)

    def to_json(self) -> Any:
        return {"consist-of": to_jsonable(self.elements)}


@dataclass
class BeNumericallyMatcher(GossMatcher):
    """Compares a number with a reference using gt, ge, lt, le or eq."""

    comparator: str
    compare_to: tuple

    def match(self, actual: Any) -> bool:
        symbol = _COMPARATORS.get(self.comparator)
        if symbol is None:
            raise ValueError(f"Unknown comparator: {self.comparator}")
        if not 1 <= len(self.compare_to) <= 2:
            raise ValueError(
                "BeNumerically requires 1 or 2 CompareTo arguments.  "
                f"Got:{_format_object(self.compare_to)}"
            )
        for value in (actual, *self.compare_to):
            if not _is_number(value):
                raise TypeError(f"Expected a number.  Got:{_format_object(value)}")
        return _OPERATIONS[symbol](actual, self.compare_to[0])

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(
            actual=actual,
            message=f"to be numerically {self.comparator}",
            expected=self.compare_to[0],
        )

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(
            actual=actual,
            message=f"not to be numerically {self.comparator}",
            expected=self.compare_to[0],
        )

    def to_json(self) -> Any:
        return {self.comparator: to_jsonable(self.compare_to[0])}


def equal(expected: Any) -> EqualMatcher:
    return EqualMatcher(expected)


def have_key(key: Any) -> HaveKeyMatcher:
    return HaveKeyMatcher(key)


def have_len(count: int) -> HaveLenMatcher:
    return HaveLenMatcher(count)


def have_prefix(prefix: str, *args: Any) -> HavePrefixMatcher:
    return HavePrefixMatcher(prefix, args)


def have_suffix(suffix: str, *args: Any) -> HaveSuffixMatcher:
    return HaveSuffixMatcher(suffix, args)


def match_regexp(regexp: str, *args: Any) -> MatchRegexpMatcher:
    return MatchRegexpMatcher(regexp, args)


def contain_substring(substr: str, *args: Any) -> ContainSubstringMatcher:
    return ContainSubstringMatcher(substr, args)


def contain_element(element: Any) -> ContainElementMatcher:
    return ContainElementMatcher(element)


def contain_elements(*args: Any) -> ContainElementsMatcher:
    return ContainElementsMatcher(args)


def consist_of(*args: Any) -> ConsistOfMatcher:
    return ConsistOfMatcher(args)


def be_numerically(comparator: str, *args: Any) -> BeNumericallyMatcher:
    return BeNumericallyMatcher(comparator, args)