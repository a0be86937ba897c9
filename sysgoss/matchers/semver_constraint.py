"""Semantic-version constraint matcher and range parsing."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from semver import Version

from sysgoss.matchers.core import GossMatcher, MatcherResult, to_jsonable

Range = Callable[[Version], bool]

_COMPARATORS: dict[str, Callable[[int], bool]] = {
    "": lambda c: c == 0,
    "=": lambda c: c == 0,
    "==": lambda c: c == 0,
    "!": lambda c: c != 0,
    "!=": lambda c: c != 0,
    ">": lambda c: c > 0,
    ">=": lambda c: c >= 0,
    "<": lambda c: c < 0,
    "<=": lambda c: c <= 0,
}


def _format_object(obj: Any) -> str:
    if obj is None:
        return "\n    <nil>: nil"
    if isinstance(obj, (list, tuple, dict, str)):
        return f"\n    <{type(obj).__name__} | len:{len(obj)}>: {obj!r}"
    return f"\n    <{type(obj).__name__}>: {obj!r}"


def _split_and_trim(text: str) -> list[str]:
    result = []
    last = 0
    last_char = ""
    for i, ch in enumerate(text):
        if ch == " " and last_char not in (">", "<", "="):
            if last < i - 1:
                result.append(text[last:i])
            last = i + 1
        elif ch != " ":
            last_char = ch
    if last < len(text) - 1:
        result.append(text[last:])
    return [part.replace(" ", "") for part in result]


def _split_or_parts(parts: list[str]) -> list[list[str]]:
    groups = []
    last = 0
    for i, part in enumerate(parts):
        if part == "||":
            if i == 0:
                raise ValueError("First element in range is '||'")
            groups.append(parts[last:i])
            last = i + 1
    if last == len(parts):
        raise ValueError("Last element in range is '||'")
    groups.append(parts[last:])
    if any(not group for group in groups):
        raise ValueError("Empty element in range")
    return groups


def _split_comparator_version(text: str) -> tuple[str, str]:
    index = next((i for i, ch in enumerate(text) if ch in "0123456789"), None)
    if index is None:
        raise ValueError(f"Could not get version from string: {text!r}")
    return text[:index], text[index:]


def _increment(flat: str, wildcard_parts: int) -> str:
    try:
        version = Version.parse(flat)
    except ValueError:
        return ""
    if wildcard_parts == 3:
        return str(version.bump_minor())
    if wildcard_parts == 2:
        return str(version.bump_major())
    return ""


def _expand_wildcard(part: str) -> list[str]:
    op, version = _split_comparator_version(part)
    pieces = version.split(".")
    wildcard_parts = len(pieces) if pieces[-1] == "x" else 0
    flat = version.replace(".x", ".0", 1)
    if len(flat.split(".")) == 2:
        flat += ".0"

    prefix: list[str] = []
    increment = False
    result_op = ""
    if op == ">":
        result_op, increment = ">=", True
    elif op == ">=":
        result_op = ">="
    elif op == "<":
        result_op = "<"
    elif op == "<=":
        result_op, increment = "<", True
    elif op in ("", "=", "=="):
        prefix.append(">=" + flat)
        result_op, increment = "<", True
    elif op in ("!=", "!"):
        prefix.append("<" + flat)
        result_op, increment = ">=", True
    bound = _increment(flat, wildcard_parts) if increment else flat
    return [*prefix, result_op + bound]


def _build(part: str) -> Callable[[Version], bool]:
    op, text = _split_comparator_version(part)
    compare = _COMPARATORS.get(op)
    if compare is None:
        raise ValueError(f"Could not parse comparator {op!r} in {part!r}")
    bound = Version.parse(text)
    return lambda version: compare(version.compare(bound))


def parse_range(text: str) -> Range:
    """Parse a range such as ``">1.0.0 <2.0.0 || >=3.x"``; raise ValueError if invalid."""
    groups = _split_or_parts(_split_and_trim(text))
    alternatives = []
    for group in groups:
        expanded = []
        for part in group:
            expanded.extend(_expand_wildcard(part) if "x" in part else [part])
        alternatives.append([_build(part) for part in expanded])

    def satisfied(version: Version) -> bool:
        return any(all(check(version) for check in checks) for checks in alternatives)

    return satisfied


def to_constraint(value: Any) -> Range | None:
    """Return a range predicate for a constraint string, or None when it is not one."""
    if not isinstance(value, str):
        return None
    try:
        return parse_range(value)
    except ValueError:
        return None


def to_version(value: Any) -> Version | None:
    """Parse a strict semantic version string, or return None."""
    if not isinstance(value, str):
        return None
    try:
        return Version.parse(value)
    except ValueError:
        return None


def to_versions(value: Any) -> list[Version] | None:
    """Parse a version or a list of versions; None if any is invalid or none are given."""
    single = to_version(value)
    if single is not None:
        return [single]
    if not isinstance(value, (list, tuple)):
        return None
    versions = []
    for item in value:
        version = to_version(item)
        if version is None:
            return None
        versions.append(version)
    return versions or None


@dataclass
class BeSemverConstraintMatcher(GossMatcher):
    """Succeeds when every actual version satisfies the constraint."""

    constraint: Any

    def match(self, actual: Any) -> bool:
        constraint = to_constraint(self.constraint)
        if constraint is None:
            raise ValueError(
                f"Expected a valid semver constraint.  Got:{_format_object(self.constraint)}"
            )
        versions = to_versions(actual)
        if versions is None:
            raise ValueError(
                "Expected a single or list of semver valid version(s).  "
                f"Got:{_format_object(actual)}"
            )
        return all(constraint(version) for version in versions)

    def failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(
            actual=actual, message="to satisfy semver constraint", expected=self.constraint
        )

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        return MatcherResult(
            actual=actual, message="not to satisfy semver constraint", expected=self.constraint
        )

    def to_json(self) -> Any:
        return {"semver-constraint": to_jsonable(self.constraint)}


def be_semver_constraint(constraint: Any) -> BeSemverConstraintMatcher:
    return BeSemverConstraintMatcher(constraint)