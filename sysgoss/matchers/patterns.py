"""Line-oriented pattern matching over text, line lists and readers."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from sysgoss.matchers.core import GossMatcher, MatcherResult, to_jsonable

MAX_SCAN_TOKEN_SIZE = 1024 * 1024


def _format_object(obj: Any) -> str:
    if obj is None:
        return "\n    <nil>: nil"
    if isinstance(obj, (list, tuple, dict, str)):
        return f"\n    <{type(obj).__name__} | len:{len(obj)}>: {obj!r}"
    return f"\n    <{type(obj).__name__}>: {obj!r}"


@dataclass(frozen=True)
class _Pattern:
    pattern: str
    inverse: bool
    test: Callable[[str], bool]


def _string_pattern(text: str) -> _Pattern:
    clean = text.lstrip("\\/!")
    return _Pattern(text, text.startswith("!"), lambda line: clean in line)


def _regex_pattern(text: str) -> _Pattern:
    inverse = text.startswith("!")
    clean = text[1:] if inverse else text
    if clean and clean[0] in ("\\", "/"):
        clean = clean[1:]
    if clean and clean[-1] == "/":
        clean = clean[:-1]
    try:
        regex = re.compile(clean)
    except re.error as exc:
        raise ValueError(f"error parsing regexp {clean!r}: {exc}") from exc
    return _Pattern(text, inverse, lambda line: regex.search(line) is not None)


def _parse_pattern(text: str) -> _Pattern:
    if (text.startswith("/") or text.startswith("!/")) and text.endswith("/"):
        return _regex_pattern(text)
    return _string_pattern(text)


def _split_text(text: str) -> list[str]:
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _reader_lines(reader: Any) -> Iterator[str]:
    for raw in reader:
        if isinstance(raw, (bytes, bytearray)):
            raw = bytes(raw).decode("utf-8", errors="replace")
        yield raw[:-1] if raw.endswith("\n") else raw


def _scan(actual: Any) -> Iterator[str]:
    if isinstance(actual, str):
        source: Any = _split_text(actual)
    elif isinstance(actual, list):
        source = _split_text("\n".join(actual))
    elif hasattr(actual, "read"):
        source = _reader_lines(actual)
    else:
        raise TypeError(f"Incorrect type {type(actual).__name__}")
    for line in source:
        if len(line) > MAX_SCAN_TOKEN_SIZE:
            raise ValueError("token too long")
        yield line[:-1] if line.endswith("\r") else line


@dataclass
class HavePatternsMatcher(GossMatcher):
    """Succeeds when every pattern is found (or, for ``!`` patterns, absent) in the lines."""

    elements: Any
    _missing: list | None = field(default=None, init=False, repr=False, compare=False)
    _found: list | None = field(default=None, init=False, repr=False, compare=False)

    def _patterns(self) -> list[str]:
        if not isinstance(self.elements, (list, tuple)):
            raise TypeError(
                "HavePatterns matcher expects an array of matchers.  "
                f"Got:{_format_object(self.elements)}"
            )
        for element in self.elements:
            if not isinstance(element, str):
                raise TypeError(
                    "HavePatterns matcher expects patterns to be a string. "
                    f"got: {_format_object(element)}"
                )
        return list(self.elements)

    def match(self, actual: Any) -> bool:
        elements = self._patterns()
        not_found = [_parse_pattern(e) for e in elements]
        if not not_found:
            return True

        found: list[_Pattern] = []
        try:
            for line in _scan(actual):
                remaining = []
                for pattern in not_found:
                    if pattern.test(line):
                        if not pattern.inverse:
                            found.append(pattern)
                        continue
                    remaining.append(pattern)
                not_found = remaining
                if not not_found:
                    break
        finally:
            close = getattr(actual, "close", None)
            if hasattr(actual, "read") and callable(close):
                close()

        found.extend(p for p in not_found if p.inverse or p.pattern == "")

        found_texts = [p.pattern for p in found]
        self._found = found_texts
        if len(elements) != len(found):
            found_set = set(found_texts)
            self._missing = [e for e in elements if e not in found_set]
            return False
        return True

    def failure_result(self, actual: Any) -> MatcherResult:
        if isinstance(actual, (str, list)):
            shown = actual
        else:
            shown = f"object: {type(actual).__name__}"
        return MatcherResult(
            actual=shown,
            message="to have patterns",
            expected=self.elements,
            missing_elements=self._missing,
            found_elements=self._found,
        )

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        shown = actual if isinstance(actual, str) else f"object: {type(actual).__name__}"
        return MatcherResult(actual=shown, message="not to have patterns", expected=self.elements)

    def to_json(self) -> Any:
        return {"have-patterns": to_jsonable(self.elements)}


def have_patterns(elements: Any) -> HavePatternsMatcher:
    return HavePatternsMatcher(elements)