"""Value transformers and the matcher that applies one before matching."""

from __future__ import annotations

import json
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, ClassVar

from sysgoss.matchers.core import GossMatcher, MatcherResult, to_jsonable


def _format_object(obj: Any) -> str:
    if obj is None:
        return "\n    <nil>: nil"
    if isinstance(obj, (list, tuple, dict, str)):
        return f"\n    <{type(obj).__name__} | len:{len(obj)}>: {obj!r}"
    return f"\n    <{type(obj).__name__}>: {obj!r}"


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    raw = "".join(map(str, digit_tuple))
    point = len(raw) + exponent
    digits = raw.rstrip("0") or "0"
    exp = point - 1
    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{sign}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    if point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return sign + digits + "0" * (point - len(digits))
    return f"{sign}{digits[:point]}.{digits[point:]}"


def _display(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_display(v) for v in value) + "]"
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "map[" + " ".join(f"{_display(k)}:{_display(v)}" for k, v in items) + "]"
    return str(value)


def _parse_float(text: str) -> float:
    cleaned = text.strip()
    if "_" in cleaned:
        raise ValueError(f'parsing "{cleaned}": invalid syntax')
    try:
        return float(cleaned)
    except ValueError:
        raise ValueError(f'parsing "{cleaned}": invalid syntax') from None


class Transformer(ABC):
    """Converts a value before it is handed to a matcher."""

    _json_key: ClassVar[str] = ""

    @abstractmethod
    def transform(self, value: Any) -> Any:
        """Return the converted value; raise TypeError or ValueError when impossible."""

    def to_json(self) -> Any:
        return {self._json_key: {}} if self._json_key else {}


@dataclass(frozen=True)
class ToNumeric(Transformer):
    """Turns numbers, numeric strings and lists of lines into a number."""

    _json_key: ClassVar[str] = "to-numeric"

    def transform(self, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            return _parse_float(value)
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return _parse_float(ToString().transform(value))
        raise TypeError(f"Expected numeric, Got:{_format_object(value)}")


@dataclass(frozen=True)
class ToString(Transformer):
    """Joins lists into newline-separated text; formats anything else as text."""

    _json_key: ClassVar[str] = "to-string"

    def transform(self, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return "\n".join(_display(v) for v in value)
        return _display(value)


@dataclass(frozen=True)
class ToArray(Transformer):
    """Splits text into lines; leaves other values unchanged."""

    _json_key: ClassVar[str] = "to-array"

    def transform(self, value: Any) -> Any:
        if isinstance(value, str):
            return value.split("\n")
        return value


@dataclass(frozen=True)
class ReaderToString(Transformer):
    """Reads a file-like object to the end and returns its text."""

    def transform(self, value: Any) -> Any:
        read = getattr(value, "read", None)
        if not callable(read):
            raise TypeError(f"Expected io.reader, Got:{_format_object(value)}")
        data = read()
        if isinstance(data, (bytes, bytearray)):
            return bytes(data).decode("utf-8", errors="replace")
        return data


_MISSING = object()
_INDEX = re.compile(r"[0-9]+")


def _split_path(path: str) -> list[tuple[str, re.Pattern | None]]:
    parts = []
    text: list[str] = []
    regex: list[str] = []
    wild = False
    escaped = False
    for ch in path:
        if escaped:
            text.append(ch)
            regex.append(re.escape(ch))
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == ".":
            parts.append(("".join(text), re.compile("".join(regex)) if wild else None))
            text, regex, wild = [], [], False
        elif ch in "*?":
            text.append(ch)
            regex.append(".*" if ch == "*" else ".")
            wild = True
        else:
            text.append(ch)
            regex.append(re.escape(ch))
    parts.append(("".join(text), re.compile("".join(regex), re.S) if wild else None))
    return parts


def _lookup(node: Any, parts: list[tuple[str, re.Pattern | None]]) -> Any:
    if not parts:
        return node
    (key, pattern), rest = parts[0], parts[1:]
    if isinstance(node, dict):
        if pattern is None:
            return _lookup(node[key], rest) if key in node else _MISSING
        for name, child in node.items():
            if pattern.fullmatch(name):
                return _lookup(child, rest)
        return _MISSING
    if isinstance(node, list):
        if key == "#" and pattern is None:
            if not rest:
                return float(len(node))
            found = (_lookup(item, rest) for item in node)
            return [item for item in found if item is not _MISSING]
        if _INDEX.fullmatch(key):
            index = int(key)
            return _lookup(node[index], rest) if index < len(node) else _MISSING
    return _MISSING


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid constant {name}")


@dataclass(frozen=True)
class Gjson(Transformer):
    """Extracts the value at a dotted path from a JSON document."""

    path: str

    def transform(self, value: Any) -> Any:
        if not isinstance(value, str):
            raise TypeError(f"Expected string, Got:{_format_object(value)}")
        try:
            document = json.loads(value, parse_int=float, parse_constant=_reject_constant)
        except ValueError:
            raise ValueError("Invalid json") from None
        result = _lookup(document, _split_path(self.path)) if self.path else _MISSING
        if result is _MISSING:
            raise ValueError(f"Path not found: {self.path}")
        return result

    def to_json(self) -> Any:
        return {"gjson": {"Path": self.path}}


def _same(left: Any, right: Any) -> bool:
    return type(left) is type(right) and left == right


@dataclass
class WithSafeTransformMatcher(GossMatcher):
    """Applies a transformer to the actual value, then the inner matcher."""

    transform: Transformer
    matcher: GossMatcher
    _transformed_value: Any = field(default=None, init=False, repr=False, compare=False)
    _was_transformed: bool = field(default=False, init=False, repr=False, compare=False)

    def match(self, actual: Any) -> bool:
        try:
            self._transformed_value = self.transform.transform(actual)
        except (TypeError, ValueError, OSError) as exc:
            self._transformed_value = None
            self._was_transformed = True
            raise ValueError(f"{self.transform!r}: {exc}") from exc
        self._was_transformed = not _same(actual, self._transformed_value)
        return self.matcher.match(self._transformed_value)

    def _chain(self) -> tuple[list, GossMatcher, Any]:
        chain: list = []
        matcher: GossMatcher = self
        value = self._transformed_value
        while isinstance(matcher, WithSafeTransformMatcher):
            value = matcher._transformed_value
            if matcher._was_transformed:
                chain.append(matcher.transform)
            matcher = matcher.matcher
        return chain, matcher, value

    def failure_result(self, actual: Any) -> MatcherResult:
        chain, matcher, value = self._chain()
        result = matcher.failure_result(value)
        result.transformer_chain = chain
        result.untransformed_value = actual
        return result

    def negated_failure_result(self, actual: Any) -> MatcherResult:
        chain, matcher, value = self._chain()
        result = matcher.negated_failure_result(value)
        result.transformer_chain = chain
        result.untransformed_value = actual
        return result

    def to_json(self) -> Any:
        _, matcher, _ = self._chain()
        return to_jsonable(matcher)


def with_safe_transform(transform: Transformer, matcher: GossMatcher) -> WithSafeTransformMatcher:
    return WithSafeTransformMatcher(transform, matcher)