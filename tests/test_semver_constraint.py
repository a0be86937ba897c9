import pytest

from sysgoss.matchers.core import MatcherResult
from sysgoss.matchers.semver_constraint import (
    BeSemverConstraintMatcher,
    be_semver_constraint,
    to_constraint,
    to_version,
    to_versions,
)


def test_constructor():
    assert be_semver_constraint("> 1.0.0") == BeSemverConstraintMatcher(constraint="> 1.0.0")


def test_failure_result():
    result = BeSemverConstraintMatcher(constraint="> 1.1.0").failure_result("1.0.0")
    assert result == MatcherResult(
        actual="1.0.0", message="to satisfy semver constraint", expected="> 1.1.0"
    )


def test_negated_failure_result():
    result = BeSemverConstraintMatcher(constraint="> 1.1.0").negated_failure_result("1.0.0")
    assert result == MatcherResult(
        actual="1.0.0", message="not to satisfy semver constraint", expected="> 1.1.0"
    )


@pytest.mark.parametrize(
    "constraint, actual, expected",
    [
        (">= 4.0.0", ["4.0.0-rc1"], False),
        ("< 4.0.0", ["4.0.0-rc1"], True),
        ("> 4.0.0", ["4.1.0+build"], True),
    ],
    ids=["pre_release_fail", "pre_release_valid", "build_valid"],
)
def test_match(constraint, actual, expected):
    assert BeSemverConstraintMatcher(constraint=constraint).match(actual) is expected


@pytest.mark.parametrize(
    "actual",
    [["4.4.019-1"], ["4.4.019+build+build2"]],
    ids=["invalid_version_starting_with_0", "build_fail"],
)
def test_match_invalid_versions(actual):
    with pytest.raises(ValueError) as info:
        BeSemverConstraintMatcher(constraint="> 4.0.0").match(actual)
    assert str(info.value).startswith(
        "Expected a single or list of semver valid version(s).  Got:\n    "
    )


def test_match_invalid_constraint():
    with pytest.raises(ValueError) as info:
        BeSemverConstraintMatcher(constraint=None).match(["4.1.0"])
    assert str(info.value) == "Expected a valid semver constraint.  Got:\n    <nil>: nil"


@pytest.mark.parametrize(
    "value, ok",
    [
        ("> 1.0.0", True),
        ("> 1.0.0 < 2.0.0 || > 4.0.0", True),
        (None, False),
        ("", False),
        ("invalid", False),
    ],
    ids=["simple", "complex", "nil", "empty", "invalid"],
)
def test_to_constraint(value, ok):
    constraint = to_constraint(value)
    assert (constraint is not None) is ok
    if ok:
        assert callable(constraint)


def test_complex_range_semantics():
    constraint = to_constraint("> 1.0.0 < 2.0.0 || > 4.0.0")
    assert constraint(to_version("1.5.0")) is True
    assert constraint(to_version("3.0.0")) is False
    assert constraint(to_version("4.0.1")) is True


def test_wildcard_range():
    matcher = be_semver_constraint("1.x")
    assert matcher.match("1.5.0") is True
    assert matcher.match("2.0.0") is False


def test_not_equal_range():
    assert be_semver_constraint("!= 1.2.3").match("1.2.3") is False
    assert be_semver_constraint("!= 1.2.3").match("1.2.4") is True


def test_leading_or_is_invalid():
    assert to_constraint("|| 1.0.0") is None


@pytest.mark.parametrize(
    "value",
    ["1.0.0", "1.2.3-rc1", "1.2.3+build1", "1.2.3+build1"],
    ids=["simple", "pre_release", "build", "pre_release_build"],
)
def test_to_version(value):
    version = to_version(value)
    assert version is not None
    assert str(version) == value


@pytest.mark.parametrize(
    "value, ok",
    [
        ("1.0.0", True),
        (["1.0.0"], True),
        (("1.0.0",), True),
        (object(), False),
        ([object()], False),
    ],
    ids=["single", "slice_strings", "slice_interfaces", "invalid_object", "invalid_object_in_slice"],
)
def test_to_versions(value, ok):
    versions = to_versions(value)
    assert (versions is not None) is ok
    if ok:
        assert versions
        expected = [value] if isinstance(value, str) else list(value)
        assert [str(v) for v in versions] == expected


def test_to_versions_empty_list():
    assert to_versions([]) is None


def test_to_json():
    assert be_semver_constraint("> 1.0.0").to_json() == {"semver-constraint": "> 1.0.0"}