import pytest

from sysgoss.matchers.basic import (
    BeNumericallyMatcher,
    EqualMatcher,
    be_numerically,
    consist_of,
    contain_element,
    contain_elements,
    contain_substring,
    equal,
    have_key,
    have_len,
    have_prefix,
    have_suffix,
    match_regexp,
)
from sysgoss.matchers.core import MatcherResult


def test_equal_matches_deeply():
    assert equal({"a": [1, 2]}).match({"a": [1, 2]}) is True
    assert equal({"a": [1, 2]}).match({"a": [2, 1]}) is False


def test_equal_is_type_strict():
    assert equal(1).match(1.0) is False
    assert equal(True).match(1) is False


def test_equal_refuses_none_to_none():
    with pytest.raises(ValueError, match="Refusing to compare"):
        equal(None).match(None)


def test_equal_results_and_json():
    matcher = equal("abc")
    assert matcher == EqualMatcher("abc")
    assert matcher.failure_result("x") == MatcherResult(actual="x", message="to equal", expected="abc")
    assert matcher.negated_failure_result("x").message == "not to equal"
    assert matcher.to_json() == "abc"


def test_have_key_plain_and_matcher():
    assert have_key("k").match({"k": 1}) is True
    assert have_key("k").match({"j": 1}) is False
    assert have_key(have_prefix("ab")).match({"abc": 1}) is True


def test_have_key_requires_mapping():
    with pytest.raises(TypeError, match="HaveKey matcher expects a map"):
        have_key("k").match(["k"])


def test_have_key_results():
    matcher = have_key("k")
    assert matcher.failure_result({}).message == "to have key matching"
    assert matcher.negated_failure_result({}).message == "not to have key matching"
    assert matcher.to_json() == {"have-key": "k"}


@pytest.mark.parametrize("value", ["ab", [1, 2], {"a": 1, "b": 2}, (1, 2)])
def test_have_len_matches(value):
    assert have_len(2).match(value) is True
    assert have_len(3).match(value) is False


def test_have_len_rejects_numbers():
    with pytest.raises(TypeError):
        have_len(1).match(5)


def test_have_len_json():
    assert have_len(2).to_json() == {"have-len": 2}
    assert have_len(2).failure_result("a").expected == 2


def test_prefix_and_suffix():
    assert have_prefix("ab").match("abc") is True
    assert have_prefix("bc").match("abc") is False
    assert have_suffix("bc").match("abc") is True
    assert have_suffix("ab").match("abc") is False
    assert have_prefix("ab%s", "c").match("abcd") is True


def test_prefix_accepts_bytes_rejects_others():
    assert have_prefix("ab").match(b"abc") is True
    with pytest.raises(TypeError, match="requires a string or stringer"):
        have_suffix("a").match(3)


def test_prefix_suffix_json_and_messages():
    assert have_prefix("ab").to_json() == {"have-prefix": "ab"}
    assert have_suffix("bc").to_json() == {"have-suffix": "bc"}
    assert have_prefix("ab").negated_failure_result("abc").message == "not to have prefix"
    assert have_suffix("bc").failure_result("x").message == "to have suffix"


def test_match_regexp():
    assert match_regexp(r"^a.c$").match("abc") is True
    assert match_regexp(r"^b").match("abc") is False
    assert match_regexp(r"^a.c$").to_json() == {"match-regexp": r"^a.c$"}
    assert match_regexp("x").failure_result("y").message == "to match regular expression"


def test_match_regexp_invalid_pattern():
    with pytest.raises(ValueError, match="RegExp must compile"):
        match_regexp("(").match("abc")


def test_contain_substring():
    assert contain_substring("bc").match("abcd") is True
    assert contain_substring("xy").match("abcd") is False
    assert contain_substring("bc").to_json() == {"contain-substring": "bc"}
    assert contain_substring("bc").negated_failure_result("a").message == "not to contain substring"


def test_contain_element():
    assert contain_element("b").match(["a", "b"]) is True
    assert contain_element("c").match(["a", "b"]) is False
    assert contain_element(2).match({"x": 2}) is True
    assert contain_element(have_prefix("b")).match(["a", "bb"]) is True


def test_contain_element_errors():
    with pytest.raises(TypeError, match="expects an array/slice/map"):
        contain_element("a").match("abc")
    with pytest.raises(TypeError):
        contain_element(have_len(1)).match([5])


def test_contain_element_json():
    assert contain_element("b").to_json() == {"contain-element": "b"}
    assert contain_element("b").failure_result([]).message == "to contain element matching"


def test_contain_elements_success_and_failure():
    assert contain_elements("a", "b").match(["b", "c", "a"]) is True
    matcher = contain_elements("a", "b", "c")
    assert matcher.match(["a", "b"]) is False
    result = matcher.failure_result(["a", "b"])
    assert result.message == "to contain elements matching"
    assert result.missing_elements == ["c"]
    assert result.found_elements == ["a", "b"]


def test_contain_elements_json():
    assert contain_elements("a", "b").to_json() == {"contain-elements": ["a", "b"]}


def test_consist_of_any_order():
    assert consist_of("a", "b").match(["b", "a"]) is True
    assert consist_of(["a", "b"]).match(["b", "a"]) is True
    assert consist_of(have_prefix("a"), "b").match(["b", "abc"]) is True


def test_consist_of_reports_missing_and_extra():
    matcher = consist_of("a", "b")
    assert matcher.match(["b", "x"]) is False
    result = matcher.failure_result(["b", "x"])
    assert result.message == "to consist of"
    assert result.missing_elements == ["a"]
    assert result.extra_elements == ["x"]
    assert result.found_elements == ["b"]


def test_consist_of_requires_collection():
    with pytest.raises(TypeError, match="ConsistOf matcher expects an array/slice/map"):
        consist_of("a").match(7)


def test_consist_of_json():
    assert consist_of("a", "b").to_json() == {"consist-of": ["a", "b"]}
    assert consist_of("a").negated_failure_result([]).message == "not to consist of"


@pytest.mark.parametrize(
    "comparator, actual, target, outcome",
    [
        ("gt", 5, 3, True),
        ("gt", 3, 3, False),
        ("ge", 3, 3, True),
        ("lt", 2, 3, True),
        ("le", 4, 3, False),
        ("eq", 3.0, 3, True),
    ],
)
def test_be_numerically(comparator, actual, target, outcome):
    assert be_numerically(comparator, target).match(actual) is outcome


def test_be_numerically_unknown_comparator():
    with pytest.raises(ValueError, match="Unknown comparator: xx"):
        be_numerically("xx", 1).match(1)


def test_be_numerically_requires_numbers():
    with pytest.raises(TypeError, match="Expected a number"):
        be_numerically("gt", 1).match("5")
    with pytest.raises(TypeError, match="Expected a number"):
        be_numerically("gt", "1").match(5)


def test_be_numerically_argument_count():
    with pytest.raises(ValueError, match="requires 1 or 2 CompareTo arguments"):
        be_numerically("gt").match(5)


def test_be_numerically_results_and_json():
    matcher = be_numerically("gt", 3)
    assert matcher == BeNumericallyMatcher("gt", (3,))
    assert matcher.failure_result(1) == MatcherResult(
        actual=1, message="to be numerically gt", expected=3
    )
    assert matcher.negated_failure_result(5).message == "not to be numerically gt"
    assert matcher.to_json() == {"gt": 3}