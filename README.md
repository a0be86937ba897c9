# sysgoss

Building blocks for validating a server's state:

- **matchers** that decide whether an observed value satisfies an expectation
  and explain why not when it does not;
- **transforms** that reshape an observed value (to a number, a string, a list
  of lines, or a value picked out of a JSON document) before it is matched;
- a small **logging** setup with level filtering and UTC timestamps.

## Installation

```
pip install sysgoss
```

Python 3.10 or later is required. The only runtime dependency is `semver`.

## Matchers

Every matcher (a subclass of `sysgoss.matchers.core.GossMatcher`) has:

- `match(actual)`, which returns `True` or `False` and raises `TypeError` or
  `ValueError` when the value cannot be judged at all;
- `failure_result(actual)` and `negated_failure_result(actual)`, which return a
  `MatcherResult` (`actual`, `message`, `expected`, `missing_elements`,
  `found_elements`, `extra_elements`, `transformer_chain`,
  `untransformed_value`);
- `to_json()`, which gives the matcher back in the form it is written in a
  test file. `sysgoss.matchers.core.to_jsonable` turns matchers, results and
  containers of them into plain JSON-compatible data.

```python
from sysgoss.matchers.basic import equal, have_len, have_prefix, be_numerically
from sysgoss.matchers.core import all_of, any_of, not_

matcher = all_of(have_prefix("nginx"), not_(equal("nginx-old")))
matcher.match("nginx-1.25")                  # True

be_numerically("ge", 3).match(5)             # True
any_of(have_len(0), equal("x")).match("x")   # True

result = equal("running").failure_result("stopped")
result.message                               # "to equal"
```

### Available matchers

In `sysgoss.matchers.core`:

| function         | class         | succeeds when                        |
|------------------|---------------|--------------------------------------|
| `all_of(*m)`     | `AndMatcher`  | every inner matcher succeeds         |
| `any_of(*m)`     | `OrMatcher`   | at least one inner matcher succeeds  |
| `not_(m)`        | `NotMatcher`  | the inner matcher fails              |

`AndMatcher.failure_result` reports the first inner matcher that failed, and
`OrMatcher.negated_failure_result` the first that succeeded; each raises
`RuntimeError` if called before `match` has produced such a matcher.

In `sysgoss.matchers.basic`:

| function                         | succeeds when                                              |
|----------------------------------|------------------------------------------------------------|
| `equal(expected)`                | the value deeply equals `expected` (same types)            |
| `have_key(key)`                  | a mapping has a key equal to, or matched by, `key`         |
| `have_len(count)`                | a string, sequence, set or mapping has `count` items       |
| `have_prefix(prefix, *args)`     | a string starts with `prefix`                              |
| `have_suffix(suffix, *args)`     | a string ends with `suffix`                                |
| `contain_substring(s, *args)`    | a string contains `s`                                      |
| `match_regexp(regexp, *args)`    | the regular expression is found in a string                |
| `contain_element(element)`       | a collection holds an element equal to / matched by it     |
| `contain_elements(*elements)`    | every expected element is found in the collection          |
| `consist_of(*elements)`          | the collection holds exactly these elements, in any order  |
| `be_numerically(cmp, value)`     | the number compares with `value` using `cmp`               |

Where `*args` are given to the string matchers, the pattern is formatted with
them using `%`. Elements of the collection matchers may themselves be matchers.
Comparators for `be_numerically` are `gt`, `ge`, `lt`, `le` and `eq`; any
other name raises `ValueError` when matching. `equal(None).match(None)` raises
rather than comparing two empty values.

### Line patterns

`sysgoss.matchers.patterns.have_patterns` checks text line by line. The value
may be a string, a list of lines or a readable file-like object (which is
closed afterwards). Plain entries must appear as substrings, entries written
`/like this/` are regular expressions, and a leading `!` means the pattern must
*not* appear.

```python
from sysgoss.matchers.patterns import have_patterns

have_patterns(["listen 80", "/^user\\s+www/", "!debug"]).match(
    "user www\nlisten 80\n"
)                                            # True
```

After a failed match, `failure_result` lists the missing and found patterns.

### Semantic versions

`sysgoss.matchers.semver_constraint.be_semver_constraint` checks that one
version, or every version in a list, satisfies a range. Ranges combine
comparisons (`>`, `>=`, `<`, `<=`, `=`, `!=`) with spaces for "and" and `||`
for "or"; `x` wildcards such as `1.2.x` are accepted.

```python
from sysgoss.matchers.semver_constraint import be_semver_constraint

be_semver_constraint(">= 1.2.0 < 2.0.0").match(["1.4.0", "1.9.3"])   # True
```

`parse_range`, `to_constraint`, `to_version` and `to_versions` in the same
module expose the parsing; the `to_*` helpers return `None` for invalid input.

### Transforms

`sysgoss.matchers.transforms` provides `ToNumeric`, `ToString`, `ToArray`,
`ReaderToString` and `Gjson(path)`. `with_safe_transform(transform, matcher)`
runs a transform before handing the value to a matcher; a transform error is
raised as `ValueError`, and failure results report the chain of transforms
that changed the value and the untransformed value.

```python
from sysgoss.matchers.basic import be_numerically
from sysgoss.matchers.transforms import Gjson, ToNumeric, with_safe_transform

load = with_safe_transform(ToNumeric(), be_numerically("lt", 4))
load.match(" 1.5 ")                          # True

status = with_safe_transform(Gjson("status"), be_numerically("eq", 200))
status.match('{"status": 200}')              # True
```

`Gjson` paths are dot-separated, support `*` and `?` wildcards in keys,
numeric array indexes and `#` for an array's length (or, followed by more
path, for the values collected from each element).

## Logging

`sysgoss.logs.set_log_level("DEBUG")` sends the `sysgoss` logger's records to
standard error, each prefixed by `TimestampedFormatter` with an RFC 3339 UTC
timestamp and a level tag. Accepted levels are `TRACE`, `DEBUG`, `INFO`,
`WARN` and `ERROR`, in any case; anything else raises `ValueError`.

## What this package does not do

sysgoss judges values that you hand to it. It does not inspect the system
itself (files, packages, services, ports and so on), it does not read or
write test-suite files, it has no command-line program or health-check
server, and it has no reporters that render a run's results or compute an
exit code. The `sysgoss.outputs` package is present but holds no reporters.