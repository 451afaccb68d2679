"""
Request patterns: the "given" half of a mapping.

A ``RequestPattern`` is a list of independent matchers. A request matches the
pattern when every matcher accepts it; the ratio of accepting matchers is the
score used to report the closest mapping for unmatched requests.

Example:
    >>> pattern = (
    ...     RequestPattern.create()
    ...     .with_path("/api/users")
    ...     .using_post()
    ...     .with_body('{"Name":"John Doe","Email":"johndoe@example.com"}')
    ... )
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Pattern, Union

from .messages import RequestMessage

PathPattern = Union[str, Pattern[str]]
BodyPattern = Union[str, bytes, Pattern[str], Callable[[str], bool]]


def wildcard_to_regex(pattern: str, ignore_case: bool = False) -> Pattern[str]:
    """
    Compile a wildcard pattern: ``*`` matches any run of characters, ``?``
    exactly one. Everything else is literal.

    Examples:
        >>> bool(wildcard_to_regex("/api/*").fullmatch("/api/users/1"))
        True
        >>> bool(wildcard_to_regex("/api/user?").fullmatch("/api/users"))
        True
    """
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    flags = re.DOTALL | (re.IGNORECASE if ignore_case else 0)
    return re.compile("".join(parts), flags)


def _compile(pattern: PathPattern, ignore_case: bool = False) -> Pattern[str]:
    if isinstance(pattern, str):
        return wildcard_to_regex(pattern, ignore_case)
    return pattern


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching one request against one pattern."""

    matched: int
    total: int

    @property
    def is_perfect_match(self) -> bool:
        return self.matched == self.total

    @property
    def score(self) -> float:
        """Share of matchers that accepted the request (1.0 for an empty pattern)."""
        if self.total == 0:
            return 1.0
        return self.matched / self.total


class RequestMatcher:
    """Base class for a single request predicate."""

    description = "matcher"

    def matches(self, request: RequestMessage) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.description}>"


class PathMatcher(RequestMatcher):
    def __init__(self, *paths: PathPattern):
        if not paths:
            raise ValueError("with_path() needs at least one path")
        self._patterns = [_compile(p) for p in paths]
        self.description = " | ".join(p.pattern for p in self._patterns)

    def matches(self, request: RequestMessage) -> bool:
        return any(p.fullmatch(request.path) for p in self._patterns)


class MethodMatcher(RequestMatcher):
    def __init__(self, *methods: str):
        if not methods:
            raise ValueError("using_method() needs at least one method")
        self._methods = frozenset(m.upper() for m in methods)
        self.description = ",".join(sorted(self._methods))

    def matches(self, request: RequestMessage) -> bool:
        return request.method in self._methods


class BodyMatcher(RequestMatcher):
    """
    Exact body equality for ``str``/``bytes``, full regex match for a compiled
    pattern, or an arbitrary predicate on the body text.
    """

    def __init__(self, body: BodyPattern):
        self._body = body
        if isinstance(body, (str, bytes)):
            self.description = repr(body)
        elif isinstance(body, re.Pattern):
            self.description = f"/{body.pattern}/"
        elif callable(body):
            self.description = getattr(body, "__name__", "predicate")
        else:
            raise TypeError(f"Unsupported body matcher: {type(body).__name__}")

    def matches(self, request: RequestMessage) -> bool:
        body = self._body
        if isinstance(body, bytes):
            return request.body_bytes == body
        if isinstance(body, str):
            return request.body == body
        if isinstance(body, re.Pattern):
            return body.fullmatch(request.body) is not None
        return bool(body(request.body))


class JsonBodyMatcher(RequestMatcher):
    """Structural JSON equality: key order and whitespace are ignored."""

    def __init__(self, expected: Any):
        self._expected = expected
        self.description = json.dumps(expected, sort_keys=True)

    def matches(self, request: RequestMessage) -> bool:
        try:
            return request.json() == self._expected
        except ValueError:
            return False


class HeaderMatcher(RequestMatcher):
    def __init__(self, name: str, pattern: str, ignore_case: bool = False):
        self._name = name
        self._pattern = wildcard_to_regex(pattern, ignore_case)
        self.description = f"{name}: {pattern}"

    def matches(self, request: RequestMessage) -> bool:
        value = request.headers.get(self._name)
        return value is not None and self._pattern.fullmatch(value) is not None


class MissingHeaderMatcher(RequestMatcher):
    def __init__(self, name: str):
        self._name = name
        self.description = f"no {name}"

    def matches(self, request: RequestMessage) -> bool:
        return self._name not in request.headers


class ParamMatcher(RequestMatcher):
    def __init__(self, name: str, *values: str):
        self._name = name
        self._values = frozenset(values)
        self.description = f"{name}={','.join(values) or '*'}"

    def matches(self, request: RequestMessage) -> bool:
        actual = request.query.get(self._name)
        if actual is None:
            return False
        if not self._values:
            return True
        return any(v in self._values for v in actual)


class RequestPattern:
    """
    Fluent builder for the request side of a mapping.

    Every ``with_*`` / ``using_*`` call adds a matcher and returns the pattern.
    Calling a ``using_*`` method again replaces the previous method matcher.
    """

    def __init__(self):
        self._matchers: List[RequestMatcher] = []

    @classmethod
    def create(cls) -> "RequestPattern":
        return cls()

    @property
    def matchers(self) -> List[RequestMatcher]:
        return list(self._matchers)

    def _add(self, matcher: RequestMatcher) -> "RequestPattern":
        self._matchers.append(matcher)
        return self

    # ==================== Path ====================

    def with_path(self, *paths: PathPattern) -> "RequestPattern":
        """Match when the path matches any of the wildcard strings or regexes."""
        return self._add(PathMatcher(*paths))

    # ==================== Method ====================

    def using_method(self, *methods: str) -> "RequestPattern":
        self._matchers = [m for m in self._matchers if not isinstance(m, MethodMatcher)]
        return self._add(MethodMatcher(*methods))

    def using_get(self) -> "RequestPattern":
        return self.using_method("GET")

    def using_post(self) -> "RequestPattern":
        return self.using_method("POST")

    def using_put(self) -> "RequestPattern":
        return self.using_method("PUT")

    def using_patch(self) -> "RequestPattern":
        return self.using_method("PATCH")

    def using_delete(self) -> "RequestPattern":
        return self.using_method("DELETE")

    def using_head(self) -> "RequestPattern":
        return self.using_method("HEAD")

    def using_options(self) -> "RequestPattern":
        return self.using_method("OPTIONS")

    def using_any_method(self) -> "RequestPattern":
        self._matchers = [m for m in self._matchers if not isinstance(m, MethodMatcher)]
        return self

    # ==================== Body ====================

    def with_body(self, body: BodyPattern) -> "RequestPattern":
        return self._add(BodyMatcher(body))

    def with_json_body(self, expected: Any) -> "RequestPattern":
        return self._add(JsonBodyMatcher(expected))

    # ==================== Headers / query ====================

    def with_header(self, name: str, pattern: str, ignore_case: bool = False) -> "RequestPattern":
        return self._add(HeaderMatcher(name, pattern, ignore_case))

    def without_header(self, name: str) -> "RequestPattern":
        return self._add(MissingHeaderMatcher(name))

    def with_param(self, name: str, *values: str) -> "RequestPattern":
        return self._add(ParamMatcher(name, *values))

    # ==================== Matching ====================

    def match(self, request: RequestMessage) -> MatchResult:
        matched = sum(1 for m in self._matchers if m.matches(request))
        return MatchResult(matched=matched, total=len(self._matchers))

    def __repr__(self) -> str:
        return f"RequestPattern({', '.join(repr(m) for m in self._matchers)})"
