"""
rbac_gate.authz.matcher

Resource pattern parsing and most-specific rule selection.

Responsibilities:
- Parse Ant-style path globs (`/api/admin/**`) and AspectJ-style method scopes
  (`execution(* pkg.service.*.*(..))`) into segment lists.
- Match HTTP requests and invocations against rule patterns.
- Rank matching rules by literal-segment count, declaration order breaking ties.

Segment semantics (paths and dotted names alike):
- `**` (paths) / `..` (dotted names) match zero or more segments.
- `*` matches exactly one segment.
- A segment containing `*`, `?` or `[` is a one-segment shell glob (`get*`).
- Any other segment is a literal and counts towards specificity.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from fnmatch import fnmatchcase

from rbac_gate.authz.errors import InvalidPatternError
from rbac_gate.authz.models import HttpRequest, Resource, Rule

_ANY_SEGMENTS = "**"
_GLOB_CHARS = frozenset("*?[")

_EXECUTION_RE = re.compile(
    r"^execution\(\s*(?P<ret>\S+)\s+(?P<name>[\w.*$?\[\]]+?)\s*\((?P<args>[^()]*)\)\s*\)$"
)


class _NoMatch(enum.Enum):
    token = "NO_MATCH"

    def __repr__(self) -> str:
        return "NO_MATCH"

    def __bool__(self) -> bool:
        return False


# Distinct from a DENY decision: the caller falls through to the default policy.
NO_MATCH = _NoMatch.token


def _is_wildcard(segment: str) -> bool:
    return segment == _ANY_SEGMENTS or any(c in _GLOB_CHARS for c in segment)


def _match_segments(pattern: Sequence[str], parts: Sequence[str]) -> bool:
    # Memoized over (pattern index, parts index); `**` makes naive recursion exponential.
    memo: dict[tuple[int, int], bool] = {}

    def walk(i: int, j: int) -> bool:
        key = (i, j)
        if key in memo:
            return memo[key]
        if i == len(pattern):
            result = j == len(parts)
        elif pattern[i] == _ANY_SEGMENTS:
            result = walk(i + 1, j) or (j < len(parts) and walk(i, j + 1))
        elif j == len(parts):
            result = False
        elif _is_wildcard(pattern[i]):
            result = fnmatchcase(parts[j], pattern[i]) and walk(i + 1, j + 1)
        else:
            result = pattern[i] == parts[j] and walk(i + 1, j + 1)
        memo[key] = result
        return result

    return walk(0, 0)


def split_path(path: str) -> tuple[str, ...]:
    # `.` and `..` resolve like posixpath.normpath; `..` at the root stays at the root.
    parts: list[str] = []
    for p in path.strip().split("/"):
        if not p or p == ".":
            continue
        if p == "..":
            if parts:
                parts.pop()
            continue
        parts.append(p)
    return tuple(parts)


def split_dotted(name: str) -> tuple[str, ...]:
    # `pkg..service` -> ("pkg", "**", "service"): `..` spans any number of packages.
    segments: list[str] = []
    for chunk in name.strip().split(".."):
        if segments or not chunk:
            segments.append(_ANY_SEGMENTS)
        segments.extend(p for p in chunk.split(".") if p)
    # Collapse runs produced by leading/trailing `..`.
    collapsed: list[str] = []
    for seg in segments:
        if seg == _ANY_SEGMENTS and collapsed and collapsed[-1] == _ANY_SEGMENTS:
            continue
        collapsed.append(seg)
    return tuple(collapsed)


@dataclass(frozen=True, slots=True)
class PathPattern:
    expression: str
    segments: tuple[str, ...]

    @classmethod
    def parse(cls, expression: str) -> PathPattern:
        expression = expression.strip()
        if not expression.startswith("/"):
            raise InvalidPatternError(f"path pattern must start with '/': {expression!r}")
        if any(seg in (".", "..") for seg in expression.split("/")):
            raise InvalidPatternError(f"path pattern may not contain '.' or '..' segments: {expression!r}")
        segments = split_path(expression)
        for seg in segments:
            if "**" in seg and seg != _ANY_SEGMENTS:
                raise InvalidPatternError(f"'**' must be a whole segment: {expression!r}")
        return cls(expression=expression, segments=segments)

    @property
    def literal_count(self) -> int:
        return sum(1 for s in self.segments if not _is_wildcard(s))

    def matches(self, path: str) -> bool:
        return _match_segments(self.segments, split_path(path))


@dataclass(frozen=True, slots=True)
class MethodScope:
    """
    Subset of AspectJ `execution(...)` pointcuts.
    The return-type and argument patterns are kept for display only.
    """

    expression: str
    segments: tuple[str, ...]
    return_type: str = "*"
    args: str = ".."

    @classmethod
    def parse(cls, expression: str) -> MethodScope:
        expression = expression.strip()
        m = _EXECUTION_RE.match(expression)
        if m:
            name, ret, args = m.group("name"), m.group("ret"), m.group("args").strip()
        elif expression.startswith("execution"):
            raise InvalidPatternError(f"malformed execution pointcut: {expression!r}")
        else:
            name, ret, args = expression, "*", ".."
        segments = split_dotted(name)
        if not segments or segments == (_ANY_SEGMENTS,):
            raise InvalidPatternError(f"method scope names no type or method: {expression!r}")
        return cls(expression=expression, segments=segments, return_type=ret, args=args)

    @property
    def literal_count(self) -> int:
        return sum(1 for s in self.segments if not _is_wildcard(s))

    def matches(self, signature: str) -> bool:
        return _match_segments(self.segments, tuple(p for p in signature.split(".") if p))


@dataclass(frozen=True, slots=True)
class ResourcePattern:
    path: PathPattern | None = None
    method_scope: MethodScope | None = None

    @classmethod
    def parse(cls, path: str | None, method_scope: str | None = None) -> ResourcePattern:
        if path is None and method_scope is None:
            raise InvalidPatternError("a rule needs a path pattern, a method scope, or both")
        return cls(
            path=PathPattern.parse(path) if path is not None else None,
            method_scope=MethodScope.parse(method_scope) if method_scope is not None else None,
        )

    @property
    def specificity(self) -> int:
        count = 0
        if self.path is not None:
            count += self.path.literal_count
        if self.method_scope is not None:
            count += self.method_scope.literal_count
        return count

    def key(self) -> tuple[tuple[str, ...] | None, tuple[str, ...] | None]:
        # Parsed segments, so `/x/**` and `/x/**/` (or a bare name and its pointcut) collide.
        return (
            self.path.segments if self.path else None,
            self.method_scope.segments if self.method_scope else None,
        )

    def matches(self, resource: Resource) -> bool:
        if isinstance(resource, HttpRequest):
            # Method-scoped rules never gate raw HTTP requests.
            return self.method_scope is None and self.path is not None and self.path.matches(resource.path)
        if self.method_scope is None or not self.method_scope.matches(resource.signature):
            return False
        if self.path is None:
            return True
        return resource.path is not None and self.path.matches(resource.path)

    def __str__(self) -> str:
        parts = [p.expression for p in (self.path, self.method_scope) if p is not None]
        return " & ".join(parts)


def _applies(rule: Rule, resource: Resource) -> bool:
    if not rule.pattern.matches(resource):
        return False
    if rule.http_methods is not None and isinstance(resource, HttpRequest):
        return resource.method.upper() in rule.http_methods
    return True


def rank(rules: Iterable[Rule]) -> list[Rule]:
    """
    Most-specific-first evaluation order (stable on declaration index).
    """

    return sorted(rules, key=lambda r: (-r.specificity, r.index))


def match(resource: Resource, rules: Iterable[Rule]) -> Rule | _NoMatch:
    """
    Select the applicable rule with the most literal segments; the earliest
    declared rule wins a tie. Returns `NO_MATCH` when nothing applies.
    """

    best: Rule | None = None
    for rule in rules:
        if not _applies(rule, resource):
            continue
        if best is None or (rule.specificity, -rule.index) > (best.specificity, -best.index):
            best = rule
    return best if best is not None else NO_MATCH


__all__ = [
    "NO_MATCH",
    "MethodScope",
    "PathPattern",
    "ResourcePattern",
    "match",
    "rank",
    "split_dotted",
    "split_path",
]


# --- Module Notes -----------------------------------------------------------
# `match` scans linearly; rule tables are small and built once, so no index is kept.
