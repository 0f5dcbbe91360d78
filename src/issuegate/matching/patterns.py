# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Glob, regex, and substring matching over diagnostic messages.

Glob patterns recognise a single wildcard: ``*`` matches any run of
characters, newlines included. Every other character is literal and the match
is anchored to the whole message, so ``Call to *`` does not match
``Prefix: Call to foo``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Protocol, TypeVar

_GLOB_WILDCARD = "*"


class HasMessage(Protocol):
    """Structural type for any diagnostic exposing a ``message`` string."""

    @property
    def message(self) -> str: ...


DiagnosticT = TypeVar("DiagnosticT", bound=HasMessage)


class PatternKind(str, Enum):
    """Supported pattern dialects."""

    GLOB = "glob"
    REGEX = "regex"
    SUBSTRING = "substring"


@lru_cache(maxsize=512)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    """Return a compiled, fully anchored regex equivalent of ``pattern``."""

    body = ".*".join(re.escape(part) for part in pattern.split(_GLOB_WILDCARD))
    return re.compile(rf"\A{body}\Z", re.DOTALL)


def _glob_matches(message: str, pattern: str) -> bool:
    if pattern == message:
        return True
    return _compile_glob(pattern).match(message) is not None


def matches(message: str, patterns: str | Iterable[str]) -> bool:
    """Return ``True`` when ``message`` matches any glob in ``patterns``.

    Args:
        message: Diagnostic message to test.
        patterns: A single glob or an iterable of globs.

    Returns:
        bool: ``True`` when at least one pattern matches the whole message.
    """

    candidates = (patterns,) if isinstance(patterns, str) else patterns
    return any(_glob_matches(message, pattern) for pattern in candidates)


@dataclass(frozen=True, slots=True)
class MessagePattern:
    """Pattern paired with the dialect used to evaluate it."""

    kind: PatternKind
    pattern: str

    def matches(self, message: str) -> bool:
        """Return ``True`` when ``message`` satisfies this pattern.

        Regex patterns use search semantics; substring patterns are
        case-sensitive containment checks.
        """

        if self.kind is PatternKind.GLOB:
            return _glob_matches(message, self.pattern)
        if self.kind is PatternKind.REGEX:
            return re.search(self.pattern, message) is not None
        return self.pattern in message


def first_match(message: str, rules: Iterable[MessagePattern]) -> MessagePattern | None:
    """Return the first rule in ``rules`` that matches ``message``.

    Args:
        message: Diagnostic message to test.
        rules: Ordered rule table evaluated top to bottom.

    Returns:
        MessagePattern | None: Matching rule, or ``None`` when nothing matches.
    """

    for rule in rules:
        if rule.matches(message):
            return rule
    return None


def filter_by_glob(diagnostics: Sequence[DiagnosticT], patterns: str | Iterable[str]) -> list[DiagnosticT]:
    """Return diagnostics whose message matches any glob in ``patterns``."""

    globs = (patterns,) if isinstance(patterns, str) else tuple(patterns)
    return [diagnostic for diagnostic in diagnostics if matches(diagnostic.message, globs)]


def filter_by_regex(diagnostics: Sequence[DiagnosticT], expression: str | re.Pattern[str]) -> list[DiagnosticT]:
    """Return diagnostics whose message contains a match for ``expression``.

    Raises:
        re.error: If ``expression`` is not a valid regular expression.
    """

    compiled = expression if isinstance(expression, re.Pattern) else re.compile(expression)
    return [diagnostic for diagnostic in diagnostics if compiled.search(diagnostic.message)]


def filter_by_substring(diagnostics: Sequence[DiagnosticT], needles: str | Iterable[str]) -> list[DiagnosticT]:
    """Return diagnostics whose message contains any of ``needles``."""

    terms = (needles,) if isinstance(needles, str) else tuple(needles)
    return [diagnostic for diagnostic in diagnostics if any(term in diagnostic.message for term in terms)]


__all__ = [
    "HasMessage",
    "MessagePattern",
    "PatternKind",
    "filter_by_glob",
    "filter_by_regex",
    "filter_by_substring",
    "first_match",
    "matches",
]
