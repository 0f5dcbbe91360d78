# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-line suppression comments written by developers.

Two placements are recognised::

    // @issuegate-ignore sql-injection
    $query = "...";                      <- covered by the line above

    $query = "..."; # @issuegate-ignore  <- covers only this line

Markers may appear in ``//``, ``#``, ``/* */`` and ``/** */`` comments. A
marker without arguments suppresses every analyzer; otherwise only the listed
analyzer ids (compared case-insensitively) are suppressed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ..config.models import DEFAULT_SUPPRESSION_KEYWORD

if TYPE_CHECKING:
    from ..config.models import SuppressionConfig

logger = logging.getLogger(__name__)

_COMMENT_OPENER: Final[str] = r"(?P<opener>//|#|/\*\*?)"
_BLOCK_CLOSE: Final[str] = "*/"
_ID_LIST: Final[str] = r"(?:[ \t]+(?P<ids>[\w-]+(?:[ \t]*,[ \t]*[\w-]+)*))?"


@dataclass(frozen=True, slots=True)
class SuppressionDirective:
    """Parsed suppression marker.

    Attributes:
        line: 1-based line holding the marker.
        analyzers: Lower-cased analyzer ids; empty for a bare marker.
        standalone: ``True`` when the marker occupies its whole line.
    """

    line: int
    analyzers: frozenset[str] = frozenset()
    standalone: bool = False

    @property
    def is_bare(self) -> bool:
        """Return ``True`` when the directive suppresses every analyzer."""

        return not self.analyzers

    def applies_to(self, analyzer_id: str) -> bool:
        """Return ``True`` when findings from ``analyzer_id`` are suppressed."""

        return self.is_bare or analyzer_id.lower() in self.analyzers


class InlineSuppressionParser:
    """Decide whether a finding's line carries a suppression marker.

    File contents are cached for the lifetime of the instance; build a fresh
    parser per run so edits between runs are observed.
    """

    def __init__(self, keyword: str = DEFAULT_SUPPRESSION_KEYWORD, *, root: Path | None = None) -> None:
        """Compile the marker expressions for ``keyword``.

        Args:
            keyword: Marker text, matched case-insensitively.
            root: Directory that relative file paths are resolved against.
                Defaults to the current working directory.
        """

        self._keyword = keyword
        self._root = root
        marker = rf"{re.escape(keyword)}(?![\w-]){_ID_LIST}"
        self._trailing = re.compile(rf"{_COMMENT_OPENER}[ \t]*{marker}", re.IGNORECASE)
        self._standalone = re.compile(rf"[ \t]*{_COMMENT_OPENER}[ \t]*{marker}", re.IGNORECASE)
        self._cache: dict[Path, tuple[str, ...]] = {}

    @classmethod
    def from_config(cls, config: SuppressionConfig, root: Path | None = None) -> InlineSuppressionParser:
        """Build a parser from the ``suppression`` configuration section."""

        return cls(config.keyword, root=root)

    @property
    def keyword(self) -> str:
        """Return the marker keyword."""

        return self._keyword

    def is_line_suppressed(self, file: str | Path, line: int, analyzer_id: str) -> bool:
        """Return ``True`` when ``analyzer_id`` findings at ``file:line`` are suppressed.

        Args:
            file: Absolute or root-relative source path.
            line: 1-based line of the finding.
            analyzer_id: Identifier of the analyzer that produced the finding.

        Returns:
            bool: ``False`` for lines below ``1``, unreadable files, and lines
            without an applicable marker.
        """

        directive = self.directive_for(file, line)
        return directive is not None and directive.applies_to(analyzer_id)

    def directive_for(self, file: str | Path, line: int) -> SuppressionDirective | None:
        """Return the directive governing ``file:line``.

        The target line is inspected first. Only when it carries no marker is
        the previous line consulted, and there the marker must stand alone.

        Args:
            file: Absolute or root-relative source path.
            line: 1-based line of interest.

        Returns:
            SuppressionDirective | None: Directive in effect, or ``None``.
        """

        if line < 1:
            return None
        lines = self._lines(file)
        if line > len(lines):
            return None

        match = self._trailing.search(lines[line - 1])
        if match is not None:
            return self._directive(match, line, standalone=self._match_standalone(lines[line - 1]) is not None)

        if line >= 2:
            match = self._match_standalone(lines[line - 2])
            if match is not None:
                return self._directive(match, line - 1, standalone=True)
        return None

    def clear_cache(self) -> None:
        """Drop every cached file."""

        self._cache.clear()

    def _match_standalone(self, text: str) -> re.Match[str] | None:
        """Return the marker match when it is the only content of ``text``.

        A block comment must close, if it closes at all, with nothing but
        whitespace after it.
        """

        match = self._standalone.match(text)
        if match is None or not match.group("opener").startswith("/*"):
            return match
        tail = text[match.end() :]
        close = tail.find(_BLOCK_CLOSE)
        if close != -1 and tail[close + len(_BLOCK_CLOSE) :].strip():
            return None
        return match

    def _resolve(self, file: str | Path) -> Path:
        path = Path(file)
        if not path.is_absolute():
            path = (self._root or Path.cwd()) / path
        return path

    def _lines(self, file: str | Path) -> tuple[str, ...]:
        path = self._resolve(file)
        cached = self._cache.get(path)
        if cached is not None:
            return cached
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.debug("Cannot read %s for suppression markers: %s", path, exc)
            lines: tuple[str, ...] = ()
        else:
            lines = tuple(content.split("\n"))
        self._cache[path] = lines
        return lines

    @staticmethod
    def _directive(match: re.Match[str], line: int, *, standalone: bool) -> SuppressionDirective:
        raw_ids = match.group("ids") or ""
        analyzers = frozenset(token.strip().lower() for token in raw_ids.split(",") if token.strip())
        return SuppressionDirective(line=line, analyzers=analyzers, standalone=standalone)


__all__ = ["InlineSuppressionParser", "SuppressionDirective"]
