# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Include/exclude policy deciding whether a path is in scan scope."""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from ..filesystem.paths import normalize_path_key, to_posix

if TYPE_CHECKING:
    from ..config.models import PathsConfig

_GLOB_CHARS = frozenset("*?")
_ROOT_ENTRIES = frozenset({"", "."})


@lru_cache(maxsize=256)
def _compile_path_glob(pattern: str) -> re.Pattern[str]:
    """Translate a path glob where ``*`` spans separators and ``?`` is one character."""

    parts: list[str] = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def _is_glob(entry: str) -> bool:
    return any(char in _GLOB_CHARS for char in entry)


def _resolved(path: Path) -> Path:
    try:
        return path.resolve(strict=False)
    except (OSError, RuntimeError):
        return path


class PathFilter:
    """Decide whether a file belongs to the configured scan scope.

    Exclusion globs always win. An empty inclusion list allows everything that
    is not excluded; otherwise a path must equal, be nested under, or glob-match
    one of the inclusion entries. Comparisons are case-insensitive and operate
    on root-relative POSIX keys, so ``app/X.php``, ``./app/X.php``, and
    ``<root>/app/X.php`` decide identically.
    """

    def __init__(
        self,
        analyze_paths: Iterable[str] = (),
        excluded_paths: Iterable[str] = (),
        root: Path | None = None,
    ) -> None:
        self._root = (root or Path.cwd()).expanduser()
        self._analyze = tuple(self._normalise_entry(entry) for entry in analyze_paths)
        self._excluded = tuple(self._normalise_entry(entry) for entry in excluded_paths)

    @classmethod
    def from_config(cls, config: PathsConfig, root: Path) -> PathFilter:
        """Build a filter from the ``paths`` configuration section.

        Args:
            config: Paths section of the loaded configuration.
            root: Project root that relative entries are anchored to.

        Returns:
            PathFilter: Filter enforcing the configured scope.
        """

        return cls(config.analyze, config.excluded, root)

    @property
    def root(self) -> Path:
        """Return the project root paths are relativised against."""

        return self._root

    @property
    def analyze_paths(self) -> tuple[str, ...]:
        """Return the normalised inclusion entries."""

        return self._analyze

    @property
    def excluded_paths(self) -> tuple[str, ...]:
        """Return the normalised exclusion entries."""

        return self._excluded

    def should_analyze(self, path: str | Path) -> bool:
        """Return ``True`` when ``path`` is inside the scan scope.

        Args:
            path: Absolute or root-relative file path.

        Returns:
            bool: ``False`` when an exclusion matches or no inclusion entry
            covers the path.
        """

        key = self._key(path)
        if any(self._covers(key, pattern) for pattern in self._excluded if pattern):
            return False
        if not self._analyze:
            return True
        return any(self._is_included(key, entry) for entry in self._analyze)

    def _key(self, path: str | Path) -> str:
        text = to_posix(path)
        if Path(text).is_absolute():
            stripped = self._strip_root_prefix(text)
            text = normalize_path_key(text, base_dir=self._root) if stripped is None else stripped
        return self._strip(text).lower()

    def _normalise_entry(self, entry: str) -> str:
        text = to_posix(entry).strip()
        if Path(text).is_absolute():
            # Absolute entries outside the root are read as root-relative.
            text = self._strip_root_prefix(text) or text
        return self._strip(text).lower()

    def _strip_root_prefix(self, text: str) -> str | None:
        folded = text.lower()
        for root in dict.fromkeys((to_posix(self._root), to_posix(_resolved(self._root)))):
            prefix = root.rstrip("/") + "/"
            if folded.startswith(prefix.lower()):
                return text[len(prefix) :] or "."
            if folded == root.rstrip("/").lower():
                return "."
        return None

    @staticmethod
    def _strip(text: str) -> str:
        while text.startswith("./"):
            text = text[2:]
        return text.strip("/")

    @staticmethod
    def _covers(key: str, entry: str) -> bool:
        if _is_glob(entry):
            return _compile_path_glob(entry).fullmatch(key) is not None
        return key == entry or key.startswith(f"{entry}/")

    @classmethod
    def _is_included(cls, key: str, entry: str) -> bool:
        return entry in _ROOT_ENTRIES or cls._covers(key, entry)


__all__ = ["PathFilter"]
