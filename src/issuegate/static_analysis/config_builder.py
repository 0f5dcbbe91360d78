# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ephemeral NEON configuration assembly for the static-analysis engine."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Final

logger = logging.getLogger(__name__)

CONFIG_SUFFIX: Final[str] = ".neon"
CONFIG_PREFIX: Final[str] = "issuegate-engine-"
_INDENT: Final[str] = "    "


@dataclass(frozen=True, slots=True)
class ExtensionFragment:
    """Framework extension included only when its package is installed.

    Attributes:
        package: Composer package name, used for log output.
        include: Root-relative path of the extension's NEON fragment.
    """

    package: str
    include: str

    def resolve(self, root: Path) -> Path | None:
        """Return the absolute fragment path when it exists under ``root``."""

        candidate = root / self.include
        return candidate if candidate.is_file() else None


KNOWN_EXTENSIONS: Final[tuple[ExtensionFragment, ...]] = (
    ExtensionFragment("larastan/larastan", "vendor/larastan/larastan/extension.neon"),
    ExtensionFragment("nesbot/carbon", "vendor/nesbot/carbon/extension.neon"),
)

# Canonical name first; the distributable variant is used only when it is alone.
PROJECT_CONFIG_NAMES: Final[tuple[str, ...]] = ("phpstan.neon", "phpstan.neon.dist")


def detect_extensions(root: Path, extensions: Sequence[ExtensionFragment] = KNOWN_EXTENSIONS) -> list[Path]:
    """Return fragment paths for every extension physically present under ``root``."""

    found: list[Path] = []
    for extension in extensions:
        resolved = extension.resolve(root)
        if resolved is not None:
            logger.debug("Including %s extension from %s", extension.package, resolved)
            found.append(resolved)
    return found


def find_project_config(root: Path, names: Sequence[str] = PROJECT_CONFIG_NAMES) -> Path | None:
    """Return the first existing project configuration in ``names`` order."""

    for name in names:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def _quote(value: str) -> str:
    """Return ``value`` as a single-quoted NEON string."""

    escaped = value.replace("'", "''")
    return f"'{escaped}'"


def render_config(level: int, paths: Sequence[Path], includes: Sequence[Path]) -> str:
    """Render the NEON document handed to the engine.

    Args:
        level: Strictness level written to ``parameters.level``.
        paths: Absolute analysis paths written to ``parameters.paths``.
        includes: Fragments listed under ``includes`` in order.

    Returns:
        str: NEON text terminated by a newline.
    """

    lines: list[str] = []
    if includes:
        lines.append("includes:")
        lines.extend(f"{_INDENT}- {_quote(os.fspath(include))}" for include in includes)
        lines.append("")
    lines.append("parameters:")
    lines.append(f"{_INDENT}level: {level}")
    if paths:
        lines.append(f"{_INDENT}paths:")
        lines.extend(f"{_INDENT * 2}- {_quote(os.fspath(path))}" for path in paths)
    return "\n".join(lines) + "\n"


def build_config(
    root: Path,
    level: int,
    paths: Sequence[Path],
    *,
    extensions: Sequence[ExtensionFragment] = KNOWN_EXTENSIONS,
    project_configs: Sequence[str] = PROJECT_CONFIG_NAMES,
) -> str:
    """Assemble the merged configuration for a run rooted at ``root``.

    Extension fragments come first so the project's own configuration can
    override them; ``level`` and ``paths`` are set last and win over both.
    """

    includes = detect_extensions(root, extensions)
    project_config = find_project_config(root, project_configs)
    if project_config is not None:
        includes.append(project_config)
    return render_config(level, paths, includes)


@contextmanager
def ephemeral_config(content: str, *, directory: Path | None = None) -> Iterator[Path]:
    """Write ``content`` to a temporary NEON file removed when the block exits.

    Args:
        content: NEON document to persist.
        directory: Optional directory for the temporary file.

    Yields:
        Path: Location of the temporary configuration.
    """

    handle, name = tempfile.mkstemp(prefix=CONFIG_PREFIX, suffix=CONFIG_SUFFIX, dir=directory)
    path = Path(name)
    try:
        with os.fdopen(handle, "w", encoding="utf-8") as stream:
            stream.write(content)
        yield path
    finally:
        path.unlink(missing_ok=True)


__all__ = [
    "KNOWN_EXTENSIONS",
    "PROJECT_CONFIG_NAMES",
    "ExtensionFragment",
    "build_config",
    "detect_extensions",
    "ephemeral_config",
    "find_project_config",
    "render_config",
]
