# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for turning analyzer-reported paths into stable, root-relative keys."""

from __future__ import annotations

import os
from os import PathLike
from pathlib import Path

_Pathish = str | PathLike[str] | Path


def to_posix(path: _Pathish) -> str:
    """Return ``path`` as a string using forward slashes only.

    Args:
        path: Path supplied by an analyzer or configuration entry.

    Returns:
        str: Path text with Windows separators replaced.
    """

    return os.fspath(path).replace("\\", "/")


def _best_effort_resolve(path: Path) -> Path:
    """Return ``path`` resolved where possible without raising.

    Args:
        path: Candidate path to resolve.

    Returns:
        Path: Absolute variant when resolution succeeds; otherwise the closest
        achievable approximation.
    """

    try:
        return path.resolve(strict=False)
    except (OSError, RuntimeError):
        return path if path.is_absolute() else path.absolute()


def normalize_path(path: _Pathish, *, base_dir: _Pathish | None = None) -> Path:
    """Return ``path`` relative to ``base_dir`` when the two share a lineage.

    Relative inputs are interpreted against ``base_dir`` so that ``app/X.php``
    and ``/project/app/X.php`` yield the same result for a project rooted at
    ``/project``.

    Args:
        path: Filesystem path supplied by the caller.
        base_dir: Base directory used to relativise the path. Defaults to
            ``Path.cwd()`` when omitted.

    Returns:
        Path: Relative path when ``path`` lives under ``base_dir``, a ``..``
        path when it does not, or the resolved absolute path when no relative
        form exists (different drives).

    Raises:
        ValueError: If ``path`` is ``None``.
    """

    if path is None:
        raise ValueError("path must not be None")

    raw_path = Path(to_posix(path)).expanduser()
    base = _best_effort_resolve(Path.cwd() if base_dir is None else Path(base_dir).expanduser())
    candidate = _best_effort_resolve(raw_path if raw_path.is_absolute() else base / raw_path)

    try:
        return candidate.relative_to(base)
    except ValueError:
        try:
            return Path(os.path.relpath(candidate, base))
        except ValueError:
            return candidate


def normalize_path_key(path: _Pathish, *, base_dir: _Pathish | None = None) -> str:
    """Return the POSIX form of :func:`normalize_path`.

    Args:
        path: Path for which to build the key.
        base_dir: Optional base directory used for relativisation.

    Returns:
        str: POSIX-style normalised representation; ``"."`` for the base itself.
    """

    return normalize_path(path, base_dir=base_dir).as_posix()


__all__ = ("normalize_path", "normalize_path_key", "to_posix")
