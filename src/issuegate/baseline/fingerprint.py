# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Content hashes identifying a finding across runs and machines."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Final

from ..core.models import Finding
from ..filesystem.paths import normalize_path_key, to_posix

UNKNOWN_PATH: Final[str] = "unknown"


def relative_source_path(source_path: str | None, root: Path | None = None) -> str:
    """Return the root-relative POSIX form of ``source_path``.

    Args:
        source_path: Path reported by the analyzer, absolute or relative.
        root: Project root used to relativise absolute paths. Defaults to the
            current working directory, so absolute paths never reach a hash.

    Returns:
        str: Portable path key, or ``"unknown"`` when no path was reported.
    """

    if not source_path:
        return UNKNOWN_PATH
    text = to_posix(source_path)
    if Path(text).is_absolute():
        return normalize_path_key(text, base_dir=root)
    while text.startswith("./"):
        text = text[2:]
    return text


def fingerprint(relative_path: str | None, line: int | None, message: str) -> str:
    """Return the SHA-256 hex digest identifying ``(relative_path, line, message)``.

    The digest covers compact JSON with keys in the fixed order ``file``,
    ``line``, ``message``; a missing path is encoded as ``"unknown"``.
    """

    payload = json.dumps(
        {"file": relative_path or UNKNOWN_PATH, "line": line, "message": message},
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def fingerprint_finding(finding: Finding, root: Path | None = None) -> str:
    """Return the fingerprint of ``finding`` using its root-relative path."""

    return fingerprint(relative_source_path(finding.source_path, root), finding.line, finding.message)


__all__ = ["UNKNOWN_PATH", "fingerprint", "fingerprint_finding", "relative_source_path"]
