# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels attached to analyzer findings."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Return the numeric rank of the severity, higher is more severe."""

        return _SEVERITY_RANKS[self]


_SEVERITY_RANKS: Final[dict[Severity, int]] = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


def parse_severity(value: str | Severity, default: Severity | None = None) -> Severity:
    """Coerce ``value`` into a :class:`Severity`.

    Args:
        value: Severity name in any letter case, or an existing enum member.
        default: Severity returned when ``value`` is not recognised.

    Returns:
        Severity: Matching severity level.

    Raises:
        ValueError: If ``value`` is unknown and no ``default`` is supplied.
    """

    if isinstance(value, Severity):
        return value
    try:
        return Severity(value.strip().lower())
    except ValueError:
        if default is not None:
            return default
        raise


def severity_at_least(severity: Severity, threshold: Severity) -> bool:
    """Return ``True`` when ``severity`` meets or exceeds ``threshold``."""

    return severity.rank >= threshold.rank


__all__ = ["Severity", "parse_severity", "severity_at_least"]
