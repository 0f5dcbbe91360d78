# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Message pattern matching for diagnostic filtering."""

from __future__ import annotations

from .patterns import (
    HasMessage,
    MessagePattern,
    PatternKind,
    filter_by_glob,
    filter_by_regex,
    filter_by_substring,
    first_match,
    matches,
)

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
