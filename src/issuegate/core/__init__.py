# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core models, severities, and runtime helpers."""

from __future__ import annotations

from .models import AnalyzerRun, AnalyzerStatus, Finding, JsonValue
from .severity import Severity, parse_severity, severity_at_least

__all__ = [
    "AnalyzerRun",
    "AnalyzerStatus",
    "Finding",
    "JsonValue",
    "Severity",
    "parse_severity",
    "severity_at_least",
]
