# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Static-analysis engine adapter."""

from __future__ import annotations

from .config_builder import KNOWN_EXTENSIONS, PROJECT_CONFIG_NAMES, ExtensionFragment, build_config
from .engine import PHPSTAN_PROFILE, EngineOptions, EngineProfile, StaticAnalysisEngine
from .results import (
    BUILTIN_FALSE_POSITIVES,
    EngineDiagnostic,
    EngineRun,
    EngineStatus,
    format_issue_count_message,
)

__all__ = [
    "BUILTIN_FALSE_POSITIVES",
    "KNOWN_EXTENSIONS",
    "PHPSTAN_PROFILE",
    "PROJECT_CONFIG_NAMES",
    "EngineDiagnostic",
    "EngineOptions",
    "EngineProfile",
    "EngineRun",
    "EngineStatus",
    "ExtensionFragment",
    "StaticAnalysisEngine",
    "build_config",
    "format_issue_count_message",
]
