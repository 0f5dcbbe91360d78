# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders."""

from __future__ import annotations

from .loader import CONFIG_FILENAME, PYPROJECT_SECTION_KEY, load_config
from .models import (
    BaselineConfig,
    FailOn,
    IssuegateConfig,
    PathsConfig,
    ReportingConfig,
    StaticAnalysisConfig,
    SuppressionConfig,
)

__all__ = [
    "CONFIG_FILENAME",
    "PYPROJECT_SECTION_KEY",
    "BaselineConfig",
    "FailOn",
    "IssuegateConfig",
    "PathsConfig",
    "ReportingConfig",
    "StaticAnalysisConfig",
    "SuppressionConfig",
    "load_config",
]
