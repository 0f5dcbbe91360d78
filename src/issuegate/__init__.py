# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Issue identity and suppression pipeline for CI scanning tools."""

from __future__ import annotations

from .baseline import BaselineDocument, BaselineStore, fingerprint, generate, merge
from .core.models import AnalyzerRun, AnalyzerStatus, Finding
from .core.severity import Severity
from .matching import matches
from .paths import PathFilter
from .reconcile import ReconciledResult, ReconciliationOrchestrator, ReconciliationReport
from .static_analysis import EngineRun, StaticAnalysisEngine
from .suppression import InlineSuppressionParser

__version__ = "0.1.0"

__all__ = [
    "AnalyzerRun",
    "AnalyzerStatus",
    "BaselineDocument",
    "BaselineStore",
    "EngineRun",
    "Finding",
    "InlineSuppressionParser",
    "PathFilter",
    "ReconciledResult",
    "ReconciliationOrchestrator",
    "ReconciliationReport",
    "Severity",
    "StaticAnalysisEngine",
    "__version__",
    "fingerprint",
    "generate",
    "matches",
    "merge",
]
