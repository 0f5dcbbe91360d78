# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reconciliation of analyzer runs against scope, suppressions, and baseline."""

from __future__ import annotations

from .orchestrator import ReconciliationOrchestrator
from .report import ReconciledResult, ReconciliationReport

__all__ = ["ReconciledResult", "ReconciliationOrchestrator", "ReconciliationReport"]
