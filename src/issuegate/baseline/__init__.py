# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Issue fingerprints and the persisted baseline."""

from __future__ import annotations

from .fingerprint import UNKNOWN_PATH, fingerprint, fingerprint_finding, relative_source_path
from .models import BaselineDocument, BaselineEntry
from .store import BaselineStore, generate, merge
from .workflow import BaselineSummary, generate_baseline, generate_configured_baseline

__all__ = [
    "UNKNOWN_PATH",
    "BaselineDocument",
    "BaselineEntry",
    "BaselineStore",
    "BaselineSummary",
    "fingerprint",
    "fingerprint_finding",
    "generate",
    "generate_baseline",
    "generate_configured_baseline",
    "merge",
    "relative_source_path",
]
