# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Scan-scope decisions for finding locations."""

from __future__ import annotations

from .filter import PathFilter

__all__ = ["PathFilter"]
