# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Inline suppression comments."""

from __future__ import annotations

from .inline import InlineSuppressionParser, SuppressionDirective

__all__ = ["InlineSuppressionParser", "SuppressionDirective"]
