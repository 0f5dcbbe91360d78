# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime helpers for executing external processes."""

from __future__ import annotations

from .process import CommandOptions, run_command

__all__ = ["CommandOptions", "run_command"]
