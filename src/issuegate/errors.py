# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across issuegate components."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class IssuegateError(Exception):
    """Base class for errors raised by issuegate."""


class ConfigError(IssuegateError):
    """Raised when configuration input is invalid."""


class EngineExecutionError(IssuegateError):
    """Raised when the static-analysis engine cannot run to completion."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        """Initialise the error with captured subprocess metadata.

        Args:
            message: Human readable description of the failure.
            command: Command sequence that was executed, when known.
            returncode: Exit status reported by the engine, when it started.
            stderr: Captured standard error stream.
        """

        super().__init__(message)
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


class CorruptBaselineError(IssuegateError):
    """Raised by strict baseline loads when the document cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Baseline at {path} is corrupt: {reason}")
        self.path = path
        self.reason = reason


__all__ = [
    "ConfigError",
    "CorruptBaselineError",
    "EngineExecutionError",
    "IssuegateError",
]
