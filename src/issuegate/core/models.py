# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the issuegate package."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .severity import Severity

type JsonScalar = str | int | float | bool | None
type JsonValue = JsonScalar | list[JsonValue] | dict[str, JsonValue]


class Finding(BaseModel):
    """Immutable issue reported by one analyzer at a source location.

    ``line`` is ``None`` for application-wide findings that are not tied to a
    single line, for example a misconfigured environment file.
    """

    model_config = ConfigDict(frozen=True)

    source_path: str | None = None
    line: int | None = Field(default=None, ge=1)
    message: str
    severity: Severity
    recommendation: str = ""
    metadata: dict[str, JsonValue] = Field(default_factory=dict)

    @field_validator("source_path", mode="before")
    @classmethod
    def _coerce_source_path(cls, value: str | Path | None) -> str | None:
        """Store paths as strings with forward slashes.

        Args:
            value: Path emitted by the analyzer, or ``None``.

        Returns:
            str | None: Path string using ``/`` separators.
        """

        if value is None:
            return None
        return str(value).replace("\\", "/")


class AnalyzerStatus(str, Enum):
    """Outcome an analyzer reports for its own run."""

    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"
    SKIPPED = "skipped"
    ERROR = "error"

    @property
    def is_failure(self) -> bool:
        """Return ``True`` for statuses that count against the run."""

        return self in (AnalyzerStatus.FAILED, AnalyzerStatus.WARNING)


class AnalyzerRun(BaseModel):
    """Result bundle an analyzer hands to the reconciliation pipeline."""

    model_config = ConfigDict(frozen=True)

    analyzer_id: str
    status: AnalyzerStatus
    findings: tuple[Finding, ...] = Field(default_factory=tuple)
    message: str = ""
    metadata: dict[str, JsonValue] = Field(default_factory=dict)

    @property
    def name(self) -> str:
        """Return the display name of the analyzer, falling back to its id."""

        candidate = self.metadata.get("name")
        return candidate if isinstance(candidate, str) and candidate else self.analyzer_id

    @classmethod
    def from_exception(cls, analyzer_id: str, exc: BaseException, *, label: str = "Analysis") -> AnalyzerRun:
        """Translate ``exc`` into a non-fatal ``error`` run.

        Args:
            analyzer_id: Identifier of the analyzer that raised.
            exc: Exception captured by the analyzer.
            label: Prefix used in the human readable message.

        Returns:
            AnalyzerRun: Error run carrying the exception details in metadata.
        """

        return cls(
            analyzer_id=analyzer_id,
            status=AnalyzerStatus.ERROR,
            message=f"{label} failed: {exc}",
            metadata={
                "exception": type(exc).__name__,
                "error_message": str(exc),
            },
        )


__all__ = ["AnalyzerRun", "AnalyzerStatus", "Finding", "JsonScalar", "JsonValue"]
