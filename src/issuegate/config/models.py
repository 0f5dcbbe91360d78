# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pydantic configuration models for the reconciliation pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

type FailOn = Literal["never", "critical", "high", "medium", "low"]

DEFAULT_ANALYZE_PATHS: Final[tuple[str, ...]] = ("app", "config", "database", "routes")
DEFAULT_EXCLUDED_PATHS: Final[tuple[str, ...]] = (
    "vendor/*",
    "node_modules/*",
    "storage/*",
    "bootstrap/cache/*",
)
DEFAULT_BASELINE_FILE: Final[str] = ".issuegate-baseline.json"
DEFAULT_SUPPRESSION_KEYWORD: Final[str] = "@issuegate-ignore"
DEFAULT_ENGINE_LEVEL: Final[int] = 5
MAX_ENGINE_LEVEL: Final[int] = 9
DEFAULT_MAX_FINDINGS: Final[int] = 50


class PathsConfig(BaseModel):
    """Inclusion and exclusion rules applied to finding locations."""

    model_config = ConfigDict(validate_assignment=True)

    analyze: list[str] = Field(default_factory=lambda: list(DEFAULT_ANALYZE_PATHS))
    excluded: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_PATHS))

    @field_validator("analyze", "excluded", mode="before")
    @classmethod
    def _coerce_single_entry(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return value


class StaticAnalysisConfig(BaseModel):
    """Settings for the external static-analysis engine."""

    model_config = ConfigDict(validate_assignment=True)

    enabled: bool = True
    level: int = Field(default=DEFAULT_ENGINE_LEVEL, ge=0, le=MAX_ENGINE_LEVEL)
    binary: Path | None = None
    extra_options: list[str] = Field(default_factory=list)
    timeout: float | None = Field(default=None, gt=0)
    max_findings: int = Field(default=DEFAULT_MAX_FINDINGS, ge=1)


class BaselineConfig(BaseModel):
    """Location of the persisted baseline document."""

    model_config = ConfigDict(validate_assignment=True)

    file: Path = Field(default_factory=lambda: Path(DEFAULT_BASELINE_FILE))

    def resolve(self, root: Path) -> Path:
        """Return the baseline path anchored at ``root`` when relative.

        Args:
            root: Project root directory.

        Returns:
            Path: Absolute location of the baseline file.
        """

        return self.file if self.file.is_absolute() else root / self.file


class SuppressionConfig(BaseModel):
    """Inline suppression marker settings."""

    model_config = ConfigDict(validate_assignment=True)

    enabled: bool = True
    keyword: str = DEFAULT_SUPPRESSION_KEYWORD

    @field_validator("keyword")
    @classmethod
    def _require_keyword(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped or any(char.isspace() for char in stripped):
            raise ValueError("suppression keyword must be a single non-empty token")
        return stripped


class ReportingConfig(BaseModel):
    """Failure thresholds and presentation flags."""

    model_config = ConfigDict(validate_assignment=True)

    fail_on: FailOn = "critical"
    fail_threshold: int | None = Field(default=None, ge=0, le=100)
    dont_report: list[str] = Field(default_factory=list)
    emoji: bool = True
    color: bool = True

    @field_validator("fail_on", mode="before")
    @classmethod
    def _lower_fail_on(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class IssuegateConfig(BaseModel):
    """Top-level configuration aggregating every section."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    paths: PathsConfig = Field(default_factory=PathsConfig)
    static_analysis: StaticAnalysisConfig = Field(default_factory=StaticAnalysisConfig)
    baseline: BaselineConfig = Field(default_factory=BaselineConfig)
    suppression: SuppressionConfig = Field(default_factory=SuppressionConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-compatible mapping of the configuration."""

        return self.model_dump(mode="json")


__all__ = [
    "DEFAULT_ANALYZE_PATHS",
    "DEFAULT_BASELINE_FILE",
    "DEFAULT_ENGINE_LEVEL",
    "DEFAULT_EXCLUDED_PATHS",
    "DEFAULT_MAX_FINDINGS",
    "DEFAULT_SUPPRESSION_KEYWORD",
    "MAX_ENGINE_LEVEL",
    "BaselineConfig",
    "FailOn",
    "IssuegateConfig",
    "PathsConfig",
    "ReportingConfig",
    "StaticAnalysisConfig",
    "SuppressionConfig",
]
