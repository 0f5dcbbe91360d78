# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Baseline document models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field

BASELINE_GENERATOR: Final[str] = "issuegate baseline"
BASELINE_VERSION: Final[str] = "1.0.0"
TOTAL_ISSUES_FIELD: Final[str] = "total_issues"


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO 8601 string with seconds precision."""

    return datetime.now(UTC).replace(microsecond=0).isoformat()


class BaselineEntry(BaseModel):
    """Accepted finding recorded under an analyzer id."""

    model_config = ConfigDict(frozen=True)

    type: Literal["hash"] = "hash"
    path: str
    line: int | None = None
    message: str
    hash: str


class BaselineDocument(BaseModel):
    """Persisted set of accepted findings and wholesale-suppressed analyzers.

    ``total_issues`` is derived and only written for human readers; it is
    ignored when a document is read back.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    generated_at: str = Field(default_factory=utc_timestamp)
    generator: str = BASELINE_GENERATOR
    version: str = BASELINE_VERSION
    errors: dict[str, tuple[BaselineEntry, ...]] = Field(default_factory=dict)
    dont_report: tuple[str, ...] = ()

    @property
    def total_issues(self) -> int:
        """Return the number of recorded entries across every analyzer."""

        return sum(len(entries) for entries in self.errors.values())

    def hashes(self, analyzer_id: str) -> frozenset[str]:
        """Return the fingerprints recorded for ``analyzer_id``."""

        return frozenset(entry.hash for entry in self.errors.get(analyzer_id, ()))

    def is_empty(self) -> bool:
        """Return ``True`` when nothing is baselined."""

        return not self.dont_report and self.total_issues == 0

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready mapping written to disk."""

        return {
            "generated_at": self.generated_at,
            "generator": self.generator,
            "version": self.version,
            TOTAL_ISSUES_FIELD: self.total_issues,
            "dont_report": list(self.dont_report),
            "errors": {
                analyzer_id: [entry.model_dump(mode="json") for entry in entries]
                for analyzer_id, entries in self.errors.items()
            },
        }


__all__ = [
    "BASELINE_GENERATOR",
    "BASELINE_VERSION",
    "BaselineDocument",
    "BaselineEntry",
    "utc_timestamp",
]
