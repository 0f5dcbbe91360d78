# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reconciled analyzer results and the aggregate run report."""

from __future__ import annotations

import math
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from ..config.models import FailOn
from ..core.models import AnalyzerRun, AnalyzerStatus, Finding, JsonValue
from ..core.severity import parse_severity, severity_at_least


class ReconciledResult(BaseModel):
    """Analyzer run after scope, suppression, and baseline filtering.

    Attributes:
        analyzer_id: Identifier of the analyzer.
        status: Status after reconciliation.
        original_status: Status the analyzer reported for itself.
        message: Human readable summary.
        reportable: Findings that remain and determine the outcome.
        suppressed: Findings dropped by inline suppression markers.
        baselined: Findings whose fingerprint is in the baseline.
        out_of_scope: Findings outside the configured scan scope.
        baselined_only: ``True`` when the run would have failed but every
            remaining failure is accepted by the baseline.
    """

    model_config = ConfigDict(frozen=True)

    analyzer_id: str
    status: AnalyzerStatus
    original_status: AnalyzerStatus
    message: str = ""
    reportable: tuple[Finding, ...] = ()
    suppressed: tuple[Finding, ...] = ()
    baselined: tuple[Finding, ...] = ()
    out_of_scope: tuple[Finding, ...] = ()
    baselined_only: bool = False
    metadata: dict[str, JsonValue] = Field(default_factory=dict)

    def to_run(self) -> AnalyzerRun:
        """Return an :class:`AnalyzerRun` carrying only reportable findings."""

        return AnalyzerRun(
            analyzer_id=self.analyzer_id,
            status=self.status,
            findings=self.reportable,
            message=self.message,
            metadata=self.metadata,
        )


class ReconciliationReport(BaseModel):
    """Results of every analyzer in one run.

    ``fail_on`` and ``fail_threshold`` are the configured failure policy used
    by :meth:`should_fail` when no explicit arguments are given.
    """

    model_config = ConfigDict(frozen=True)

    results: tuple[ReconciledResult, ...] = ()
    dont_report: frozenset[str] = frozenset()
    fail_on: FailOn = "critical"
    fail_threshold: int | None = Field(default=None, ge=0, le=100)

    def _with_status(self, status: AnalyzerStatus) -> list[ReconciledResult]:
        return [result for result in self.results if result.status is status]

    def passed(self) -> list[ReconciledResult]:
        """Return results that passed."""

        return self._with_status(AnalyzerStatus.PASSED)

    def failed(self) -> list[ReconciledResult]:
        """Return results that failed."""

        return self._with_status(AnalyzerStatus.FAILED)

    def warnings(self) -> list[ReconciledResult]:
        """Return results that finished with warnings."""

        return self._with_status(AnalyzerStatus.WARNING)

    def skipped(self) -> list[ReconciledResult]:
        """Return results that were skipped."""

        return self._with_status(AnalyzerStatus.SKIPPED)

    def errors(self) -> list[ReconciledResult]:
        """Return results whose analyzer raised."""

        return self._with_status(AnalyzerStatus.ERROR)

    def reportable_findings(self) -> list[Finding]:
        """Return every reportable finding in result order."""

        return [finding for result in self.results for finding in result.reportable]

    def score(self) -> int:
        """Return the share of passed analyzers as a percentage, rounded half up.

        An empty report scores ``100``.
        """

        total = len(self.results)
        if total == 0:
            return 100
        return math.floor(len(self.passed()) * 100 / total + 0.5)

    def should_fail(self, fail_on: FailOn | None = None, *, fail_threshold: int | None = None) -> bool:
        """Return ``True`` when the run must be reported as failing.

        Args:
            fail_on: Lowest severity that fails the run, or ``"never"``.
                Defaults to the report's :attr:`fail_on`.
            fail_threshold: Minimum acceptable :meth:`score`. Defaults to the
                report's :attr:`fail_threshold`.

        Returns:
            bool: ``True`` when the score is below ``fail_threshold`` or a
            failed analyzer outside ``dont_report`` has a reportable finding at
            or above ``fail_on``.
        """

        policy = self.fail_on if fail_on is None else fail_on
        minimum_score = self.fail_threshold if fail_threshold is None else fail_threshold
        if policy == "never":
            return False
        if minimum_score is not None and self.score() < minimum_score:
            return True
        threshold = parse_severity(policy)
        return any(
            severity_at_least(finding.severity, threshold)
            for result in self._counted(self.failed())
            for finding in result.reportable
        )

    def _counted(self, results: Iterable[ReconciledResult]) -> list[ReconciledResult]:
        return [result for result in results if result.analyzer_id not in self.dont_report]


__all__ = ["ReconciledResult", "ReconciliationReport"]
