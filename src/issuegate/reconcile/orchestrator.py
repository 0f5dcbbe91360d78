# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compose scope, suppression, and baseline decisions per analyzer run."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ..baseline.fingerprint import fingerprint_finding
from ..baseline.models import BaselineDocument
from ..baseline.store import BaselineStore
from ..core.models import AnalyzerRun, AnalyzerStatus, Finding
from ..paths.filter import PathFilter
from ..suppression.inline import InlineSuppressionParser
from .report import ReconciledResult, ReconciliationReport

if TYPE_CHECKING:
    from ..config.models import FailOn, IssuegateConfig

logger = logging.getLogger(__name__)

BASELINED_MESSAGE: Final[str] = "All issues are in baseline"
DONT_REPORT_MESSAGE: Final[str] = "Analyzer is listed in the baseline's dont_report"
SUPPRESSED_MESSAGE: Final[str] = "All issues are suppressed or out of scope"


class ReconciliationOrchestrator:
    """Reduce analyzer runs to their reportable findings.

    Each finding passes through, in order: the path filter (out-of-scope
    findings are dropped), inline suppression markers (dropped without
    counting as failures), and baseline membership (accepted findings do not
    fail the run). What remains is reportable. Every collaborator is optional;
    a missing one lets every finding through that stage.
    """

    def __init__(
        self,
        root: Path,
        path_filter: PathFilter | None = None,
        suppressions: InlineSuppressionParser | None = None,
        baseline: BaselineStore | BaselineDocument | None = None,
        dont_report: Iterable[str] = (),
        fail_on: FailOn = "critical",
        fail_threshold: int | None = None,
    ) -> None:
        self._root = root
        self._path_filter = path_filter
        self._suppressions = suppressions
        self._baseline = baseline.load() if isinstance(baseline, BaselineStore) else baseline
        self._dont_report = frozenset(dont_report)
        self._fail_on: FailOn = fail_on
        self._fail_threshold = fail_threshold

    @classmethod
    def from_config(cls, config: IssuegateConfig, root: Path, *, use_baseline: bool = True) -> ReconciliationOrchestrator:
        """Build an orchestrator wired from the loaded configuration.

        Args:
            config: Effective configuration.
            root: Project root.
            use_baseline: Whether findings should be compared to the baseline file.

        Returns:
            ReconciliationOrchestrator: Orchestrator with fresh collaborators.
        """

        suppressions = (
            InlineSuppressionParser.from_config(config.suppression, root) if config.suppression.enabled else None
        )
        baseline = BaselineStore(config.baseline.resolve(root)) if use_baseline else None
        return cls(
            root,
            path_filter=PathFilter.from_config(config.paths, root),
            suppressions=suppressions,
            baseline=baseline,
            dont_report=config.reporting.dont_report,
            fail_on=config.reporting.fail_on,
            fail_threshold=config.reporting.fail_threshold,
        )

    @property
    def dont_report(self) -> frozenset[str]:
        """Return analyzer ids that never fail the run."""

        return self._dont_report

    def reconcile(self, run: AnalyzerRun) -> ReconciledResult:
        """Classify every finding of ``run`` and derive the resulting status.

        A failed or warning run left without reportable findings passes. It is
        flagged ``baselined_only`` when the baseline absorbed at least one
        finding, or when it had no findings and its id is in the baseline's
        ``dont_report``.

        Args:
            run: Results handed over by an analyzer.

        Returns:
            ReconciledResult: Partitioned findings and the reconciled status.
        """

        reportable: list[Finding] = []
        suppressed: list[Finding] = []
        baselined: list[Finding] = []
        out_of_scope: list[Finding] = []
        for finding in run.findings:
            if not self._in_scope(finding):
                out_of_scope.append(finding)
            elif self._is_suppressed(finding, run.analyzer_id):
                suppressed.append(finding)
            elif self._is_baselined(finding, run.analyzer_id):
                baselined.append(finding)
            else:
                reportable.append(finding)

        status = run.status
        message = run.message
        baselined_only = False
        if run.status.is_failure and not reportable:
            if baselined:
                status, message, baselined_only = AnalyzerStatus.PASSED, BASELINED_MESSAGE, True
            elif run.findings:
                status, message = AnalyzerStatus.PASSED, SUPPRESSED_MESSAGE
            elif self._baseline is not None and run.analyzer_id in self._baseline.dont_report:
                status, message, baselined_only = AnalyzerStatus.PASSED, DONT_REPORT_MESSAGE, True

        if len(run.findings) != len(reportable):
            logger.debug(
                "%s: %d reportable, %d suppressed, %d baselined, %d out of scope",
                run.analyzer_id,
                len(reportable),
                len(suppressed),
                len(baselined),
                len(out_of_scope),
            )
        return ReconciledResult(
            analyzer_id=run.analyzer_id,
            status=status,
            original_status=run.status,
            message=message,
            reportable=tuple(reportable),
            suppressed=tuple(suppressed),
            baselined=tuple(baselined),
            out_of_scope=tuple(out_of_scope),
            baselined_only=baselined_only,
            metadata=run.metadata,
        )

    def reconcile_all(self, runs: Iterable[AnalyzerRun]) -> ReconciliationReport:
        """Reconcile ``runs`` sequentially into a report carrying the failure policy."""

        return ReconciliationReport(
            results=tuple(self.reconcile(run) for run in runs),
            dont_report=self._dont_report,
            fail_on=self._fail_on,
            fail_threshold=self._fail_threshold,
        )

    def _in_scope(self, finding: Finding) -> bool:
        if self._path_filter is None or not finding.source_path:
            return True
        return self._path_filter.should_analyze(finding.source_path)

    def _is_suppressed(self, finding: Finding, analyzer_id: str) -> bool:
        if self._suppressions is None or not finding.source_path or finding.line is None:
            return False
        path = Path(finding.source_path)
        if not path.is_absolute():
            path = self._root / path
        return self._suppressions.is_line_suppressed(path, finding.line, analyzer_id)

    def _is_baselined(self, finding: Finding, analyzer_id: str) -> bool:
        if self._baseline is None:
            return False
        return fingerprint_finding(finding, self._root) in self._baseline.hashes(analyzer_id)


__all__ = ["ReconciliationOrchestrator"]
