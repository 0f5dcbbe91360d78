# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-invoked baseline generation and merging."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ..core.logging import fail, info, ok, section, warn
from ..core.models import AnalyzerRun, AnalyzerStatus, Finding
from ..runtime.console import detect_tty
from .models import BaselineDocument
from .store import BaselineStore, generate, merge

if TYPE_CHECKING:
    from ..config.models import IssuegateConfig

logger = logging.getLogger(__name__)

CORRUPT_SUFFIX: Final[str] = ".corrupt"
_IGNORED_STATUSES: Final[frozenset[AnalyzerStatus]] = frozenset({AnalyzerStatus.PASSED, AnalyzerStatus.SKIPPED})


@dataclass(frozen=True, slots=True)
class BaselineSummary:
    """Outcome of :func:`generate_baseline`.

    Attributes:
        document: Document that was (or would have been) written.
        path: Baseline file location.
        written: ``False`` when the file could not be written.
        merged: ``True`` when an existing file was merged.
        new_issues: Entries added relative to the previous file.
        backup_path: Copy of a corrupt file that was replaced, if any.
    """

    document: BaselineDocument
    path: Path
    written: bool
    merged: bool
    new_issues: int
    backup_path: Path | None = None


def collect_baseline_inputs(runs: Iterable[AnalyzerRun]) -> tuple[dict[str, list[Finding]], list[str]]:
    """Split runs into itemised findings and analyzers failing without any.

    Passed and skipped runs are ignored.

    Returns:
        tuple[dict[str, list[Finding]], list[str]]: Findings per analyzer id and
        the ids destined for ``dont_report``.
    """

    findings: dict[str, list[Finding]] = {}
    failed_without_findings: list[str] = []
    for run in runs:
        if run.status in _IGNORED_STATUSES:
            continue
        if run.findings:
            findings.setdefault(run.analyzer_id, []).extend(run.findings)
        elif run.analyzer_id not in failed_without_findings:
            failed_without_findings.append(run.analyzer_id)
    return findings, failed_without_findings


def _backup_corrupt(path: Path) -> Path:
    backup = path.with_name(f"{path.name}{CORRUPT_SUFFIX}")
    shutil.copyfile(path, backup)
    return backup


def generate_baseline(
    runs: Iterable[AnalyzerRun],
    path: Path,
    *,
    merge_existing: bool = False,
    root: Path | None = None,
    use_emoji: bool = True,
    use_color: bool | None = None,
) -> BaselineSummary:
    """Generate (or merge) the baseline file from analyzer runs.

    A corrupt file being merged over is treated as empty, after a copy is
    saved next to it with a ``.corrupt`` suffix; when that copy cannot be made
    the corrupt file is left untouched. Backup and write failures are reported
    on the console and in the summary rather than raised.

    Args:
        runs: Analyzer runs from a full analysis.
        path: Baseline file location.
        merge_existing: Merge with the existing file instead of overwriting it.
        root: Project root used to relativise finding paths. Defaults to the
            current working directory.
        use_emoji: Whether console lines carry emoji prefixes.
        use_color: Explicit colour flag; ``None`` defers to TTY detection.

    Returns:
        BaselineSummary: Details of the generated document.
    """

    section("Baseline", use_color=detect_tty() if use_color is None else use_color)
    run_list = list(runs)
    findings, failed_without_findings = collect_baseline_inputs(run_list)
    names = {run.analyzer_id: run.name for run in run_list}
    for analyzer_id, items in findings.items():
        info(f"{names[analyzer_id]}: {len(items)} issue(s)", use_emoji=use_emoji, use_color=use_color)
    for analyzer_id in failed_without_findings:
        warn(
            f"{names[analyzer_id]}: no specific issues (added to dont_report)",
            use_emoji=use_emoji,
            use_color=use_color,
        )

    fresh = generate(findings, failed_without_findings, root=root)
    store = BaselineStore(path)
    document = fresh
    previous_total = 0
    backup_path: Path | None = None
    merged = merge_existing and store.exists
    if merged:
        info(f"Merging with existing baseline at {path}", use_emoji=use_emoji, use_color=use_color)
        existing = store.load()
        if store.corrupt:
            try:
                backup_path = _backup_corrupt(path)
            except OSError as exc:
                logger.error("Unable to back up corrupt baseline %s: %s", path, exc)
                fail(
                    f"Existing baseline is corrupt and could not be backed up ({exc}); leaving {path} untouched",
                    use_emoji=use_emoji,
                    use_color=use_color,
                )
                return BaselineSummary(fresh, path, False, True, 0)
            warn(
                f"Existing baseline is corrupt; saved a copy to {backup_path} and starting fresh",
                use_emoji=use_emoji,
                use_color=use_color,
            )
        previous_total = existing.total_issues
        document = merge(existing, fresh)

    new_issues = document.total_issues - previous_total
    try:
        store.write(document)
    except OSError as exc:
        logger.error("Unable to write baseline to %s: %s", path, exc)
        fail(f"Unable to write baseline to {path}: {exc}", use_emoji=use_emoji, use_color=use_color)
        return BaselineSummary(document, path, False, merged, new_issues, backup_path)

    ok("Baseline file generated", use_emoji=use_emoji, use_color=use_color)
    info(f"Location: {path}", use_emoji=False, use_color=use_color)
    info(f"Total issues: {document.total_issues}", use_emoji=False, use_color=use_color)
    if document.dont_report:
        info(f"Analyzers in dont_report: {len(document.dont_report)}", use_emoji=False, use_color=use_color)
    if merged:
        info(f"New issues added: {new_issues}", use_emoji=False, use_color=use_color)
    return BaselineSummary(document, path, True, merged, new_issues, backup_path)


def generate_configured_baseline(
    runs: Iterable[AnalyzerRun],
    config: IssuegateConfig,
    root: Path,
    *,
    merge_existing: bool = False,
) -> BaselineSummary:
    """Run :func:`generate_baseline` with the configured file and presentation.

    The baseline location comes from ``config.baseline``; emoji and colour come
    from ``config.reporting``, with colour still subject to TTY detection.
    """

    return generate_baseline(
        runs,
        config.baseline.resolve(root),
        merge_existing=merge_existing,
        root=root,
        use_emoji=config.reporting.emoji,
        use_color=None if config.reporting.color else False,
    )


__all__ = [
    "CORRUPT_SUFFIX",
    "BaselineSummary",
    "collect_baseline_inputs",
    "generate_baseline",
    "generate_configured_baseline",
]
