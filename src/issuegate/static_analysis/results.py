# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsing, normalisation, and querying of static-analysis engine output."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Final

from ..core.models import Finding
from ..core.severity import Severity
from ..filesystem.paths import normalize_path_key, to_posix
from ..matching.patterns import (
    MessagePattern,
    PatternKind,
    filter_by_glob,
    filter_by_regex,
    filter_by_substring,
    first_match,
)

DEFAULT_FINDING_LIMIT: Final[int] = 50
DETECTION_METHOD: Final[str] = "static-analysis"

# Diagnostics produced by framework proxy and magic-method constructs that the
# engine cannot see through. Evaluated top to bottom.
BUILTIN_FALSE_POSITIVES: Final[tuple[MessagePattern, ...]] = (
    MessagePattern(PatternKind.REGEX, r"Argument of an invalid type Carbon\\CarbonPeriod supplied for foreach"),
    MessagePattern(PatternKind.REGEX, r"Illuminate\\Support\\HigherOrder\w*Proxy"),
    MessagePattern(PatternKind.REGEX, r"^Call to method \w+\(\) on an unknown class Faker\\\w*Generator\b"),
    MessagePattern(PatternKind.REGEX, r"^Call to an undefined method Faker\\\w*Generator::"),
    MessagePattern(PatternKind.REGEX, r"^Access to property \$\w+ on an unknown class Faker\\\w*Generator\b"),
    MessagePattern(PatternKind.REGEX, r"^Access to an undefined property Faker\\\w*Generator::"),
)

logger = logging.getLogger(__name__)


class EngineStatus(str, Enum):
    """Outcome of a single engine invocation."""

    COMPLETED = "completed"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True, slots=True)
class EngineDiagnostic:
    """Normalised diagnostic with a root-relative POSIX ``file``.

    ``line`` is ``0`` when the engine reported no usable line number.
    """

    file: str
    line: int
    message: str
    identifier: str | None = None


def parse_payload(stdout: str, stderr: str = "") -> Mapping[str, Any] | None:
    """Extract the JSON report object from engine output.

    Stdout is tried first. When it carries noise such as deprecation notices,
    the outermost ``{...}`` span of the combined output is parsed instead.

    Args:
        stdout: Captured standard output.
        stderr: Captured standard error.

    Returns:
        Mapping[str, Any] | None: Decoded report, or ``None`` when no JSON
        object could be recovered.
    """

    candidates = [stdout.strip()]
    combined = f"{stdout}\n{stderr}"
    start, end = combined.find("{"), combined.rfind("}")
    if start != -1 and end > start:
        candidates.append(combined[start : end + 1])
    for candidate in candidates:
        if not candidate:
            continue
        try:
            decoded = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(decoded, Mapping):
            return decoded
    return None


def _coerce_line(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def _relative_file(file: str, root: Path) -> str:
    text = to_posix(file)
    if Path(text).is_absolute():
        return normalize_path_key(text, base_dir=root)
    return text.removeprefix("./")


def flatten_diagnostics(payload: Mapping[str, Any] | None, root: Path) -> list[EngineDiagnostic]:
    """Flatten ``files.<path>.messages[]`` into :class:`EngineDiagnostic` rows.

    Entries of unexpected shape are skipped without raising.

    Args:
        payload: Decoded engine report.
        root: Project root used to relativise absolute file paths.

    Returns:
        list[EngineDiagnostic]: Diagnostics in report order.
    """

    if payload is None:
        return []
    files = payload.get("files")
    if not isinstance(files, Mapping):
        return []

    diagnostics: list[EngineDiagnostic] = []
    for file, file_data in files.items():
        if not isinstance(file, str) or not isinstance(file_data, Mapping):
            continue
        messages = file_data.get("messages")
        if not isinstance(messages, list):
            continue
        relative = _relative_file(file, root)
        for entry in messages:
            if not isinstance(entry, Mapping):
                continue
            identifier = entry.get("identifier")
            diagnostics.append(
                EngineDiagnostic(
                    file=relative,
                    line=_coerce_line(entry.get("line")),
                    message=str(entry.get("message", "")),
                    identifier=identifier if isinstance(identifier, str) else None,
                ),
            )
    return diagnostics


def remove_false_positives(
    diagnostics: Iterable[EngineDiagnostic],
    rules: Sequence[MessagePattern] = BUILTIN_FALSE_POSITIVES,
) -> tuple[list[EngineDiagnostic], int]:
    """Split off diagnostics matching any rule in ``rules``.

    Returns:
        tuple[list[EngineDiagnostic], int]: Retained diagnostics and the number
        removed.
    """

    kept: list[EngineDiagnostic] = []
    removed = 0
    for diagnostic in diagnostics:
        rule = first_match(diagnostic.message, rules)
        if rule is None:
            kept.append(diagnostic)
            continue
        removed += 1
        logger.debug("Dropping known false positive %s:%s (%s)", diagnostic.file, diagnostic.line, rule.pattern)
    return kept, removed


def format_issue_count_message(total: int, shown: int, label: str) -> str:
    """Return ``Found N <label>`` with a ``(showing first M)`` suffix when truncated."""

    if total > shown:
        return f"Found {total} {label} (showing first {shown})"
    return f"Found {total} {label}"


@dataclass(frozen=True, slots=True)
class EngineRun:
    """Result of one :meth:`StaticAnalysisEngine.analyze` call.

    ``diagnostics`` has already had :data:`BUILTIN_FALSE_POSITIVES` removed,
    so every query below operates over the filtered list.
    """

    status: EngineStatus
    diagnostics: tuple[EngineDiagnostic, ...] = ()
    false_positive_count: int = 0
    returncode: int | None = None
    reason: str = ""
    stderr: str = field(default="", repr=False)
    finding_limit: int = DEFAULT_FINDING_LIMIT

    @classmethod
    def unavailable(cls, reason: str) -> EngineRun:
        """Return a run describing a missing engine."""

        return cls(status=EngineStatus.UNAVAILABLE, reason=reason)

    @property
    def available(self) -> bool:
        """Return ``True`` when the engine was found and executed."""

        return self.status is EngineStatus.COMPLETED

    def filter_by_pattern(self, patterns: str | Iterable[str]) -> list[EngineDiagnostic]:
        """Return diagnostics whose message matches any glob in ``patterns``."""

        return filter_by_glob(self.diagnostics, patterns)

    def filter_by_regex(self, expression: str | re.Pattern[str]) -> list[EngineDiagnostic]:
        """Return diagnostics whose message contains a match for ``expression``."""

        return filter_by_regex(self.diagnostics, expression)

    def filter_by_text(self, needles: str | Iterable[str]) -> list[EngineDiagnostic]:
        """Return diagnostics whose message contains any of ``needles``."""

        return filter_by_substring(self.diagnostics, needles)

    def to_findings(
        self,
        diagnostics: Iterable[EngineDiagnostic] | None = None,
        *,
        severity: Severity = Severity.HIGH,
        message: str | None = None,
        recommendation: str = "",
        limit: int | None = None,
    ) -> list[Finding]:
        """Convert diagnostics into :class:`Finding` objects.

        Args:
            diagnostics: Subset to convert, typically the result of a filter
                query. Defaults to every diagnostic of the run.
            severity: Severity assigned to each finding.
            message: Fixed finding message. The engine message is used when
                omitted and is always kept in ``metadata``.
            recommendation: Recommendation attached to each finding.
            limit: Maximum number of findings produced. Defaults to the
                run's :attr:`finding_limit`.

        Returns:
            list[Finding]: At most ``limit`` findings. Lines below ``1`` are
            clamped to ``1``.
        """

        source = self.diagnostics if diagnostics is None else diagnostics
        cap = self.finding_limit if limit is None else limit
        findings: list[Finding] = []
        for diagnostic in source:
            if len(findings) >= cap:
                break
            line = diagnostic.line if diagnostic.line >= 1 else 1
            metadata: dict[str, Any] = {
                "engine_message": diagnostic.message,
                "detection_method": DETECTION_METHOD,
                "file": diagnostic.file,
                "line": line,
            }
            if diagnostic.identifier:
                metadata["identifier"] = diagnostic.identifier
            findings.append(
                Finding(
                    source_path=diagnostic.file or None,
                    line=line,
                    message=message or diagnostic.message,
                    severity=severity,
                    recommendation=recommendation,
                    metadata=metadata,
                ),
            )
        return findings


__all__ = [
    "BUILTIN_FALSE_POSITIVES",
    "DEFAULT_FINDING_LIMIT",
    "EngineDiagnostic",
    "EngineRun",
    "EngineStatus",
    "flatten_diagnostics",
    "format_issue_count_message",
    "parse_payload",
    "remove_false_positives",
]
