# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for core models and severity helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from issuegate.core.models import AnalyzerRun, AnalyzerStatus, Finding
from issuegate.core.severity import Severity, parse_severity, severity_at_least
from issuegate.errors import EngineExecutionError


def test_finding_normalises_windows_separators() -> None:
    finding = Finding(source_path="app\\Http\\Kernel.php", line=3, message="m", severity=Severity.LOW)

    assert finding.source_path == "app/Http/Kernel.php"


def test_finding_rejects_line_zero() -> None:
    with pytest.raises(ValidationError):
        Finding(source_path="app/X.php", line=0, message="m", severity=Severity.LOW)


def test_finding_is_immutable() -> None:
    finding = Finding(message="m", severity=Severity.HIGH)

    with pytest.raises(ValidationError):
        finding.message = "changed"  # type: ignore[misc]


def test_analyzer_run_from_exception_builds_error_run() -> None:
    exc = EngineExecutionError("engine exited with code 255", command=["phpstan"], returncode=255)

    run = AnalyzerRun.from_exception("invalid-method-call", exc, label="Static analysis")

    assert run.status is AnalyzerStatus.ERROR
    assert run.findings == ()
    assert run.message == "Static analysis failed: engine exited with code 255"
    assert run.metadata["exception"] == "EngineExecutionError"


def test_analyzer_run_name_prefers_metadata() -> None:
    run = AnalyzerRun(analyzer_id="env-file", status=AnalyzerStatus.FAILED, metadata={"name": "Env File"})

    assert run.name == "Env File"
    assert AnalyzerRun(analyzer_id="env-file", status=AnalyzerStatus.PASSED).name == "env-file"


def test_failure_statuses() -> None:
    assert AnalyzerStatus.FAILED.is_failure
    assert AnalyzerStatus.WARNING.is_failure
    assert not AnalyzerStatus.ERROR.is_failure
    assert not AnalyzerStatus.PASSED.is_failure


def test_parse_severity_is_case_insensitive() -> None:
    assert parse_severity(" HIGH ") is Severity.HIGH
    assert parse_severity("bogus", Severity.LOW) is Severity.LOW
    with pytest.raises(ValueError):
        parse_severity("bogus")


def test_severity_at_least() -> None:
    assert severity_at_least(Severity.CRITICAL, Severity.HIGH)
    assert severity_at_least(Severity.MEDIUM, Severity.MEDIUM)
    assert not severity_at_least(Severity.LOW, Severity.MEDIUM)
