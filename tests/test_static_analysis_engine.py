# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the static-analysis engine adapter."""

from __future__ import annotations

import json
from pathlib import Path
from subprocess import CompletedProcess
from typing import Any

import pytest

from issuegate.config.models import StaticAnalysisConfig
from issuegate.core.models import AnalyzerRun, AnalyzerStatus
from issuegate.core.runtime.process import CommandOptions
from issuegate.errors import EngineExecutionError
from issuegate.static_analysis import EngineOptions, EngineStatus, StaticAnalysisEngine

RUN_COMMAND = "issuegate.static_analysis.engine.run_command"


def _install_engine(root: Path) -> Path:
    binary = root / "vendor" / "bin" / "phpstan"
    binary.parent.mkdir(parents=True, exist_ok=True)
    binary.write_text("#!/bin/sh\n", encoding="utf-8")
    binary.chmod(0o755)
    return binary


def _report(files: dict[str, Any]) -> str:
    return json.dumps({"totals": {"errors": 0, "file_errors": 0}, "files": files, "errors": []})


def _messages(*entries: tuple[int, str]) -> dict[str, Any]:
    return {"messages": [{"line": line, "message": message, "ignorable": True} for line, message in entries]}


class _FakeRunner:
    """Record invocations and return a canned process result."""

    def __init__(self, stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.commands: list[list[str]] = []
        self.options: list[CommandOptions | None] = []
        self.config_text: str | None = None
        self.config_path: Path | None = None

    def __call__(self, args, *, options=None):  # noqa: ANN001, ANN204
        self.commands.append(list(args))
        self.options.append(options)
        flag = next(arg for arg in args if arg.startswith("--configuration="))
        self.config_path = Path(flag.split("=", 1)[1])
        self.config_text = self.config_path.read_text(encoding="utf-8")
        return CompletedProcess(args=list(args), returncode=self.returncode, stdout=self.stdout, stderr=self.stderr)


def test_missing_binary_is_reported_as_unavailable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _unexpected(*_args, **_kwargs):  # noqa: ANN002, ANN003, ANN202
        raise AssertionError("engine should not run")

    monkeypatch.setattr(RUN_COMMAND, _unexpected)
    engine = StaticAnalysisEngine(tmp_path)

    result = engine.analyze(["app"])

    assert result.status is EngineStatus.UNAVAILABLE
    assert not result.available
    assert result.diagnostics == ()
    assert not engine.is_available()


def test_command_line_shape(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(tmp_path)
    runner = _FakeRunner(stdout=_report({}))
    monkeypatch.setattr(RUN_COMMAND, runner)
    engine = StaticAnalysisEngine(tmp_path, options=EngineOptions(extra_options=("--memory-limit=1G",)))

    engine.analyze(["app", "routes"], level=7)

    root = engine.root
    assert runner.commands == [
        [
            str(root / "vendor" / "bin" / "phpstan"),
            "analyse",
            f"--configuration={runner.config_path}",
            "--error-format=json",
            "--no-progress",
            "--no-interaction",
            "--memory-limit=1G",
            str(root / "app"),
            str(root / "routes"),
        ],
    ]
    assert runner.options[0] is not None
    assert runner.options[0].cwd == root
    assert runner.options[0].timeout is None


def test_generated_config_is_passed_and_removed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(tmp_path)
    (tmp_path / "phpstan.neon").write_text("parameters:\n", encoding="utf-8")
    runner = _FakeRunner(stdout=_report({}))
    monkeypatch.setattr(RUN_COMMAND, runner)

    StaticAnalysisEngine(tmp_path).analyze("app", level=9)

    assert runner.config_text is not None
    assert "level: 9" in runner.config_text
    assert "phpstan.neon" in runner.config_text
    assert runner.config_path is not None
    assert not runner.config_path.exists()


def test_config_is_removed_when_engine_cannot_start(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(tmp_path)
    seen: list[Path] = []

    def _refuse(args, *, options=None):  # noqa: ANN001, ANN202
        flag = next(arg for arg in args if arg.startswith("--configuration="))
        seen.append(Path(flag.split("=", 1)[1]))
        raise PermissionError("permission denied")

    monkeypatch.setattr(RUN_COMMAND, _refuse)

    with pytest.raises(EngineExecutionError) as excinfo:
        StaticAnalysisEngine(tmp_path).analyze(["app"])

    assert "could not be started" in str(excinfo.value)
    assert excinfo.value.command
    assert seen and not seen[0].exists()


def test_diagnostics_are_flattened_relative_to_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(tmp_path)
    root = tmp_path.resolve()
    stdout = _report(
        {
            str(root / "app" / "Models" / "User.php"): _messages((12, "Undefined variable: $name")),
            "app/Http/Kernel.php": _messages((3, "Method has no return type"), (8, "Dead catch")),
        },
    )
    monkeypatch.setattr(RUN_COMMAND, _FakeRunner(stdout=stdout, returncode=1))

    result = StaticAnalysisEngine(tmp_path).analyze(["app"])

    assert result.status is EngineStatus.COMPLETED
    assert [(item.file, item.line, item.message) for item in result.diagnostics] == [
        ("app/Models/User.php", 12, "Undefined variable: $name"),
        ("app/Http/Kernel.php", 3, "Method has no return type"),
        ("app/Http/Kernel.php", 8, "Dead catch"),
    ]


def test_malformed_output_yields_empty_result(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(tmp_path)
    monkeypatch.setattr(RUN_COMMAND, _FakeRunner(stdout="PHP Fatal error: out of memory", returncode=1))

    result = StaticAnalysisEngine(tmp_path).analyze(["app"])

    assert result.status is EngineStatus.COMPLETED
    assert result.diagnostics == ()


def test_json_is_recovered_from_noisy_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(tmp_path)
    stdout = "Deprecated: something noisy\n" + _report({"app/X.php": _messages((4, "Real issue"))})
    monkeypatch.setattr(RUN_COMMAND, _FakeRunner(stdout=stdout, returncode=1))

    result = StaticAnalysisEngine(tmp_path).analyze(["app"])

    assert [item.message for item in result.diagnostics] == ["Real issue"]


def test_unexpected_exit_without_report_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(tmp_path)
    monkeypatch.setattr(RUN_COMMAND, _FakeRunner(stderr="Segmentation fault", returncode=139))

    with pytest.raises(EngineExecutionError) as excinfo:
        StaticAnalysisEngine(tmp_path).analyze(["app"])

    assert excinfo.value.returncode == 139
    assert excinfo.value.stderr == "Segmentation fault"

    run = AnalyzerRun.from_exception("invalid-method-call", excinfo.value)
    assert run.status is AnalyzerStatus.ERROR


def test_unexpected_exit_with_report_is_accepted(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(tmp_path)
    stdout = _report({"app/X.php": _messages((1, "Real issue"))})
    monkeypatch.setattr(RUN_COMMAND, _FakeRunner(stdout=stdout, returncode=255))

    result = StaticAnalysisEngine(tmp_path).analyze(["app"])

    assert result.returncode == 255
    assert len(result.diagnostics) == 1


def test_builtin_false_positives_are_removed_before_queries(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(tmp_path)
    stdout = _report(
        {
            "app/X.php": _messages(
                (10, "Call to an undefined method Illuminate\\Support\\HigherOrderCollectionProxy::something()"),
                (11, "Argument of an invalid type Carbon\\CarbonPeriod supplied for foreach, only iterables are supported."),
                (12, "Call to method unique() on an unknown class Faker\\Generator."),
                (13, "Call to an undefined method App\\Models\\User::fake()."),
                (14, "Undefined variable: $realIssue"),
            ),
        },
    )
    monkeypatch.setattr(RUN_COMMAND, _FakeRunner(stdout=stdout, returncode=1))

    result = StaticAnalysisEngine(tmp_path).analyze(["app"])

    assert [item.line for item in result.diagnostics] == [13, 14]
    assert result.false_positive_count == 3
    assert result.filter_by_pattern("Call to an undefined method *") == [result.diagnostics[0]]
    assert result.filter_by_text("HigherOrder") == []


def test_from_config_applies_binary_and_options(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    binary = tmp_path / "tools" / "phpstan"
    binary.parent.mkdir()
    binary.write_text("#!/bin/sh\n", encoding="utf-8")
    runner = _FakeRunner(stdout=_report({}))
    monkeypatch.setattr(RUN_COMMAND, runner)
    config = StaticAnalysisConfig(binary=binary, extra_options=["--xdebug"], timeout=30)

    StaticAnalysisEngine.from_config(config, tmp_path).analyze(["app"])

    assert runner.commands[0][0] == str(binary)
    assert "--xdebug" in runner.commands[0]
    assert runner.options[0] is not None
    assert runner.options[0].timeout == 30


def test_from_config_applies_level_and_finding_cap(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_engine(tmp_path)
    stdout = _report({str(tmp_path / "app" / "X.php"): _messages((1, "First"), (2, "Second"), (3, "Third"))})
    runner = _FakeRunner(stdout=stdout, returncode=1)
    monkeypatch.setattr(RUN_COMMAND, runner)
    engine = StaticAnalysisEngine.from_config(StaticAnalysisConfig(level=8, max_findings=2), tmp_path)

    result = engine.analyze(["app"])

    assert runner.config_text is not None
    assert "    level: 8" in runner.config_text
    assert len(result.to_findings()) == 2
    assert len(result.to_findings(limit=3)) == 3

    engine.analyze(["app"], level=2)

    assert "    level: 2" in runner.config_text


def test_disabled_engine_is_never_invoked(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _unexpected(*_args, **_kwargs):  # noqa: ANN002, ANN003, ANN202
        raise AssertionError("engine should not run")

    _install_engine(tmp_path)
    monkeypatch.setattr(RUN_COMMAND, _unexpected)

    result = StaticAnalysisEngine.from_config(StaticAnalysisConfig(enabled=False), tmp_path).analyze(["app"])

    assert result.status is EngineStatus.UNAVAILABLE
    assert "disabled" in result.reason
