# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from issuegate.core.models import Finding
from issuegate.core.severity import Severity
from issuegate.runtime.console import get_console_manager


@pytest.fixture(autouse=True)
def _fresh_consoles() -> Iterator[None]:
    """Rebind cached Rich consoles so ``capsys`` sees their output."""

    get_console_manager().clear()
    yield
    get_console_manager().clear()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Return a minimal project tree with an ``app`` directory."""

    root = tmp_path / "project"
    (root / "app").mkdir(parents=True)
    return root


@pytest.fixture
def make_finding() -> Callable[..., Finding]:
    """Return a factory producing findings with sensible defaults."""

    def _factory(
        source_path: str | None = "app/X.php",
        line: int | None = 10,
        message: str = "Foo bar",
        severity: Severity = Severity.CRITICAL,
    ) -> Finding:
        return Finding(source_path=source_path, line=line, message=message, severity=severity)

    return _factory
