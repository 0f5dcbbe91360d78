# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free wrapper around ``subprocess`` execution."""

from __future__ import annotations

import os
import shutil
import subprocess  # nosec B404 suppression_valid: Shell-free subprocess wrapper runs vetted engine commands only.
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

TIMEOUT_RETURNCODE: Final[int] = 124


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Execution options applied to :func:`run_command`.

    ``timeout`` defaults to ``None``: engine runs block until the process exits.
    """

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    timeout: float | None = None
    discard_stdin: bool = True


def _ensure_text(value: str | bytes | None) -> str:
    """Return ``value`` decoded to text, or an empty string when missing."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable of ``args`` to an absolute path.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Argument list with an absolute executable.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be located.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        if not head_path.exists():
            raise FileNotFoundError(f"Executable '{head}' does not exist")
        return [os.fspath(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedProcess[str]:
    """Execute ``args`` with captured text output.

    Args:
        args: Command and argument sequence to execute.
        options: Working directory, environment, and timeout settings.

    Returns:
        CompletedProcess[str]: Execution metadata. A timed out process is
        reported with return code ``124`` and a note appended to ``stderr``.

    Raises:
        FileNotFoundError: If the executable cannot be resolved.
        OSError: If the operating system refuses to start the process.
    """

    resolved_options = options or CommandOptions()
    normalized = _normalize_args(args)
    try:
        return subprocess.run(  # nosec B603 - argument list, no shell expansion
            normalized,
            cwd=os.fspath(resolved_options.cwd) if resolved_options.cwd is not None else None,
            env=dict(resolved_options.env) if resolved_options.env is not None else None,
            check=False,
            capture_output=True,
            text=True,
            timeout=resolved_options.timeout,
            stdin=subprocess.DEVNULL if resolved_options.discard_stdin else None,
        )
    except subprocess.TimeoutExpired as exc:
        stderr = _ensure_text(exc.stderr)
        note = f"Command timed out after {resolved_options.timeout:.1f}s"
        return CompletedProcess(
            args=normalized,
            returncode=TIMEOUT_RETURNCODE,
            stdout=_ensure_text(exc.stdout),
            stderr=f"{stderr}\n{note}" if stderr else note,
        )


__all__ = ["TIMEOUT_RETURNCODE", "CommandOptions", "run_command"]
