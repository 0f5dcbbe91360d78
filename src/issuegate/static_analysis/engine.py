# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Subprocess adapter for the external static type-checking engine."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ..config.models import DEFAULT_ENGINE_LEVEL
from ..core.runtime.process import CommandOptions, run_command
from ..errors import EngineExecutionError
from .config_builder import (
    KNOWN_EXTENSIONS,
    PROJECT_CONFIG_NAMES,
    ExtensionFragment,
    build_config,
    ephemeral_config,
)
from .results import (
    BUILTIN_FALSE_POSITIVES,
    DEFAULT_FINDING_LIMIT,
    EngineRun,
    EngineStatus,
    flatten_diagnostics,
    parse_payload,
    remove_false_positives,
)

if TYPE_CHECKING:
    from ..config.models import StaticAnalysisConfig
    from ..matching.patterns import MessagePattern

logger = logging.getLogger(__name__)

_STDERR_EXCERPT: Final[int] = 500


@dataclass(frozen=True, slots=True)
class EngineProfile:
    """Invocation contract for one engine.

    Attributes:
        name: Human readable engine name.
        binary: Root-relative location of the engine executable.
        subcommand: Subcommand that performs analysis.
        config_flag: Flag receiving the generated configuration path.
        base_options: Flags requesting machine-readable, non-interactive output.
        accepted_exit_codes: Exit codes that mean the engine ran to completion.
        extensions: Extension fragments considered for inclusion.
        project_configs: Project configuration names in preference order.
        false_positives: Ordered rules removed from every run.
    """

    name: str
    binary: str
    subcommand: str = "analyse"
    config_flag: str = "--configuration"
    base_options: tuple[str, ...] = ("--error-format=json", "--no-progress", "--no-interaction")
    accepted_exit_codes: frozenset[int] = frozenset({0, 1})
    extensions: tuple[ExtensionFragment, ...] = KNOWN_EXTENSIONS
    project_configs: tuple[str, ...] = PROJECT_CONFIG_NAMES
    false_positives: tuple[MessagePattern, ...] = BUILTIN_FALSE_POSITIVES


PHPSTAN_PROFILE: Final[EngineProfile] = EngineProfile(name="PHPStan", binary="vendor/bin/phpstan")


@dataclass(frozen=True, slots=True)
class EngineOptions:
    """Caller-tunable execution settings.

    ``timeout`` is ``None`` by default, in which case the call blocks until the
    engine exits. ``level`` is the strictness used when :meth:`analyze` is not
    given one, and ``max_findings`` caps :meth:`EngineRun.to_findings`.
    """

    enabled: bool = True
    level: int = DEFAULT_ENGINE_LEVEL
    max_findings: int = DEFAULT_FINDING_LIMIT
    binary: Path | None = None
    extra_options: tuple[str, ...] = ()
    timeout: float | None = None
    env: Mapping[str, str] | None = field(default=None, repr=False)


class StaticAnalysisEngine:
    """Run the engine over source directories and return normalised diagnostics."""

    def __init__(
        self,
        root: Path,
        profile: EngineProfile = PHPSTAN_PROFILE,
        options: EngineOptions | None = None,
    ) -> None:
        self._root = root.expanduser().resolve()
        self._profile = profile
        self._options = options or EngineOptions()

    @classmethod
    def from_config(
        cls,
        config: StaticAnalysisConfig,
        root: Path,
        profile: EngineProfile = PHPSTAN_PROFILE,
    ) -> StaticAnalysisEngine:
        """Build an engine from the ``static_analysis`` configuration section."""

        return cls(
            root,
            profile,
            EngineOptions(
                enabled=config.enabled,
                level=config.level,
                max_findings=config.max_findings,
                binary=config.binary,
                extra_options=tuple(config.extra_options),
                timeout=config.timeout,
            ),
        )

    @property
    def root(self) -> Path:
        """Return the resolved project root."""

        return self._root

    @property
    def profile(self) -> EngineProfile:
        """Return the invocation profile in use."""

        return self._profile

    def binary_path(self) -> Path:
        """Return the expected location of the engine executable."""

        binary = self._options.binary or Path(self._profile.binary)
        return binary if binary.is_absolute() else self._root / binary

    def is_available(self) -> bool:
        """Return ``True`` when the engine executable exists."""

        return self.binary_path().is_file()

    def build_command(self, config_path: Path, paths: Sequence[Path]) -> list[str]:
        """Return the argument vector for an analysis run.

        Args:
            config_path: Location of the generated configuration.
            paths: Absolute analysis paths appended after every option.

        Returns:
            list[str]: Command suitable for :func:`run_command`.
        """

        profile = self._profile
        return [
            os.fspath(self.binary_path()),
            profile.subcommand,
            f"{profile.config_flag}={os.fspath(config_path)}",
            *profile.base_options,
            *self._options.extra_options,
            *(os.fspath(path) for path in paths),
        ]

    def analyze(self, paths: str | Iterable[str | Path], level: int | None = None) -> EngineRun:
        """Analyse ``paths`` at strictness ``level``.

        Args:
            paths: Root-relative or absolute source directories.
            level: Engine strictness level. Defaults to the configured level.

        Returns:
            EngineRun: ``UNAVAILABLE`` when the engine is disabled or its
            executable is missing, otherwise
            the parsed and false-positive filtered diagnostics. Output that
            cannot be parsed yields an empty diagnostic list.

        Raises:
            EngineExecutionError: If the process cannot be started, or exits
                with an unexpected code without producing a report.
        """

        if not self._options.enabled:
            logger.debug("%s is disabled by configuration", self._profile.name)
            return EngineRun.unavailable(f"{self._profile.name} is disabled by configuration")

        binary = self.binary_path()
        if not binary.is_file():
            logger.debug("%s not found at %s", self._profile.name, binary)
            return EngineRun.unavailable(f"{self._profile.name} is not installed at {binary}")

        targets = self._absolute_paths((paths,) if isinstance(paths, (str, Path)) else paths)
        content = build_config(
            self._root,
            self._options.level if level is None else level,
            targets,
            extensions=self._profile.extensions,
            project_configs=self._profile.project_configs,
        )
        with ephemeral_config(content) as config_path:
            command = self.build_command(config_path, targets)
            logger.debug("Running %s", " ".join(command))
            try:
                completed = run_command(
                    command,
                    options=CommandOptions(cwd=self._root, env=self._options.env, timeout=self._options.timeout),
                )
            except OSError as exc:
                raise EngineExecutionError(
                    f"{self._profile.name} could not be started: {exc}",
                    command=command,
                ) from exc

        stdout = completed.stdout or ""
        stderr = completed.stderr or ""
        payload = parse_payload(stdout, stderr)
        if payload is None:
            if completed.returncode not in self._profile.accepted_exit_codes:
                raise EngineExecutionError(
                    f"{self._profile.name} exited with code {completed.returncode}: {stderr.strip()[:_STDERR_EXCERPT]}",
                    command=command,
                    returncode=completed.returncode,
                    stderr=stderr,
                )
            logger.warning("%s produced no parseable report; treating the result as empty", self._profile.name)

        diagnostics, removed = remove_false_positives(
            flatten_diagnostics(payload, self._root),
            self._profile.false_positives,
        )
        return EngineRun(
            status=EngineStatus.COMPLETED,
            diagnostics=tuple(diagnostics),
            false_positive_count=removed,
            returncode=completed.returncode,
            stderr=stderr,
            finding_limit=self._options.max_findings,
        )

    def _absolute_paths(self, paths: Iterable[str | Path]) -> list[Path]:
        resolved: list[Path] = []
        for entry in paths:
            candidate = Path(entry)
            resolved.append(candidate if candidate.is_absolute() else self._root / candidate)
        return resolved


__all__ = [
    "PHPSTAN_PROFILE",
    "EngineOptions",
    "EngineProfile",
    "StaticAnalysisEngine",
]
