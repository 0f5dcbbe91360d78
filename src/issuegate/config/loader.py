# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered TOML configuration loading.

Fragments are merged in order: built-in defaults, ``[tool.issuegate]`` from
``pyproject.toml``, then ``.issuegate.toml``. Later fragments win key by key.
"""

from __future__ import annotations

import logging
import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from ..errors import ConfigError
from .models import IssuegateConfig

CONFIG_FILENAME: Final[str] = ".issuegate.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "issuegate"

_ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$(\w+)|\$\{([^}]+)\}")

logger = logging.getLogger(__name__)


def _read_toml(path: Path) -> dict[str, Any]:
    """Return the parsed TOML document at ``path`` or an empty mapping.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """

    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration at {path}: {exc}") from exc


def _pyproject_fragment(path: Path) -> dict[str, Any]:
    document = _read_toml(path)
    tool_section = document.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
    return dict(section)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(lambda match: _substitute(match, env), value)
    if isinstance(value, Mapping):
        return {key: _expand_env_value(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_value(item, env) for item in value]
    return value


def _substitute(match: re.Match[str], env: Mapping[str, str]) -> str:
    key = match.group(1) or match.group(2)
    return env.get(key, match.group(0))


def load_config(root: Path, *, env: Mapping[str, str] | None = None) -> IssuegateConfig:
    """Load the effective configuration for the project at ``root``.

    Args:
        root: Project root holding ``pyproject.toml`` and/or ``.issuegate.toml``.
        env: Environment used for ``$VAR``/``${VAR}`` expansion. Defaults to
            :data:`os.environ`. Unknown variables are left untouched.

    Returns:
        IssuegateConfig: Validated configuration model.

    Raises:
        ConfigError: If a document is malformed or fails validation.
    """

    environment = os.environ if env is None else env
    merged: dict[str, Any] = IssuegateConfig().to_dict()
    for path, fragment in (
        (root / PYPROJECT_FILENAME, _pyproject_fragment(root / PYPROJECT_FILENAME)),
        (root / CONFIG_FILENAME, _read_toml(root / CONFIG_FILENAME)),
    ):
        if fragment:
            logger.debug("Applying configuration fragment from %s", path)
            merged = _deep_merge(merged, fragment)

    try:
        return IssuegateConfig.model_validate(_expand_env_value(merged, environment))
    except ValidationError as exc:
        raise ConfigError(f"Invalid issuegate configuration: {exc}") from exc


__all__ = [
    "CONFIG_FILENAME",
    "PYPROJECT_FILENAME",
    "PYPROJECT_SECTION_KEY",
    "load_config",
]
