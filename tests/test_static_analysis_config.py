# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for ephemeral engine configuration assembly."""

from __future__ import annotations

from pathlib import Path

import pytest

from issuegate.static_analysis.config_builder import (
    build_config,
    detect_extensions,
    ephemeral_config,
    find_project_config,
    render_config,
)


def _install_extension(root: Path, relative: str) -> Path:
    fragment = root / relative
    fragment.parent.mkdir(parents=True, exist_ok=True)
    fragment.write_text("# extension\n", encoding="utf-8")
    return fragment


def test_config_without_extensions_has_no_includes(tmp_path: Path) -> None:
    content = build_config(tmp_path, 5, [tmp_path / "app"])

    assert "includes:" not in content
    assert "parameters:" in content
    assert "    level: 5" in content
    assert f"        - '{tmp_path / 'app'}'" in content


def test_level_is_written_verbatim(tmp_path: Path) -> None:
    assert "level: 9" in build_config(tmp_path, 9, [])


def test_installed_extensions_are_included(tmp_path: Path) -> None:
    larastan = _install_extension(tmp_path, "vendor/larastan/larastan/extension.neon")
    carbon = _install_extension(tmp_path, "vendor/nesbot/carbon/extension.neon")

    content = build_config(tmp_path, 5, [])

    assert content.startswith("includes:\n")
    assert content.index(str(larastan)) < content.index(str(carbon))


def test_extension_directory_without_fragment_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "vendor" / "larastan" / "larastan").mkdir(parents=True)

    assert detect_extensions(tmp_path) == []


def test_project_config_follows_extensions(tmp_path: Path) -> None:
    larastan = _install_extension(tmp_path, "vendor/larastan/larastan/extension.neon")
    (tmp_path / "phpstan.neon").write_text("parameters:\n", encoding="utf-8")

    content = build_config(tmp_path, 5, [])

    assert content.index(str(larastan)) < content.index(str(tmp_path / "phpstan.neon"))


def test_dist_config_is_used_when_alone(tmp_path: Path) -> None:
    (tmp_path / "phpstan.neon.dist").write_text("parameters:\n", encoding="utf-8")

    assert find_project_config(tmp_path) == tmp_path / "phpstan.neon.dist"
    assert "phpstan.neon.dist" in build_config(tmp_path, 5, [])


def test_canonical_config_is_preferred_over_dist(tmp_path: Path) -> None:
    (tmp_path / "phpstan.neon").write_text("parameters:\n", encoding="utf-8")
    (tmp_path / "phpstan.neon.dist").write_text("parameters:\n", encoding="utf-8")

    content = build_config(tmp_path, 5, [])

    assert "phpstan.neon'" in content
    assert "phpstan.neon.dist" not in content


def test_render_config_escapes_single_quotes() -> None:
    content = render_config(1, [Path("/srv/o'brien/app")], [])

    assert "- '/srv/o''brien/app'" in content


def test_ephemeral_config_is_removed_after_use(tmp_path: Path) -> None:
    with ephemeral_config("parameters:\n", directory=tmp_path) as path:
        assert path.read_text(encoding="utf-8") == "parameters:\n"
        assert path.suffix == ".neon"

    assert not path.exists()


def test_ephemeral_config_is_removed_on_error(tmp_path: Path) -> None:
    captured: list[Path] = []

    with pytest.raises(RuntimeError), ephemeral_config("parameters:\n", directory=tmp_path) as path:
        captured.append(path)
        raise RuntimeError("boom")

    assert captured
    assert not captured[0].exists()
