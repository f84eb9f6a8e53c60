"""Shared test fixtures for pkgrun.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from pkgrun.config import RunnerConfig


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "pkgrun"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def scripts_dir(tmp_path: Path) -> Path:
    """Return ``<project>/node_modules/scripts`` holding ``build`` and ``test``."""
    directory = tmp_path / "node_modules" / "scripts"
    directory.mkdir(parents=True)
    for name in ("build", "test"):
        (directory / name).write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    return directory


@pytest.fixture()
def project_config(tmp_path: Path, scripts_dir: Path) -> RunnerConfig:
    """Return a config rooted at the project that owns ``scripts_dir``."""
    return RunnerConfig(project_dir=tmp_path)
