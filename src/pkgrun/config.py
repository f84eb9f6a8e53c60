"""Runner configuration.

Settings come from three places, later ones winning:

1. the defaults on ``RunnerConfig``;
2. an optional ``pkgrun.yaml`` file in the project directory;
3. the ``PKGRUN_SCRIPTS_DIR`` and ``PKGRUN_LAUNCHER`` environment variables.

Example ``pkgrun.yaml``::

    scripts_dir: tools/scripts
    display_prefix: tools
    launcher: posix
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

import yaml

from pkgrun.errors import ConfigError

CONFIG_FILENAME = "pkgrun.yaml"
DEFAULT_SCRIPTS_DIR = "node_modules/scripts"
DEFAULT_DISPLAY_PREFIX = "scripts"

ENV_SCRIPTS_DIR = "PKGRUN_SCRIPTS_DIR"
ENV_LAUNCHER = "PKGRUN_LAUNCHER"


@dataclass(frozen=True)
class RunnerConfig:
    """Where scripts live and how they are launched.

    Parameters
    ----------
    project_dir:
        Root directory the scripts directory is resolved against.
    scripts_dir:
        The scripts directory, relative to ``project_dir`` or absolute.
    display_prefix:
        Prefix used when echoing the command being run.
    launcher:
        Name of the launcher to use. None picks the platform default.
    """

    project_dir: Path = field(default_factory=Path.cwd)
    scripts_dir: Path = Path(DEFAULT_SCRIPTS_DIR)
    display_prefix: str = DEFAULT_DISPLAY_PREFIX
    launcher: str | None = None

    @property
    def scripts_path(self) -> Path:
        """The scripts directory joined onto the project directory."""
        return self.project_dir / self.scripts_dir


def _from_mapping(base: RunnerConfig, data: Mapping[str, object], source: Path) -> RunnerConfig:
    known = {f.name for f in fields(RunnerConfig)} - {"project_dir"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(source, f"unknown key(s): {', '.join(unknown)}")

    changes: dict[str, object] = {}
    for key, value in data.items():
        if value is not None and not isinstance(value, str):
            raise ConfigError(source, f"{key!r} must be a string, got {type(value).__name__}")
        if key == "scripts_dir":
            if not value:
                raise ConfigError(source, "'scripts_dir' must not be empty")
            changes[key] = Path(value)
        elif key == "display_prefix":
            changes[key] = value or ""
        else:
            changes[key] = value or None
    return replace(base, **changes)


def load_config(
    project_dir: str | os.PathLike[str] | None = None,
    path: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> RunnerConfig:
    """Build a ``RunnerConfig`` for ``project_dir``.

    Parameters
    ----------
    project_dir:
        Project root. Defaults to the current working directory.
    path:
        Explicit config file. Defaults to ``pkgrun.yaml`` in
        ``project_dir``; a missing default file is not an error.
    environ:
        Environment to read overrides from. Defaults to ``os.environ``.

    Raises
    ------
    ConfigError
        If the config file cannot be read, is not valid YAML, is not a
        mapping, or contains unknown keys.
    """
    root = Path(project_dir) if project_dir is not None else Path.cwd()
    config = RunnerConfig(project_dir=root)

    config_path = Path(path) if path is not None else root / CONFIG_FILENAME
    if path is not None or config_path.is_file():
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(config_path, exc.strerror or str(exc)) from exc
        except yaml.YAMLError as exc:
            raise ConfigError(config_path, f"not valid YAML ({exc})") from exc
        if data is not None:
            if not isinstance(data, dict):
                raise ConfigError(config_path, "top level must be a mapping")
            config = _from_mapping(config, data, config_path)

    env = os.environ if environ is None else environ
    if env.get(ENV_SCRIPTS_DIR):
        config = replace(config, scripts_dir=Path(env[ENV_SCRIPTS_DIR]))
    if env.get(ENV_LAUNCHER):
        config = replace(config, launcher=env[ENV_LAUNCHER])
    return config
