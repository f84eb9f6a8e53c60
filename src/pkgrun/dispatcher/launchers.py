"""Command launchers: how a script file is handed to the host shell.

A launcher knows which interpreter to start on a given platform and
which path separator that interpreter expects. Launchers live in a
``LauncherRegistry`` keyed by name. The built-in ``"posix"`` and
``"windows"`` launchers are registered at import time; third-party
packages can add more by declaring entry-points in the
"pkgrun.launchers" group.

Example
-------
Register a launcher with the decorator::

    from pkgrun.dispatcher.launchers import CommandLauncher, launcher_registry

    @launcher_registry.register("bash")
    class BashLauncher(CommandLauncher):
        def native_path(self, location):
            return PurePosixPath(location).as_posix()

        def build_command(self, location):
            return ["/bin/bash", self.native_path(location)]

Pick the launcher for the running platform::

    launcher = select_launcher()
    launcher.build_command(Path("node_modules/scripts/build"))
"""
from __future__ import annotations

import importlib.metadata
import logging
import os
import shlex
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path, PurePosixPath, PureWindowsPath

from pkgrun.errors import ScriptRunError

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "pkgrun.launchers"


class CommandLauncher(ABC):
    """Builds the host-shell command line that executes a script file."""

    @abstractmethod
    def native_path(self, location: Path) -> str:
        """Return ``location`` written with the interpreter's separators."""

    @abstractmethod
    def build_command(self, location: Path) -> list[str]:
        """Return the argv that runs the script at ``location``."""


class PosixLauncher(CommandLauncher):
    """Runs scripts through ``/bin/sh -c``."""

    shell = "/bin/sh"

    def native_path(self, location: Path) -> str:
        path = PurePosixPath(*Path(location).parts)
        # A bare name would be looked up on PATH or run as a builtin.
        if not path.is_absolute() and len(path.parts) == 1:
            return f"./{path}"
        return path.as_posix()

    def build_command(self, location: Path) -> list[str]:
        return [self.shell, "-c", shlex.quote(self.native_path(location))]


class WindowsLauncher(CommandLauncher):
    """Runs scripts through ``cmd.exe /C`` (or ``%COMSPEC%`` when set)."""

    def native_path(self, location: Path) -> str:
        path = PureWindowsPath(*Path(location).parts)
        if not path.anchor and len(path.parts) == 1:
            return f".\\{path}"
        return str(path)

    def build_command(self, location: Path) -> list[str]:
        shell = os.environ.get("COMSPEC", "cmd.exe")
        return [shell, "/C", self.native_path(location)]


class LauncherNotFoundError(KeyError, ScriptRunError):
    """Raised when a requested launcher name is not in the registry."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.launcher_name = name
        self.available = available
        super().__init__(
            f"Launcher {name!r} is not registered. "
            f"Available launchers: {', '.join(available) or '(none)'}."
        )

    def __str__(self) -> str:
        return str(self.args[0])


class LauncherAlreadyRegisteredError(ValueError):
    """Raised when attempting to register a launcher name that already exists."""

    def __init__(self, name: str) -> None:
        self.launcher_name = name
        super().__init__(
            f"Launcher {name!r} is already registered. "
            "Use a unique name or deregister the existing entry first."
        )


class LauncherRegistry:
    """Name-keyed registry of ``CommandLauncher`` classes."""

    def __init__(self) -> None:
        self._launchers: dict[str, type[CommandLauncher]] = {}

    def register(self, name: str) -> Callable[[type[CommandLauncher]], type[CommandLauncher]]:
        """Return a class decorator that registers the decorated launcher.

        Raises
        ------
        LauncherAlreadyRegisteredError
            If ``name`` is already in use.
        TypeError
            If the decorated class does not subclass ``CommandLauncher``.
        """

        def decorator(cls: type[CommandLauncher]) -> type[CommandLauncher]:
            self.register_class(name, cls)
            return cls

        return decorator

    def register_class(self, name: str, cls: type[CommandLauncher]) -> None:
        """Register ``cls`` under ``name`` without the decorator syntax."""
        if name in self._launchers:
            raise LauncherAlreadyRegisteredError(name)
        if not (isinstance(cls, type) and issubclass(cls, CommandLauncher)):
            raise TypeError(
                f"Cannot register {cls!r} under {name!r}: "
                "it must be a subclass of CommandLauncher."
            )
        self._launchers[name] = cls
        logger.debug("Registered launcher %r -> %s", name, cls.__qualname__)

    def deregister(self, name: str) -> None:
        """Remove a launcher from the registry.

        Raises
        ------
        LauncherNotFoundError
            If ``name`` is not currently registered.
        """
        if name not in self._launchers:
            raise LauncherNotFoundError(name, self.list_launchers())
        del self._launchers[name]
        logger.debug("Deregistered launcher %r", name)

    def get(self, name: str) -> type[CommandLauncher]:
        """Return the launcher class registered under ``name``."""
        try:
            return self._launchers[name]
        except KeyError:
            raise LauncherNotFoundError(name, self.list_launchers()) from None

    def list_launchers(self) -> list[str]:
        """Return the registered launcher names in alphabetical order."""
        return sorted(self._launchers)

    def __contains__(self, name: object) -> bool:
        return name in self._launchers

    def __len__(self) -> int:
        return len(self._launchers)

    def __repr__(self) -> str:
        return f"LauncherRegistry(launchers={self.list_launchers()})"

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> None:
        """Register launchers declared as package entry-points in ``group``.

        Entry points whose name is already registered are skipped, so
        repeated calls are idempotent. Entry points that fail to import
        or do not provide a ``CommandLauncher`` subclass are logged and
        skipped.

        Example
        -------
        In a downstream package's ``pyproject.toml``::

            [project.entry-points."pkgrun.launchers"]
            pwsh = "my_package.launchers:PowerShellLauncher"
        """
        for ep in importlib.metadata.entry_points(group=group):
            if ep.name in self._launchers:
                logger.debug("Entry-point launcher %r already registered; skipping.", ep.name)
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            try:
                self.register_class(ep.name, cls)
            except (LauncherAlreadyRegisteredError, TypeError):
                logger.warning(
                    "Entry-point %r loaded but is not a usable launcher; skipping.",
                    ep.name,
                )


launcher_registry = LauncherRegistry()
launcher_registry.register_class("posix", PosixLauncher)
launcher_registry.register_class("windows", WindowsLauncher)


def default_launcher_name(os_name: str | None = None) -> str:
    """Return the built-in launcher name for ``os_name`` (default: ``os.name``)."""
    return "windows" if (os_name or os.name) == "nt" else "posix"


def select_launcher(
    name: str | None = None,
    registry: LauncherRegistry | None = None,
) -> CommandLauncher:
    """Instantiate the launcher called ``name``, or the platform default.

    A name that is not registered yet triggers a scan of the
    "pkgrun.launchers" entry-points before giving up.

    Raises
    ------
    LauncherNotFoundError
        If ``name`` is given but not registered.
    """
    if registry is None:
        registry = launcher_registry
    if name is not None and name not in registry:
        registry.load_entrypoints()
    return registry.get(name or default_launcher_name())()
