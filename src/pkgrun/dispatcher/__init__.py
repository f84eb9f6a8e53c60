"""Script dispatcher.

Turns a resolved script into a running host-shell process through a
platform-specific ``CommandLauncher``.
"""
from __future__ import annotations

from pkgrun.dispatcher.dispatcher import ScriptProcess, dispatch
from pkgrun.dispatcher.launchers import (
    CommandLauncher,
    LauncherAlreadyRegisteredError,
    LauncherNotFoundError,
    LauncherRegistry,
    PosixLauncher,
    WindowsLauncher,
    launcher_registry,
    select_launcher,
)

__all__ = [
    "CommandLauncher",
    "LauncherAlreadyRegisteredError",
    "LauncherNotFoundError",
    "LauncherRegistry",
    "PosixLauncher",
    "ScriptProcess",
    "WindowsLauncher",
    "dispatch",
    "launcher_registry",
    "select_launcher",
]
