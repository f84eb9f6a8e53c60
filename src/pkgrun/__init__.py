"""pkgrun — run the pre-defined scripts of a package.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import pkgrun

    # What scripts does this project have?
    registry = pkgrun.list_scripts("node_modules/scripts")
    registry.names()
    ('build', 'test')

    # Run one of them
    outcome = pkgrun.run(pkgrun.Invocation(("run", "build")))
    outcome.process.wait()

    pkgrun.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from pathlib import Path

    from pkgrun.config import RunnerConfig
    from pkgrun.dispatcher.dispatcher import ScriptProcess
    from pkgrun.dispatcher.launchers import CommandLauncher
    from pkgrun.registry.registry import RegistrySnapshot
    from pkgrun.resolver.resolver import ResolvedAction
    from pkgrun.runner import RunOutcome

from pkgrun.errors import (
    ConfigError,
    DiscoveryError,
    DispatchError,
    ScriptRunError,
    UnknownScriptError,
)
from pkgrun.resolver.resolver import Invocation


def list_scripts(directory: "str | Path") -> "RegistrySnapshot":
    """Enumerate the scripts directly inside ``directory``.

    Raises
    ------
    pkgrun.DiscoveryError
        If the directory cannot be read.
    """
    from pkgrun.registry.registry import list_scripts as _list_scripts

    return _list_scripts(directory)


def resolve(invocation: Invocation, registry: "RegistrySnapshot") -> "ResolvedAction":
    """Decide whether ``invocation`` lists, runs, or names an unknown script."""
    from pkgrun.resolver.resolver import resolve as _resolve

    return _resolve(invocation, registry)


def dispatch(
    location: "str | Path", launcher: "CommandLauncher | None" = None
) -> "ScriptProcess":
    """Start the script at ``location`` without waiting for it.

    Raises
    ------
    pkgrun.DispatchError
        If the host shell process cannot be started.
    """
    from pkgrun.dispatcher.dispatcher import dispatch as _dispatch

    return _dispatch(location, launcher=launcher)


def run(invocation: Invocation, config: "RunnerConfig | None" = None) -> "RunOutcome":
    """Run the full discover, resolve and dispatch flow for ``invocation``.

    Parameters
    ----------
    invocation:
        Positional arguments and flags, ``args[0]`` being the subcommand.
    config:
        Runner settings. Defaults to ``node_modules/scripts`` under the
        current directory.

    Returns
    -------
    RunOutcome
        The branch taken, plus the process handle or error it produced.
    """
    from pkgrun.runner import run as _run

    return _run(invocation, config=config)


__all__ = [
    "__version__",
    "ConfigError",
    "DiscoveryError",
    "DispatchError",
    "Invocation",
    "ScriptRunError",
    "UnknownScriptError",
    "dispatch",
    "list_scripts",
    "resolve",
    "run",
]
