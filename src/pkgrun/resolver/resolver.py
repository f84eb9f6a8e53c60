"""Resolution of a requested script name against a registry snapshot.

``resolve`` is a pure function: it reads the invocation and the
snapshot and returns one of three actions. It never touches the
filesystem and never starts a process.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from pkgrun.errors import UnknownScriptError
from pkgrun.registry.registry import RegistrySnapshot, Script

VERBOSE_FLAGS = frozenset({"--verbose", "-v"})


@dataclass(frozen=True)
class Invocation:
    """The positional arguments and flags of one CLI call.

    Parameters
    ----------
    args:
        Positional arguments. ``args[0]`` is the subcommand token and
        ``args[1]``, when present, is the requested script name.
    flags:
        Flags passed on the command line. None of them change how a
        script is resolved.
    """

    args: tuple[str, ...]
    flags: frozenset[str] = field(default_factory=frozenset)

    @property
    def subcommand(self) -> str | None:
        return self.args[0] if self.args else None

    @property
    def script_name(self) -> str | None:
        return self.args[1] if len(self.args) > 1 else None

    @property
    def verbose(self) -> bool:
        return bool(self.flags & VERBOSE_FLAGS)


@dataclass(frozen=True)
class ListAll:
    """No script was named: show every available script."""

    names: tuple[str, ...]


@dataclass(frozen=True)
class RunScript:
    """The requested script exists and should be dispatched."""

    script: Script

    @property
    def location(self) -> Path:
        return self.script.location


@dataclass(frozen=True)
class ReportUnknownScript:
    """The requested script is not in the registry."""

    name: str
    available: tuple[str, ...] = ()

    def to_error(self) -> UnknownScriptError:
        """Return the matching ``UnknownScriptError``."""
        return UnknownScriptError(self.name, self.available)


ResolvedAction = Union[ListAll, RunScript, ReportUnknownScript]


def resolve(invocation: Invocation, registry: RegistrySnapshot) -> ResolvedAction:
    """Decide what to do with ``invocation`` given the scripts in ``registry``.

    Parameters
    ----------
    invocation:
        The parsed command line.
    registry:
        The scripts discovered for this run.

    Returns
    -------
    ResolvedAction
        ``ListAll`` when no script name was given (even for an empty
        registry), ``RunScript`` when the name matches a script, and
        ``ReportUnknownScript`` otherwise.
    """
    name = invocation.script_name
    if name is None:
        return ListAll(registry.names())

    script = registry.get(name)
    if script is None:
        return ReportUnknownScript(name, registry.names())
    return RunScript(script)
