"""The ``run`` command flow.

One call performs one pass of::

    existence check -> list_scripts -> resolve -> dispatch

and reports what happened as a ``RunOutcome``. Nothing here prints or
exits; rendering and exit codes belong to the CLI.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from pkgrun.config import RunnerConfig
from pkgrun.dispatcher.dispatcher import ScriptProcess, dispatch
from pkgrun.dispatcher.launchers import CommandLauncher, select_launcher
from pkgrun.errors import ScriptRunError
from pkgrun.registry.registry import Script, list_scripts, scripts_dir_exists
from pkgrun.resolver.resolver import (
    Invocation,
    ListAll,
    ReportUnknownScript,
    ResolvedAction,
    RunScript,
    resolve,
)

logger = logging.getLogger(__name__)


class RunStatus(Enum):
    """Terminal state of one run."""

    SKIPPED = auto()
    LISTED = auto()
    DISPATCHED = auto()
    UNKNOWN_SCRIPT = auto()
    FAILED = auto()


# Every branch that did no work exits non-zero.
_EXIT_CODES = {
    RunStatus.SKIPPED: 0,
    RunStatus.LISTED: 1,
    RunStatus.DISPATCHED: 0,
    RunStatus.UNKNOWN_SCRIPT: 1,
    RunStatus.FAILED: 1,
}


@dataclass(frozen=True)
class RunOutcome:
    """What a single ``run`` call did.

    Parameters
    ----------
    status:
        Which branch the run ended in.
    action:
        The resolver's decision, or None if resolution never happened.
    process:
        Handle on the dispatched script for ``DISPATCHED`` runs.
    error:
        The error behind ``UNKNOWN_SCRIPT`` and ``FAILED`` runs.
    """

    status: RunStatus
    action: ResolvedAction | None = None
    process: ScriptProcess | None = None
    error: ScriptRunError | None = None

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self.status]

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def format_command(script: Script, config: RunnerConfig) -> str:
    """Return the display form of the command that runs ``script``."""
    if not config.display_prefix:
        return script.name
    return f"{config.display_prefix}/{script.name}"


def run(
    invocation: Invocation,
    config: RunnerConfig | None = None,
    launcher: CommandLauncher | None = None,
    on_dispatch: Callable[[Script], None] | None = None,
) -> RunOutcome:
    """Resolve and, when it names a known script, dispatch ``invocation``.

    If the scripts directory does not exist the whole flow is skipped and
    a ``SKIPPED`` outcome is returned without an error.

    Parameters
    ----------
    invocation:
        The parsed command line.
    config:
        Runner settings. Defaults to ``RunnerConfig()``.
    launcher:
        Launcher override. Defaults to ``config.launcher`` or the
        platform default.
    on_dispatch:
        Called with the resolved script right before its process is
        started.
    """
    config = config or RunnerConfig()
    scripts_path = config.scripts_path

    if not scripts_dir_exists(scripts_path):
        logger.debug("No scripts directory at %s; nothing to do", scripts_path)
        return RunOutcome(RunStatus.SKIPPED)

    try:
        registry = list_scripts(scripts_path)
    except ScriptRunError as exc:
        return RunOutcome(RunStatus.FAILED, error=exc)

    action = resolve(invocation, registry)

    if isinstance(action, ListAll):
        return RunOutcome(RunStatus.LISTED, action=action)

    if isinstance(action, ReportUnknownScript):
        logger.debug("Script %r not found among %r", action.name, action.available)
        return RunOutcome(RunStatus.UNKNOWN_SCRIPT, action=action, error=action.to_error())

    assert isinstance(action, RunScript)
    try:
        if launcher is None:
            launcher = select_launcher(config.launcher)
        if on_dispatch is not None:
            on_dispatch(action.script)
        process = dispatch(action.location, launcher=launcher)
    except ScriptRunError as exc:
        return RunOutcome(RunStatus.FAILED, action=action, error=exc)

    logger.debug("Started %s (pid %s)", action.location, process.pid)
    return RunOutcome(RunStatus.DISPATCHED, action=action, process=process)
