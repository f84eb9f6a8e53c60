"""Starting a resolved script as a host-shell process.

``dispatch`` returns as soon as the process has been created. Output is
not captured: the child inherits this process's stdin, stdout and
stderr. The returned ``ScriptProcess`` lets the caller detach (drop the
handle), wait, wait with a timeout, or cancel.
"""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from pkgrun.dispatcher.launchers import CommandLauncher, select_launcher
from pkgrun.errors import DispatchError

logger = logging.getLogger(__name__)


@dataclass
class ScriptProcess:
    """Handle on a dispatched script.

    Parameters
    ----------
    location:
        The script file that was dispatched.
    command:
        The argv handed to the host shell.
    process:
        The underlying ``subprocess.Popen`` object.
    """

    location: Path
    command: list[str]
    process: subprocess.Popen = field(repr=False)

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> int | None:
        """Exit status once the script has finished, otherwise None."""
        return self.process.returncode

    def poll(self) -> int | None:
        """Return the exit status if the script has finished, without blocking."""
        return self.process.poll()

    def wait(self, timeout: float | None = None) -> int | None:
        """Block until the script finishes and return its exit status.

        Returns None if ``timeout`` seconds elapse first; the process is
        left running in that case.
        """
        try:
            return self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.debug("Script %s still running after %ss", self.location, timeout)
            return None

    def cancel(self) -> None:
        """Terminate the script if it is still running."""
        if self.process.poll() is None:
            logger.debug("Terminating script %s (pid %s)", self.location, self.pid)
            self.process.terminate()


def dispatch(
    location: str | Path,
    launcher: CommandLauncher | None = None,
    cwd: str | Path | None = None,
) -> ScriptProcess:
    """Start the script at ``location`` through the host shell.

    Parameters
    ----------
    location:
        Path of the script file, relative to ``cwd`` or absolute.
    launcher:
        The launcher that builds the shell command. Defaults to the
        launcher for the running platform.
    cwd:
        Working directory for the child process. Defaults to the current
        directory.

    Returns
    -------
    ScriptProcess
        A handle on the running process. Nothing waits on it unless the
        caller does.

    Raises
    ------
    DispatchError
        If the process cannot be started.
    """
    location = Path(location)
    if launcher is None:
        launcher = select_launcher()
    command = launcher.build_command(location)
    logger.debug("Dispatching %s as %r", location, command)
    try:
        process = subprocess.Popen(command, cwd=cwd)
    except OSError as exc:
        raise DispatchError(location, exc) from exc
    return ScriptProcess(location=location, command=command, process=process)
