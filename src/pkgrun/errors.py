"""Error types for pkgrun.

Every failure the runner can hit is a ``ScriptRunError``. The core never
prints or exits on these; they are handed back to the caller, which
decides how to render them and which exit status to use.
"""
from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class ScriptRunError(Exception):
    """Base class for all pkgrun errors."""


class ConfigError(ScriptRunError):
    """Raised when a ``pkgrun.yaml`` file cannot be loaded or is malformed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration in {path}: {reason}")


class DiscoveryError(ScriptRunError):
    """Raised when the scripts directory exists but cannot be listed.

    Parameters
    ----------
    directory:
        The scripts directory that was being enumerated.
    cause:
        The underlying ``OSError``.
    """

    def __init__(self, directory: Path, cause: OSError) -> None:
        self.directory = directory
        self.cause = cause
        detail = cause.strerror or str(cause)
        super().__init__(f"Cannot read scripts directory {directory}: {detail}")


class UnknownScriptError(ScriptRunError):
    """Raised when a requested script name is not in the registry."""

    def __init__(self, script_name: str, available: Sequence[str] = ()) -> None:
        self.script_name = script_name
        self.available = tuple(available)
        super().__init__(f"{script_name} is not a valid script.")


class DispatchError(ScriptRunError):
    """Raised when the host shell process for a script cannot be started."""

    def __init__(self, location: Path, cause: OSError) -> None:
        self.location = location
        self.cause = cause
        detail = cause.strerror or str(cause)
        super().__init__(f"Failed to start script {location}: {detail}")
