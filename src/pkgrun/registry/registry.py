"""Script discovery.

The registry is never cached: every call to ``list_scripts`` walks the
scripts directory again and returns a fresh ``RegistrySnapshot``.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from pkgrun.errors import DiscoveryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Script:
    """A runnable entry inside the scripts directory.

    Parameters
    ----------
    name:
        The entry name, unique within one snapshot.
    location:
        Path used to invoke the script (scripts directory joined with
        ``name``).
    """

    name: str
    location: Path


@dataclass(frozen=True)
class RegistrySnapshot:
    """The scripts visible in ``directory`` at one point in time.

    Scripts keep the order the directory listing produced them in, which
    is the order used for display.
    """

    directory: Path
    scripts: tuple[Script, ...] = field(default_factory=tuple)

    def names(self) -> tuple[str, ...]:
        """Return every script name in listing order."""
        return tuple(script.name for script in self.scripts)

    def get(self, name: str) -> Script | None:
        """Return the script called ``name``, or None if there is none."""
        for script in self.scripts:
            if script.name == name:
                return script
        return None

    def __contains__(self, name: object) -> bool:
        return any(script.name == name for script in self.scripts)

    def __iter__(self) -> Iterator[Script]:
        return iter(self.scripts)

    def __len__(self) -> int:
        return len(self.scripts)


def scripts_dir_exists(directory: str | os.PathLike[str]) -> bool:
    """Return True if anything exists at ``directory``.

    Only absence skips the run. A file in place of the directory is left
    for ``list_scripts`` to report as a ``DiscoveryError``.
    """
    return Path(directory).exists()


def list_scripts(directory: str | os.PathLike[str]) -> RegistrySnapshot:
    """Enumerate the entries directly inside ``directory``.

    The listing is non-recursive. Subdirectories and files alike count
    as scripts; nothing is filtered out.

    Parameters
    ----------
    directory:
        The scripts directory. Callers check that it exists first.

    Returns
    -------
    RegistrySnapshot
        One ``Script`` per directory entry.

    Raises
    ------
    DiscoveryError
        If the directory cannot be read, e.g. permission denied or it was
        removed after the existence check.
    """
    root = Path(directory)
    try:
        with os.scandir(root) as entries:
            scripts = tuple(Script(name=entry.name, location=root / entry.name) for entry in entries)
    except OSError as exc:
        raise DiscoveryError(root, exc) from exc

    logger.debug("Discovered %d script(s) in %s", len(scripts), root)
    return RegistrySnapshot(directory=root, scripts=scripts)
