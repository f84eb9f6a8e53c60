"""Script registry: discovery of the scripts available in a project."""
from __future__ import annotations

from pkgrun.registry.registry import RegistrySnapshot, Script, list_scripts, scripts_dir_exists

__all__ = ["RegistrySnapshot", "Script", "list_scripts", "scripts_dir_exists"]
