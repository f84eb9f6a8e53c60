#!/usr/bin/env python3
"""Example: Quickstart — pkgrun

Minimal working example: create a throwaway project with two scripts,
list them, resolve a name, and run one while waiting for its status.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install pkgrun
"""
from __future__ import annotations

import stat
import tempfile
from pathlib import Path

import pkgrun
from pkgrun.config import RunnerConfig
from pkgrun.runner import RunStatus

SCRIPTS = {
    "build": "#!/bin/sh\necho building...\n",
    "test": "#!/bin/sh\necho testing...\nexit 1\n",
}


def main() -> None:
    print(f"pkgrun version: {pkgrun.__version__}")

    with tempfile.TemporaryDirectory() as tmp:
        project = Path(tmp)
        scripts_dir = project / "node_modules" / "scripts"
        scripts_dir.mkdir(parents=True)
        for name, body in SCRIPTS.items():
            path = scripts_dir / name
            path.write_text(body, encoding="utf-8")
            path.chmod(path.stat().st_mode | stat.S_IXUSR)

        # Step 1: Discover scripts
        registry = pkgrun.list_scripts(scripts_dir)
        print(f"Discovered: {', '.join(sorted(registry.names()))}")

        # Step 2: Resolve a few names
        for args in (("run",), ("run", "build"), ("run", "deploy")):
            action = pkgrun.resolve(pkgrun.Invocation(args), registry)
            print(f"  {' '.join(args):<12} -> {type(action).__name__}")

        # Step 3: Run each script and wait for it
        config = RunnerConfig(project_dir=project)
        for name in SCRIPTS:
            outcome = pkgrun.run(pkgrun.Invocation(("run", name)), config)
            if outcome.status is RunStatus.DISPATCHED and outcome.process is not None:
                print(f"{name}: exit status {outcome.process.wait(timeout=30)}")
            else:
                print(f"{name}: {outcome.status.name} ({outcome.error})")


if __name__ == "__main__":
    main()
