"""CLI entry point for pkgrun.

Invoked as::

    pkgrun [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m pkgrun.cli.main

Commands
--------
run         Run a pre-defined package script (no name lists them)
list        Show the scripts available in a project
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from pkgrun.config import RunnerConfig
    from pkgrun.registry.registry import Script

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    """Send pkgrun log records to stderr, at DEBUG when ``verbose``."""
    logger = logging.getLogger("pkgrun")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _load_config_or_exit(
    project_dir: str | None, config_file: str | None, launcher: str | None = None
) -> "RunnerConfig":
    """Load the runner configuration, exiting on a malformed config file."""
    from dataclasses import replace

    from pkgrun.config import load_config
    from pkgrun.errors import ConfigError

    try:
        config = load_config(project_dir=project_dir, path=config_file)
    except ConfigError as exc:
        _print_error(str(exc))
        sys.exit(1)
    if launcher:
        config = replace(config, launcher=launcher)
    return config


def _print_error(message: str) -> None:
    err_console.print(f"[bold bright_red]error[/bold bright_red]: {escape(message)}", soft_wrap=True)


def _shell_exit_code(returncode: int) -> int:
    """Map a child's return code to a shell-style exit status.

    A negative code means the child died from that signal; shells report
    it as ``128 + signal``.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="pkgrun")
def cli() -> None:
    """Run the pre-defined scripts of a package."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from pkgrun import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]pkgrun[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# run command
# ---------------------------------------------------------------------------


@cli.command(name="run")
@click.argument("script", required=False)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Output verbose messages on internal operations.")
@click.option(
    "--project-dir",
    "-C",
    type=click.Path(file_okay=False),
    default=None,
    help="Project root (defaults to the current directory).",
)
@click.option("--config", "config_file", type=click.Path(dir_okay=False), default=None, help="Path to a pkgrun.yaml file.")
@click.option("--launcher", default=None, help="Launcher to use instead of the platform default.")
@click.option("--wait", is_flag=True, default=False, help="Wait for the script and exit with its status.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="With --wait, stop the script after this many seconds.",
)
def run_command(
    script: str | None,
    verbose: bool,
    project_dir: str | None,
    config_file: str | None,
    launcher: str | None,
    wait: bool,
    timeout: float | None,
) -> None:
    """Run a pre-defined package script.

    SCRIPT is the name of an entry in the scripts directory. Without it,
    the available scripts are listed.

    Examples:

    \b
        pkgrun run
        pkgrun run build
        pkgrun run test --wait --timeout 600
    """
    from pkgrun.resolver.resolver import Invocation, ListAll
    from pkgrun.runner import RunStatus, format_command, run

    if timeout is not None and not wait:
        raise click.UsageError("--timeout requires --wait.")

    _configure_logging(verbose)
    config = _load_config_or_exit(project_dir, config_file, launcher)

    invocation = Invocation(
        args=("run",) if script is None else ("run", script),
        flags=frozenset({"--verbose"}) if verbose else frozenset(),
    )

    def announce(resolved: "Script") -> None:
        console.print(
            f"[bold bright_magenta]>[/bold bright_magenta] {escape(format_command(resolved, config))}",
            soft_wrap=True,
        )

    outcome = run(invocation, config=config, on_dispatch=announce)

    if outcome.status is RunStatus.LISTED:
        assert isinstance(outcome.action, ListAll)
        console.print(
            "[bold bright_cyan]scripts[/bold bright_cyan][bold bright_magenta]:[/bold bright_magenta] "
            + escape(", ".join(outcome.action.names)),
            soft_wrap=True,
        )
    elif outcome.status is RunStatus.UNKNOWN_SCRIPT:
        console.print(
            f"[bold bright_red]error[/bold bright_red]: "
            f"[bold bright_yellow]{escape(script or '')}[/bold bright_yellow] is not a valid script.",
            soft_wrap=True,
        )
    elif outcome.status is RunStatus.FAILED:
        _print_error(str(outcome.error))
    elif outcome.status is RunStatus.DISPATCHED and wait:
        assert outcome.process is not None
        code = outcome.process.wait(timeout=timeout)
        if code is None:
            outcome.process.cancel()
            _print_error(f"{script} did not finish within {timeout:g}s and was stopped.")
            sys.exit(1)
        sys.exit(_shell_exit_code(code))

    sys.exit(outcome.exit_code)


# ---------------------------------------------------------------------------
# list command
# ---------------------------------------------------------------------------


@cli.command(name="list")
@click.option(
    "--project-dir",
    "-C",
    type=click.Path(file_okay=False),
    default=None,
    help="Project root (defaults to the current directory).",
)
@click.option("--config", "config_file", type=click.Path(dir_okay=False), default=None, help="Path to a pkgrun.yaml file.")
def list_command(project_dir: str | None, config_file: str | None) -> None:
    """Show the scripts available in a project."""
    from pkgrun.errors import DiscoveryError
    from pkgrun.registry.registry import list_scripts, scripts_dir_exists

    _configure_logging(False)
    config = _load_config_or_exit(project_dir, config_file)
    scripts_path = config.scripts_path

    if not scripts_dir_exists(scripts_path):
        console.print(f"[yellow]No scripts directory[/yellow] at {escape(str(scripts_path))}")
        sys.exit(0)

    try:
        registry = list_scripts(scripts_path)
    except DiscoveryError as exc:
        _print_error(str(exc))
        sys.exit(1)

    if not registry:
        console.print(f"[dim]No scripts in {escape(str(scripts_path))}[/dim]")
        sys.exit(0)

    table = Table(title=f"Scripts: {escape(str(scripts_path))}")
    table.add_column("Name", style="bold cyan")
    table.add_column("Location")
    for entry in registry:
        table.add_row(escape(entry.name), escape(str(entry.location)))
    console.print(table)


if __name__ == "__main__":
    cli()
