"""Test that the top-level quickstart API works for pkgrun."""
from __future__ import annotations

from pathlib import Path


def test_quickstart_imports() -> None:
    import pkgrun

    assert callable(pkgrun.list_scripts)
    assert callable(pkgrun.resolve)
    assert callable(pkgrun.dispatch)
    assert callable(pkgrun.run)


def test_version_matches_fixture(expected_version: str) -> None:
    import pkgrun

    assert pkgrun.__version__ == expected_version


def test_package_name(package_name: str) -> None:
    import pkgrun

    assert pkgrun.__name__ == package_name


def test_quickstart_list_and_resolve(scripts_dir: Path) -> None:
    import pkgrun
    from pkgrun.resolver import RunScript

    registry = pkgrun.list_scripts(scripts_dir)
    action = pkgrun.resolve(pkgrun.Invocation(("run", "build")), registry)

    assert isinstance(action, RunScript)
    assert action.location == scripts_dir / "build"


def test_errors_share_a_base_class() -> None:
    import pkgrun

    for error_type in (
        pkgrun.ConfigError,
        pkgrun.DiscoveryError,
        pkgrun.DispatchError,
        pkgrun.UnknownScriptError,
    ):
        assert issubclass(error_type, pkgrun.ScriptRunError)
