"""Unit tests for pkgrun.runner — the end-to-end run flow and RunOutcome."""
from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pkgrun.config import RunnerConfig
from pkgrun.dispatcher import PosixLauncher
from pkgrun.errors import DiscoveryError, DispatchError, UnknownScriptError
from pkgrun.registry import Script
from pkgrun.resolver import Invocation, ListAll, ReportUnknownScript, RunScript
from pkgrun.runner import RunOutcome, RunStatus, format_command, run

POPEN = "pkgrun.dispatcher.dispatcher.subprocess.Popen"


class TestRunSkipped:
    def test_missing_scripts_dir_skips_everything(self, tmp_path: Path) -> None:
        with patch(POPEN) as popen:
            outcome = run(Invocation(("run", "build")), RunnerConfig(project_dir=tmp_path))

        assert outcome == RunOutcome(RunStatus.SKIPPED)
        assert outcome.exit_code == 0
        assert outcome.error is None
        popen.assert_not_called()

    def test_missing_scripts_dir_skips_listing_too(self, tmp_path: Path) -> None:
        outcome = run(Invocation(("run",)), RunnerConfig(project_dir=tmp_path))
        assert outcome.status is RunStatus.SKIPPED


class TestRunListAll:
    def test_lists_both_scripts_and_exits_nonzero(self, project_config: RunnerConfig) -> None:
        outcome = run(Invocation(("run",)), project_config)

        assert outcome.status is RunStatus.LISTED
        assert isinstance(outcome.action, ListAll)
        assert sorted(outcome.action.names) == ["build", "test"]
        assert outcome.exit_code != 0

    def test_empty_scripts_dir_still_lists(self, tmp_path: Path) -> None:
        (tmp_path / "node_modules" / "scripts").mkdir(parents=True)
        outcome = run(Invocation(("run",)), RunnerConfig(project_dir=tmp_path))
        assert outcome.action == ListAll(())


class TestRunScript:
    def test_dispatches_matching_script(self, project_config: RunnerConfig, scripts_dir: Path) -> None:
        with patch(POPEN) as popen:
            outcome = run(Invocation(("run", "build")), project_config, launcher=PosixLauncher())

        assert outcome.status is RunStatus.DISPATCHED
        assert outcome.error is None
        assert outcome.exit_code == 0
        assert isinstance(outcome.action, RunScript)
        assert outcome.action.location == scripts_dir / "build"
        command = popen.call_args.args[0]
        assert command[-1] == (scripts_dir / "build").as_posix()
        assert outcome.process is not None
        assert outcome.process.process is popen.return_value

    def test_on_dispatch_called_before_spawn(self, project_config: RunnerConfig) -> None:
        events: list[str] = []

        def on_dispatch(script: Script) -> None:
            events.append(f"announce:{script.name}")

        def fake_popen(*args: object, **kwargs: object) -> MagicMock:
            events.append("spawn")
            return MagicMock()

        with patch(POPEN, side_effect=fake_popen):
            run(Invocation(("run", "test")), project_config, launcher=PosixLauncher(), on_dispatch=on_dispatch)

        assert events == ["announce:test", "spawn"]

    def test_script_in_current_directory_is_run_by_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "hello").write_text("", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        config = RunnerConfig(project_dir=Path("."), scripts_dir=Path("."))

        with patch(POPEN) as popen:
            outcome = run(Invocation(("run", "hello")), config, launcher=PosixLauncher())

        assert outcome.status is RunStatus.DISPATCHED
        assert popen.call_args.args[0] == ["/bin/sh", "-c", "./hello"]

    def test_uses_configured_launcher(self, scripts_dir: Path, tmp_path: Path) -> None:
        config = RunnerConfig(project_dir=tmp_path, launcher="windows")
        with patch(POPEN) as popen:
            run(Invocation(("run", "build")), config)

        assert popen.call_args.args[0][1] == "/C"

    def test_unknown_launcher_fails_without_spawning(self, scripts_dir: Path, tmp_path: Path) -> None:
        config = RunnerConfig(project_dir=tmp_path, launcher="no-such-launcher")
        with patch("pkgrun.dispatcher.launchers.importlib.metadata.entry_points", return_value=[]):
            with patch(POPEN) as popen:
                outcome = run(Invocation(("run", "build")), config)

        assert outcome.status is RunStatus.FAILED
        assert "no-such-launcher" in str(outcome.error)
        popen.assert_not_called()

    def test_spawn_failure_is_a_failed_outcome(self, project_config: RunnerConfig) -> None:
        with patch(POPEN, side_effect=OSError(8, "Exec format error")):
            outcome = run(Invocation(("run", "build")), project_config, launcher=PosixLauncher())

        assert outcome.status is RunStatus.FAILED
        assert isinstance(outcome.error, DispatchError)
        assert outcome.exit_code == 1
        assert outcome.process is None


class TestRunUnknownScript:
    def test_unknown_name_never_dispatches(self, project_config: RunnerConfig) -> None:
        with patch(POPEN) as popen:
            outcome = run(Invocation(("run", "deploy")), project_config)

        popen.assert_not_called()
        assert outcome.status is RunStatus.UNKNOWN_SCRIPT
        assert isinstance(outcome.action, ReportUnknownScript)
        assert outcome.action.name == "deploy"
        assert isinstance(outcome.error, UnknownScriptError)
        assert outcome.exit_code == 1


class TestRunDiscoveryFailure:
    def test_unreadable_dir_is_a_failed_outcome(self, project_config: RunnerConfig) -> None:
        with patch(
            "pkgrun.registry.registry.os.scandir",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            outcome = run(Invocation(("run",)), project_config)

        assert outcome.status is RunStatus.FAILED
        assert isinstance(outcome.error, DiscoveryError)
        assert outcome.action is None

    def test_file_in_place_of_scripts_dir_is_reported(self, tmp_path: Path) -> None:
        (tmp_path / "node_modules").mkdir()
        (tmp_path / "node_modules" / "scripts").write_text("", encoding="utf-8")

        with patch(POPEN) as popen:
            outcome = run(Invocation(("run", "build")), RunnerConfig(project_dir=tmp_path))

        popen.assert_not_called()
        assert outcome.status is RunStatus.FAILED
        assert isinstance(outcome.error, DiscoveryError)
        assert outcome.exit_code == 1


class TestRunOutcome:
    @pytest.mark.parametrize(
        ("status", "code"),
        [
            (RunStatus.SKIPPED, 0),
            (RunStatus.DISPATCHED, 0),
            (RunStatus.LISTED, 1),
            (RunStatus.UNKNOWN_SCRIPT, 1),
            (RunStatus.FAILED, 1),
        ],
    )
    def test_exit_codes(self, status: RunStatus, code: int) -> None:
        outcome = RunOutcome(status)
        assert outcome.exit_code == code
        assert outcome.ok is (code == 0)


class TestFormatCommand:
    def test_uses_display_prefix(self) -> None:
        script = Script("build", Path("node_modules/scripts/build"))
        assert format_command(script, RunnerConfig(project_dir=Path("."))) == "scripts/build"

    def test_empty_prefix_shows_bare_name(self) -> None:
        script = Script("build", Path("node_modules/scripts/build"))
        config = RunnerConfig(project_dir=Path("."), display_prefix="")
        assert format_command(script, config) == "build"
