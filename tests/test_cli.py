"""Tests for snapshot_release.cli."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from snapshot_release.build import BuildProvider
from snapshot_release.cli import cli
from snapshot_release.errors import NotSnapshot
from snapshot_release.publish import NodePublisher

from conftest import FakeGit

REGISTRY = {"registry": "https://registry.example.com"}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _write_package(root: Path, version: str = "1.5.0-SNAPSHOT", **fields: object) -> None:
    data = {"name": "widget", "version": version, **fields}
    (root / "package.json").write_text(json.dumps(data, indent=2) + "\n")


def _invoke(runner: CliRunner, root: Path, *args: str, git: FakeGit | None = None):
    with patch("snapshot_release.cli.Git", return_value=git or FakeGit()):
        return runner.invoke(cli, list(args), obj={"root": root}, env={})


class TestInfoCommands:
    def test_version(self, runner: CliRunner, tmp_path: Path) -> None:
        _write_package(tmp_path, "1.5.0-SNAPSHOT.20240101")
        result = _invoke(runner, tmp_path, "version")
        assert result.exit_code == 0
        assert result.output.strip() == "1.5.0-SNAPSHOT.20240101"

    def test_release_version(self, runner: CliRunner, tmp_path: Path) -> None:
        _write_package(tmp_path, "1.5.0-SNAPSHOT.20240101")
        result = _invoke(runner, tmp_path, "release-version")
        assert result.exit_code == 0
        assert result.output.strip() == "1.5.0"

    def test_missing_manifest(self, runner: CliRunner, tmp_path: Path) -> None:
        result = _invoke(runner, tmp_path, "version")
        assert result.exit_code == 1
        assert "No package.json found" in result.output


class TestVerifyRelease:
    def test_releasable(self, runner: CliRunner, tmp_path: Path) -> None:
        _write_package(tmp_path, publishConfig=REGISTRY)
        result = _invoke(runner, tmp_path, "verify-release")
        assert result.exit_code == 0
        assert result.output == ""

    def test_not_releasable_prints_report(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        _write_package(
            tmp_path, publishConfig=REGISTRY, dependencies={"core": "2.0.0-SNAPSHOT"}
        )
        result = _invoke(runner, tmp_path, "verify-release")
        assert result.exit_code == 1
        assert "Snapshot-Version detected" in result.output
        assert "core - 2.0.0-SNAPSHOT" in result.output

    def test_json_output(self, runner: CliRunner, tmp_path: Path) -> None:
        _write_package(tmp_path, publishConfig=REGISTRY)
        result = _invoke(runner, tmp_path, "verify-release", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["isReleasable"] is True


class TestWorkflowCommands:
    @patch("snapshot_release.cli.run_release")
    def test_release_wires_collaborators(
        self, mock_release: MagicMock, runner: CliRunner, tmp_path: Path
    ) -> None:
        _write_package(tmp_path)
        git = FakeGit()

        result = _invoke(
            runner, tmp_path, "release", "--package-manager", "pnpm", git=git
        )

        assert result.exit_code == 0, result.output
        project, used_git, builder, publisher = mock_release.call_args.args
        assert project.version == "1.5.0-SNAPSHOT"
        assert used_git is git
        assert isinstance(builder, BuildProvider)
        assert isinstance(publisher, NodePublisher)
        assert publisher.config.package_manager == "pnpm"

    def test_release_requires_package_manager(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        _write_package(tmp_path)
        result = _invoke(runner, tmp_path, "release")
        assert result.exit_code == 1
        assert "No package manager configured" in result.output

    def test_package_manager_from_config_file(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        _write_package(tmp_path)
        (tmp_path / "snapshot-release.toml").write_text('package-manager = "yarn"\n')

        with patch("snapshot_release.cli.run_release") as mock_release:
            result = _invoke(runner, tmp_path, "release")

        assert result.exit_code == 0, result.output
        assert mock_release.call_args.args[2].config.package_manager == "yarn"

    @patch("snapshot_release.cli.run_release")
    def test_release_error_is_reported(
        self, mock_release: MagicMock, runner: CliRunner, tmp_path: Path
    ) -> None:
        _write_package(tmp_path)
        mock_release.side_effect = NotSnapshot("1.5.0")

        result = _invoke(runner, tmp_path, "release", "--package-manager", "npm")

        assert result.exit_code == 1
        assert "Error: The current version is not a SNAPSHOT version: 1.5.0" in (
            result.output
        )
        assert "Traceback" not in result.output

    @patch("snapshot_release.cli.run_release")
    def test_verbose_shows_traceback(
        self, mock_release: MagicMock, runner: CliRunner, tmp_path: Path
    ) -> None:
        _write_package(tmp_path)
        mock_release.side_effect = NotSnapshot("1.5.0")

        result = _invoke(
            runner, tmp_path, "--verbose", "release", "--package-manager", "npm"
        )

        assert result.exit_code == 1
        assert "Traceback" in result.output

    @patch("snapshot_release.cli.start_hotfix")
    def test_start_hotfix(
        self, mock_hotfix: MagicMock, runner: CliRunner, tmp_path: Path
    ) -> None:
        _write_package(tmp_path, "2.1.2")

        result = _invoke(
            runner, tmp_path, "start-hotfix", "2.1", "--package-manager", "npm"
        )

        assert result.exit_code == 0, result.output
        assert mock_hotfix.call_args.args[3] == "2.1"

    @patch("snapshot_release.cli.NodePublisher")
    def test_publish(
        self, mock_publisher: MagicMock, runner: CliRunner, tmp_path: Path
    ) -> None:
        _write_package(tmp_path)

        result = _invoke(runner, tmp_path, "publish", "--package-manager", "npm")

        assert result.exit_code == 0, result.output
        mock_publisher.return_value.publish.assert_called_once_with()

    def test_clean(self, runner: CliRunner, tmp_path: Path) -> None:
        _write_package(tmp_path)
        (tmp_path / "dist").mkdir()
        (tmp_path / "snapshot-release.toml").write_text('build-dir = "dist"\n')

        result = _invoke(runner, tmp_path, "clean")

        assert result.exit_code == 0, result.output
        assert not (tmp_path / "dist").exists()

    def test_rejects_unknown_package_manager(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        _write_package(tmp_path)
        result = _invoke(runner, tmp_path, "release", "--package-manager", "bun")
        assert result.exit_code == 2

    @patch("snapshot_release.build.run")
    def test_missing_package_manager_is_reported(
        self, mock_run: MagicMock, runner: CliRunner, tmp_path: Path
    ) -> None:
        """A missing binary surfaces as an error line, not a traceback."""
        _write_package(tmp_path, "1.0.0-SNAPSHOT", scripts={"test": "vitest run"})
        mock_run.side_effect = FileNotFoundError(2, "No such file", "npm")

        result = _invoke(runner, tmp_path, "release", "--package-manager", "npm")

        assert result.exit_code == 1
        assert 'Error: Script "test" could not be run' in result.output
        assert "Traceback" not in result.output
        assert not isinstance(result.exception, FileNotFoundError)

    def test_outside_git_repository(self, runner: CliRunner, tmp_path: Path) -> None:
        _write_package(tmp_path)

        result = _invoke(runner, tmp_path, "version", git=FakeGit(repository=False))

        assert result.exit_code == 1
        assert f"Error: Not a git repository: {tmp_path}" in result.output
