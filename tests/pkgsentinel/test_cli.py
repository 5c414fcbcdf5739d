"""Tests for CLI commands — git and package managers are mocked."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from pkgsentinel.cli import main
from pkgsentinel.engines.project_scanner.models import VcsStatus

from .conftest import write_manifest


@pytest.fixture(autouse=True)
def quiet_cli():
    """Keep git out of CLI runs."""
    probe = AsyncMock(return_value=VcsStatus(current_branch="main", uncommitted_file_count=0))
    with patch("pkgsentinel.engines.project_scanner.vcs.VcsProbe.probe", probe):
        yield


@pytest.fixture
def runner():
    return CliRunner()


# ── scan ──


class TestScan:
    def test_table_output(self, runner, tmp_path):
        write_manifest(tmp_path / "web", {"next": "5.0.0", "react": "18.0.0"})
        write_manifest(tmp_path / "docs", {"next": "16.0.7"})
        result = runner.invoke(main, ["scan", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "Found 2 project(s), 1 vulnerable" in result.output
        assert "[!] next 5.0.0 -> 15.0.5" in result.output
        assert "[!] react 18.0.0 -> 19.0.1" in result.output
        assert "[+] next 16.0.7" in result.output
        assert result.output.index("docs/package.json") < result.output.index("web/package.json")

    def test_json_output(self, runner, tmp_path):
        write_manifest(tmp_path / "web", {"next": "^15.1.0"})
        result = runner.invoke(main, ["scan", str(tmp_path), "--json"])
        assert result.exit_code == 0, result.output
        [entry] = json.loads(result.stdout)
        assert entry["display_path"] == "web/package.json"
        assert entry["vulnerable_flags"] == {"next": True}
        assert entry["proposed_safe_versions"] == {"next": "15.1.9"}
        assert entry["current_branch"] == "main"
        assert entry["package_manager"] == "unknown"

    def test_no_projects(self, runner, tmp_path):
        result = runner.invoke(main, ["scan", str(tmp_path)])
        assert result.exit_code == 0
        assert "No projects found." in result.output

    def test_missing_root(self, runner, tmp_path):
        result = runner.invoke(main, ["scan", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "Path does not exist" in result.output

    def test_max_depth(self, runner, tmp_path):
        write_manifest(tmp_path / "a" / "b", {"next": "15.0.0"})
        result = runner.invoke(main, ["scan", str(tmp_path), "--max-depth", "1", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == []

    def test_max_depth_from_env(self, runner, tmp_path, monkeypatch):
        write_manifest(tmp_path / "a" / "b", {"next": "15.0.0"})
        monkeypatch.setenv("PKGSENTINEL_MAX_DEPTH", "1")
        result = runner.invoke(main, ["scan", str(tmp_path), "--json"])
        assert json.loads(result.stdout) == []

    def test_negative_max_depth_rejected(self, runner, tmp_path):
        result = runner.invoke(main, ["scan", str(tmp_path), "--max-depth", "-1"])
        assert result.exit_code == 2

    def test_manifest_error_shown(self, runner, tmp_path):
        (tmp_path / "package.json").write_text("{")
        result = runner.invoke(main, ["scan", str(tmp_path)])
        assert result.exit_code == 0
        assert "manifest error:" in result.output


# ── actions ──


class TestActions:
    def test_upgrade(self, runner, tmp_path):
        path = write_manifest(tmp_path / "web", {"next": "~15.2.0"})
        (tmp_path / "web" / "pnpm-lock.yaml").write_text("")
        run = AsyncMock(return_value="")
        with patch("pkgsentinel.core.process.run", run):
            result = runner.invoke(main, ["upgrade", str(tmp_path), "web"])
        assert result.exit_code == 0, result.output
        assert "Successfully upgraded and installed with pnpm" in result.output
        assert json.loads(path.read_text())["dependencies"] == {"next": "~15.2.6"}
        assert run.await_args.args[0] == ["pnpm", "install"]

    def test_upgrade_by_manifest_path(self, runner, tmp_path):
        write_manifest(tmp_path / "web", {"next": "16.0.7"})
        result = runner.invoke(main, ["upgrade", str(tmp_path), "web/package.json"])
        assert result.exit_code == 0
        assert "No changes needed" in result.output

    def test_unknown_project(self, runner, tmp_path):
        write_manifest(tmp_path / "web", {"next": "16.0.7"})
        result = runner.invoke(main, ["upgrade", str(tmp_path), "api"])
        assert result.exit_code == 1
        assert "no project matching 'api'" in result.output

    def test_commit_failure_exit_code(self, runner, tmp_path):
        from pkgsentinel.exceptions import ProbeUnavailable

        write_manifest(tmp_path / "web", {"next": "16.0.7"})
        run = AsyncMock(side_effect=ProbeUnavailable("git add failed (exit 128): not a git repository"))
        with patch("pkgsentinel.core.process.run", run):
            result = runner.invoke(main, ["commit", str(tmp_path), "web"])
        assert result.exit_code == 1
        assert "not a git repository" in result.output

    def test_checkout_without_production_branch(self, runner, tmp_path):
        write_manifest(tmp_path / "web", {"next": "16.0.7"})
        result = runner.invoke(main, ["checkout", str(tmp_path), "web", "--production"])
        assert result.exit_code == 1
        assert "No production branch" in result.output
