"""Shared fixtures for pkgsentinel tests.

Tests that drive a real ``git`` binary are marked with ``needs_git`` and
skipped when git is not installed. Every test runs with
``GIT_CEILING_DIRECTORIES`` pinned to its ``tmp_path`` so an enclosing
repository is never picked up.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

import pytest

from pkgsentinel.engines.project_scanner.models import VcsStatus

needs_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


@pytest.fixture(autouse=True)
def isolated_git(tmp_path, monkeypatch):
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")


def git(cwd: Path, *args: str) -> str:
    proc = subprocess.run(
        ["git", "-c", "init.defaultBranch=main", "-c", "commit.gpgsign=false", *args],
        cwd=str(cwd),
        check=True,
        capture_output=True,
        text=True,
    )
    return proc.stdout


def commit_file(repo: Path, name: str, content: str = "x\n", message: str = "change") -> None:
    (repo / name).write_text(content)
    git(repo, "add", name)
    git(repo, "commit", "-q", "-m", message)


def write_manifest(
    directory: Path,
    dependencies: dict | None = None,
    dev_dependencies: dict | None = None,
    **extra,
) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    data: dict = {"name": directory.name, "version": "0.1.0", **extra}
    if dependencies is not None:
        data["dependencies"] = dependencies
    if dev_dependencies is not None:
        data["devDependencies"] = dev_dependencies
    path = directory / "package.json"
    path.write_text(json.dumps(data, indent=2) + "\n")
    return path


class FakeVcsProbe:
    """Stand-in for VcsProbe that never spawns git."""

    def __init__(self, status: VcsStatus | None = None, fail_for: set[str] | None = None):
        self.status = status or VcsStatus()
        self.fail_for = fail_for or set()
        self.calls: list[Path] = []

    async def probe(self, directory: Path) -> VcsStatus:
        self.calls.append(directory)
        if directory.name in self.fail_for:
            raise RuntimeError(f"probe exploded in {directory.name}")
        return self.status


@pytest.fixture
def fake_vcs():
    return FakeVcsProbe()
