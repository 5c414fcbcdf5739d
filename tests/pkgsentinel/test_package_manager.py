"""Tests for package manager detection."""

from __future__ import annotations

import pytest

from pkgsentinel.engines.project_scanner.models import PackageManagerKind
from pkgsentinel.engines.project_scanner.package_manager import (
    detect_package_manager,
    install_command,
)


class TestDetectPackageManager:
    @pytest.mark.parametrize(
        "lockfile, expected",
        [
            ("bun.lockb", PackageManagerKind.BUN),
            ("bun.lock", PackageManagerKind.BUN),
            ("pnpm-lock.yaml", PackageManagerKind.PNPM),
            ("yarn.lock", PackageManagerKind.YARN),
            ("package-lock.json", PackageManagerKind.NPM),
            ("npm-shrinkwrap.json", PackageManagerKind.NPM),
        ],
    )
    def test_single_marker(self, tmp_path, lockfile, expected):
        (tmp_path / lockfile).write_text("")
        assert detect_package_manager(tmp_path) == expected

    def test_precedence(self, tmp_path):
        for name in ("package-lock.json", "yarn.lock", "pnpm-lock.yaml"):
            (tmp_path / name).write_text("")
        assert detect_package_manager(tmp_path) == PackageManagerKind.PNPM
        (tmp_path / "bun.lockb").write_text("")
        assert detect_package_manager(tmp_path) == PackageManagerKind.BUN

    def test_yarn_beats_npm(self, tmp_path):
        (tmp_path / "package-lock.json").write_text("")
        (tmp_path / "yarn.lock").write_text("")
        assert detect_package_manager(tmp_path) == PackageManagerKind.YARN

    def test_no_marker(self, tmp_path):
        (tmp_path / "package.json").write_text("{}")
        assert detect_package_manager(tmp_path) == PackageManagerKind.UNKNOWN

    def test_lockfile_in_subdirectory_ignored(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "yarn.lock").write_text("")
        assert detect_package_manager(tmp_path) == PackageManagerKind.UNKNOWN

    def test_missing_directory(self, tmp_path):
        assert detect_package_manager(tmp_path / "gone") == PackageManagerKind.UNKNOWN


class TestInstallCommand:
    @pytest.mark.parametrize(
        "kind, cmd",
        [
            (PackageManagerKind.BUN, ["bun", "install"]),
            (PackageManagerKind.PNPM, ["pnpm", "install"]),
            (PackageManagerKind.YARN, ["yarn", "install"]),
            (PackageManagerKind.NPM, ["npm", "install"]),
            (PackageManagerKind.UNKNOWN, ["npm", "install"]),
        ],
    )
    def test_commands(self, kind, cmd):
        assert install_command(kind) == cmd
