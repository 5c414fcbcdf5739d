"""Package manager detection from lockfile markers."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from pkgsentinel.engines.project_scanner.models import PackageManagerKind

log = structlog.get_logger("pkgsentinel.engine")

# Lockfile markers, ordered by priority
LOCKFILE_MARKERS: list[tuple[tuple[str, ...], PackageManagerKind]] = [
    (("bun.lockb", "bun.lock"), PackageManagerKind.BUN),
    (("pnpm-lock.yaml",), PackageManagerKind.PNPM),
    (("yarn.lock",), PackageManagerKind.YARN),
    (("package-lock.json", "npm-shrinkwrap.json"), PackageManagerKind.NPM),
]

INSTALL_COMMANDS: dict[PackageManagerKind, list[str]] = {
    PackageManagerKind.BUN: ["bun", "install"],
    PackageManagerKind.PNPM: ["pnpm", "install"],
    PackageManagerKind.YARN: ["yarn", "install"],
    PackageManagerKind.NPM: ["npm", "install"],
}


def detect_package_manager(directory: Path) -> PackageManagerKind:
    """Infer the package manager from *directory*'s immediate file listing."""
    try:
        names = set(os.listdir(directory))
    except OSError as exc:
        log.debug("package_manager.list_failed", path=str(directory), error=str(exc))
        return PackageManagerKind.UNKNOWN

    for markers, kind in LOCKFILE_MARKERS:
        if any(m in names for m in markers):
            return kind
    return PackageManagerKind.UNKNOWN


def install_command(kind: PackageManagerKind) -> list[str]:
    """Install argv for *kind*; npm when the manager is unknown."""
    return INSTALL_COMMANDS.get(kind, INSTALL_COMMANDS[PackageManagerKind.NPM])
