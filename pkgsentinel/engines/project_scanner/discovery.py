"""Bounded-depth discovery of package.json manifests."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from pkgsentinel.core.config import DEFAULT_MAX_DEPTH
from pkgsentinel.engines.project_scanner.manifest import MANIFEST_NAME

log = structlog.get_logger("pkgsentinel.engine")

_SKIP_DIRS = {"node_modules"}


def _is_skipped(name: str) -> bool:
    return name in _SKIP_DIRS or name.startswith(".")


def discover(root: Path, max_depth: int = DEFAULT_MAX_DEPTH) -> list[Path]:
    """Return manifest paths under *root*, depth-first, sorted per directory.

    *root* is depth 0; directories deeper than *max_depth* are not visited,
    so manifests nested below the bound are skipped. ``node_modules`` and
    dot-directories are never entered and symlinked directories are not
    followed. An unreadable directory is logged and contributes nothing.
    """
    results: list[Path] = []
    _walk(Path(root), 0, max_depth, results)
    return results


def _walk(directory: Path, depth: int, max_depth: int, results: list[Path]) -> None:
    if depth > max_depth:
        return
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        log.warning("discovery.read_failed", path=str(directory), error=str(exc))
        return

    subdirs: list[Path] = []
    for entry in entries:
        try:
            if entry.name == MANIFEST_NAME and entry.is_file():
                results.append(Path(entry.path))
            elif entry.is_dir(follow_symlinks=False) and not _is_skipped(entry.name):
                subdirs.append(Path(entry.path))
        except OSError as exc:
            log.warning("discovery.stat_failed", path=entry.path, error=str(exc))

    for sub in subdirs:
        _walk(sub, depth + 1, max_depth, results)
