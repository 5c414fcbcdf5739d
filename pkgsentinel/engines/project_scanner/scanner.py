"""ProjectScanner — discovery, probing and classification of every project under a root."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from pkgsentinel.core.config import Settings
from pkgsentinel.engines.project_scanner.discovery import discover
from pkgsentinel.engines.project_scanner.manifest import load_manifest
from pkgsentinel.engines.project_scanner.models import (
    ManifestFailed,
    ManifestOutcome,
    PackageManagerKind,
    ProjectStatus,
    VcsStatus,
)
from pkgsentinel.engines.project_scanner.package_manager import detect_package_manager
from pkgsentinel.engines.project_scanner.policy import evaluate
from pkgsentinel.engines.project_scanner.vcs import VcsProbe
from pkgsentinel.exceptions import PathNotFound

log = structlog.get_logger("pkgsentinel.engine")


def resolve_root(root: str | Path) -> Path:
    """Resolve *root* to an absolute directory or raise :class:`PathNotFound`."""
    resolved = Path(root).expanduser().resolve()
    if not resolved.is_dir():
        raise PathNotFound(str(resolved))
    return resolved


def display_path(manifest: Path, root: Path) -> str:
    try:
        return manifest.relative_to(root).as_posix()
    except ValueError:
        return str(manifest)


def build_status(
    manifest: Path,
    root: Path,
    outcome: ManifestOutcome,
    vcs: VcsStatus,
    package_manager: PackageManagerKind,
) -> ProjectStatus:
    """Fold the stage outcomes of one project into a :class:`ProjectStatus`."""
    declared: dict[str, str] = {}
    manifest_error: str | None = None
    if isinstance(outcome, ManifestFailed):
        manifest_error = outcome.error
    else:
        declared = dict(outcome.declared)

    verdict = evaluate(declared)
    return ProjectStatus(
        path=str(manifest),
        display_path=display_path(manifest, root),
        current_branch=vcs.current_branch,
        default_branch=vcs.default_branch,
        commits_behind_default=vcs.commits_behind_default,
        production_branch=vcs.production_branch,
        commits_behind_production=vcs.commits_behind_production,
        uncommitted_file_count=vcs.uncommitted_file_count,
        declared_versions=declared,
        vulnerable_flags=verdict.flags,
        proposed_safe_versions=verdict.proposals,
        package_manager=package_manager,
        manifest_error=manifest_error,
    )


class ProjectScanner:
    """Scan a root directory into one :class:`ProjectStatus` per manifest."""

    def __init__(self, settings: Settings | None = None, vcs_probe: VcsProbe | None = None) -> None:
        self.settings = settings or Settings()
        self.vcs_probe = vcs_probe or VcsProbe(
            timeout=self.settings.git_timeout,
            fetch_timeout=self.settings.fetch_timeout,
            remote=self.settings.git_remote,
        )

    async def scan(self, root: str | Path, max_depth: int | None = None) -> list[ProjectStatus]:
        """Scan *root*; results are sorted by manifest path.

        Raises :class:`PathNotFound` when *root* is not an existing
        directory. Any other failure degrades only the affected project.
        """
        base = resolve_root(root)
        depth = self.settings.max_depth if max_depth is None else max_depth
        manifests = await asyncio.to_thread(discover, base, depth)
        log.info("scanner.started", root=str(base), manifests=len(manifests))

        sem = asyncio.Semaphore(self.settings.scan_concurrency)

        async def _run(manifest: Path) -> ProjectStatus:
            async with sem:
                return await self.scan_project(manifest, base)

        statuses = await asyncio.gather(*(_run(m) for m in manifests))
        statuses = sorted(statuses, key=lambda s: s.path)
        log.info(
            "scanner.finished",
            root=str(base),
            projects=len(statuses),
            vulnerable=sum(1 for s in statuses if s.is_vulnerable),
        )
        return statuses

    async def scan_project(self, manifest: Path, root: Path) -> ProjectStatus:
        """Probe and classify one project; never raises."""
        directory = manifest.parent
        outcome, vcs, package_manager = await asyncio.gather(
            load_manifest(manifest),
            self.vcs_probe.probe(directory),
            asyncio.to_thread(detect_package_manager, directory),
            return_exceptions=True,
        )
        if isinstance(outcome, BaseException):
            log.error("scanner.project_failed", path=str(manifest), stage="manifest", exc_info=outcome)
            outcome = ManifestFailed(error=str(outcome) or type(outcome).__name__)
        if isinstance(vcs, BaseException):
            log.error("scanner.project_failed", path=str(manifest), stage="vcs", exc_info=vcs)
            vcs = VcsStatus()
        if isinstance(package_manager, BaseException):
            log.error("scanner.project_failed", path=str(manifest), stage="package_manager", exc_info=package_manager)
            package_manager = PackageManagerKind.UNKNOWN
        return build_status(manifest, root, outcome, vcs, package_manager)
