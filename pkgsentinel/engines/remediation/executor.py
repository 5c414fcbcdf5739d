"""RemediationExecutor â per-project actions driven by a ProjectStatus."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from pkgsentinel.core import process
from pkgsentinel.core.config import Settings
from pkgsentinel.engines.project_scanner.manifest import read_manifest
from pkgsentinel.engines.project_scanner.models import ProjectStatus
from pkgsentinel.engines.project_scanner.package_manager import install_command
from pkgsentinel.engines.project_scanner.policy import NEXT, REACT, RULES, advisories_for, evaluate
from pkgsentinel.engines.remediation.manifest_writer import rewrite_manifest
from pkgsentinel.exceptions import ProbeError, RemediationFailure, SentinelError

log = structlog.get_logger("pkgsentinel.engine")

COMMIT_MESSAGE = (
    f"⬆️🔒️ Upgrade {NEXT} and {REACT} to mitigate "
    + " & ".join(advisories_for([r.name for r in RULES]))
)


def _safe_targets(path: Path, names: set[str]) -> dict[str, str]:
    """Policy proposals for the manifest at *path*, limited to *names*."""
    try:
        declared = read_manifest(path)
    except OSError as exc:
        raise RemediationFailure(f"cannot load {path}: {exc}") from exc
    proposals = evaluate(declared).proposals
    return {name: version for name, version in proposals.items() if name in names}


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one remediation action."""

    success: bool
    message: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, message: str) -> ActionResult:
        return cls(success=True, message=message)

    @classmethod
    def fail(cls, error: str) -> ActionResult:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "message": self.message}
        return {"success": False, "error": self.error}


class RemediationExecutor:
    """Run remediation actions for one project; never retries.

    Each public action returns an :class:`ActionResult`. The first failing
    step of an action aborts its remaining steps.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    async def upgrade(self, status: ProjectStatus) -> ActionResult:
        """Bump flagged dependencies to their safe versions and reinstall.

        Only the names flagged in *status* are touched, and their target
        versions are recomputed from the manifest on disk; the proposals
        carried by *status* are never written.
        """
        flagged = {name for name, vulnerable in status.vulnerable_flags.items() if vulnerable}
        if not flagged:
            return ActionResult.ok("No changes needed")
        path = Path(status.path)
        try:
            targets = _safe_targets(path, flagged)
            if not targets:
                return ActionResult.ok("No changes needed")
            changed = rewrite_manifest(path, targets)
            if not changed:
                return ActionResult.ok("No changes needed")
            log.info("remediation.manifest_rewritten", path=status.path, changed=changed)

            cmd = install_command(status.package_manager)
            await self._step(cmd, status.directory, timeout=self.settings.install_timeout)
        except SentinelError as exc:
            log.warning("remediation.upgrade_failed", path=status.path, error=str(exc))
            return ActionResult.fail(str(exc))
        return ActionResult.ok(f"Successfully upgraded and installed with {cmd[0]}")

    async def commit_and_push(self, status: ProjectStatus) -> ActionResult:
        """Stage everything, commit with the advisory message, and push."""
        try:
            await self._git(status, "add", "-A")
            await self._git(status, "commit", "-m", COMMIT_MESSAGE)
            await self._git(status, "push", timeout=self.settings.remote_timeout)
        except SentinelError as exc:
            log.warning("remediation.commit_failed", path=status.path, error=str(exc))
            return ActionResult.fail(str(exc))
        return ActionResult.ok("Successfully committed and pushed")

    async def checkout_default(self, status: ProjectStatus) -> ActionResult:
        if not status.default_branch:
            return ActionResult.fail("No default branch (main/master) detected")
        return await self._checkout_and_pull(status, status.default_branch)

    async def checkout_production(self, status: ProjectStatus) -> ActionResult:
        if not status.production_branch:
            return ActionResult.fail("No production branch (production/prod) detected")
        return await self._checkout_and_pull(status, status.production_branch)

    # ââ helpers ââââââââââââââââââââââââââââââââââââââââââââââââââââââââââ

    async def _checkout_and_pull(self, status: ProjectStatus, branch: str) -> ActionResult:
        remote = self.settings.git_remote
        try:
            if status.current_branch != branch:
                if await self._local_branch_exists(status, branch):
                    await self._git(status, "checkout", branch)
                else:
                    await self._git(status, "checkout", "-b", branch, "--track", f"{remote}/{branch}")
            await self._git(status, "pull", timeout=self.settings.remote_timeout)
        except SentinelError as exc:
            log.warning("remediation.checkout_failed", path=status.path, branch=branch, error=str(exc))
            return ActionResult.fail(str(exc))
        return ActionResult.ok(f"Checked out {branch} and pulled latest changes")

    async def _local_branch_exists(self, status: ProjectStatus, branch: str) -> bool:
        try:
            await self._git(status, "rev-parse", "--verify", "--quiet", f"refs/heads/{branch}")
        except RemediationFailure:
            return False
        return True

    async def _git(self, status: ProjectStatus, *args: str, timeout: float | None = None) -> str:
        return await self._step(
            ["git", *args], status.directory, timeout=timeout or self.settings.git_timeout
        )

    @staticmethod
    async def _step(cmd: list[str], cwd: Path, timeout: float) -> str:
        try:
            return await process.run(cmd, cwd=cwd, timeout=timeout)
        except ProbeError as exc:
            raise RemediationFailure(str(exc)) from exc
