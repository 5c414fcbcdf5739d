"""Best-effort git probe for one project directory."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from pkgsentinel.core import process
from pkgsentinel.engines.project_scanner.models import VcsStatus
from pkgsentinel.exceptions import ProbeError

log = structlog.get_logger("pkgsentinel.engine")

DEFAULT_BRANCH_CANDIDATES = ("main", "master")
PRODUCTION_BRANCH_CANDIDATES = ("production", "prod")


class VcsProbe:
    """Run independent git queries; each failure only blanks its own field.

    Every query has its own timeout. A timed out or failing query becomes
    ``None`` and is logged at debug level.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        fetch_timeout: float = 5.0,
        remote: str = "origin",
    ) -> None:
        self.timeout = timeout
        self.fetch_timeout = fetch_timeout
        self.remote = remote

    async def probe(self, directory: Path) -> VcsStatus:
        current_branch, dirty, _ = await asyncio.gather(
            self.current_branch(directory),
            self.uncommitted_file_count(directory),
            self.fetch(directory),
        )
        (default_branch, behind_default), (prod_branch, behind_prod) = await asyncio.gather(
            self.default_branch_info(directory),
            self.production_branch_info(directory),
        )
        return VcsStatus(
            current_branch=current_branch,
            uncommitted_file_count=dirty,
            default_branch=default_branch,
            commits_behind_default=behind_default,
            production_branch=prod_branch,
            commits_behind_production=behind_prod,
        )

    # ── sub-queries ──────────────────────────────────────────────────────

    async def current_branch(self, directory: Path) -> str | None:
        out = await self._query(directory, "symbolic-ref", "--quiet", "--short", "HEAD")
        if out is None:
            return None
        return out.strip() or None

    async def uncommitted_file_count(self, directory: Path) -> int | None:
        out = await self._query(directory, "status", "--porcelain")
        if out is None:
            return None
        return len([line for line in out.splitlines() if line.strip()])

    async def fetch(self, directory: Path) -> bool:
        """``git fetch``; failure (offline, no remote) is not an error."""
        ok = await self._query(
            directory, "fetch", "--quiet", self.remote, timeout=self.fetch_timeout
        )
        return ok is not None

    async def default_branch_info(self, directory: Path) -> tuple[str | None, int | None]:
        branch = await self._first_existing(
            directory, [f"refs/heads/{b}" for b in DEFAULT_BRANCH_CANDIDATES]
        )
        if branch is None:
            return None, None
        name = branch.removeprefix("refs/heads/")
        return name, await self._commits_behind(directory, name)

    async def production_branch_info(self, directory: Path) -> tuple[str | None, int | None]:
        prefix = f"refs/remotes/{self.remote}/"
        branch = await self._first_existing(
            directory, [prefix + b for b in PRODUCTION_BRANCH_CANDIDATES]
        )
        if branch is None:
            return None, None
        name = branch.removeprefix(prefix)
        if not await self._ref_exists(directory, f"refs/heads/{name}"):
            return name, None
        return name, await self._commits_behind(directory, name)

    # ── helpers ──────────────────────────────────────────────────────────

    async def _commits_behind(self, directory: Path, branch: str) -> int | None:
        out = await self._query(
            directory,
            "rev-list",
            "--count",
            f"refs/heads/{branch}..refs/remotes/{self.remote}/{branch}",
        )
        if out is None:
            return None
        try:
            return int(out.strip())
        except ValueError:
            return None

    async def _first_existing(self, directory: Path, refs: list[str]) -> str | None:
        for ref in refs:
            if await self._ref_exists(directory, ref):
                return ref
        return None

    async def _ref_exists(self, directory: Path, ref: str) -> bool:
        out = await self._query(directory, "rev-parse", "--verify", "--quiet", ref)
        return out is not None

    async def _query(self, directory: Path, *args: str, timeout: float | None = None) -> str | None:
        try:
            return await process.run(
                ["git", *args], cwd=directory, timeout=timeout or self.timeout
            )
        except ProbeError as exc:
            log.debug("vcs.query_failed", path=str(directory), args=list(args), error=str(exc))
            return None
