"""Async subprocess helper shared by the VCS probe and remediation actions."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from pkgsentinel.exceptions import ProbeTimeout, ProbeUnavailable

# Never block on credential prompts; authentication is out of scope.
_NON_INTERACTIVE_ENV = {"GIT_TERMINAL_PROMPT": "0", "GIT_ASKPASS": "", "SSH_ASKPASS": ""}


async def run(
    cmd: list[str],
    cwd: Path | str,
    timeout: float | None = None,
) -> str:
    """Run *cmd* in *cwd* and return its decoded stdout.

    Raises :class:`ProbeUnavailable` when the command cannot start or exits
    non-zero, and :class:`ProbeTimeout` when it exceeds *timeout* seconds
    (the process is killed). Cancellation of the awaiting task leaves the
    process running to completion.
    """
    env = {**os.environ, **_NON_INTERACTIVE_ENV}
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd),
            env=env,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise ProbeUnavailable(f"cannot run {cmd[0]}: {exc}") from exc

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise ProbeTimeout(f"{' '.join(cmd)} timed out after {timeout}s") from None

    if proc.returncode != 0:
        raise ProbeUnavailable(
            f"{' '.join(cmd)} failed (exit {proc.returncode}): "
            f"{stderr.decode(errors='replace').strip()}"
        )
    return stdout.decode(errors="replace")
