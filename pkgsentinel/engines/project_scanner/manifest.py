"""package.json reader for the tracked dependency set."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import structlog

from pkgsentinel.engines.project_scanner.models import ManifestFailed, ManifestOutcome, ManifestRead
from pkgsentinel.engines.project_scanner.policy import TRACKED_DEPENDENCIES
from pkgsentinel.exceptions import ManifestParseError

log = structlog.get_logger("pkgsentinel.engine")

MANIFEST_NAME = "package.json"

# Runtime section first: it wins when a name is declared in both.
_DEP_SECTIONS = ("dependencies", "devDependencies")


def parse_manifest(
    content: str,
    source: str = MANIFEST_NAME,
    tracked: tuple[str, ...] = TRACKED_DEPENDENCIES,
) -> dict[str, str]:
    """Extract declared versions of *tracked* names from manifest text.

    Raises :class:`ManifestParseError` when *content* is not a JSON object.
    A dependency section that is not an object counts as empty, and
    non-string or empty version values are treated as not declared.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(source, f"invalid JSON: {exc.msg} (line {exc.lineno})") from exc

    if not isinstance(data, dict):
        raise ManifestParseError(source, "top-level value is not an object")

    declared: dict[str, str] = {}
    for section in _DEP_SECTIONS:
        table = data.get(section)
        if not isinstance(table, dict):
            continue
        for name in tracked:
            if name in declared:
                continue
            version = table.get(name)
            if isinstance(version, str) and version.strip():
                declared[name] = version.strip()
    return declared


def read_manifest(path: Path) -> dict[str, str]:
    """Read and parse *path*.

    Raises ``FileNotFoundError`` when the file is missing and
    :class:`ManifestParseError` when it is malformed.
    """
    content = path.read_text(encoding="utf-8", errors="replace")
    return parse_manifest(content, source=str(path))


async def load_manifest(path: Path) -> ManifestOutcome:
    """Never-raising manifest stage used by the scanner."""
    try:
        declared = await asyncio.to_thread(read_manifest, path)
    except ManifestParseError as exc:
        log.warning("manifest.parse_failed", path=str(path), reason=exc.reason)
        return ManifestFailed(error=exc.reason)
    except OSError as exc:
        log.warning("manifest.read_failed", path=str(path), error=str(exc))
        return ManifestFailed(error=f"cannot read manifest: {exc.strerror or exc}")
    return ManifestRead(declared=declared)
