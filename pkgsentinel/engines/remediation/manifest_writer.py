"""Rewrite tracked dependency versions in a package.json."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Mapping

from pkgsentinel.engines.project_scanner.models import VersionSpec
from pkgsentinel.exceptions import RemediationFailure

_DEP_SECTIONS = ("dependencies", "devDependencies")
_PREFIX_RE = re.compile(r"^[\^~]")


def _retarget(spec: str, version: str) -> str:
    parsed = VersionSpec.parse(spec)
    if parsed is not None:
        return parsed.with_version(version)
    m = _PREFIX_RE.match(spec)
    return f"{m.group(0) if m else ''}{version}"


def apply_versions(data: dict, targets: Mapping[str, str]) -> dict[str, str]:
    """Set each name in *targets* to its version in every section declaring it.

    Each entry keeps its own range prefix. Returns ``{name: new_spec}`` for
    the entries that actually changed; *data* is modified in place.
    """
    changed: dict[str, str] = {}
    for section in _DEP_SECTIONS:
        table = data.get(section)
        if not isinstance(table, dict):
            continue
        for name, version in targets.items():
            current = table.get(name)
            if not isinstance(current, str) or not current.strip():
                continue
            new_spec = _retarget(current.strip(), version)
            if new_spec != current:
                table[name] = new_spec
                changed[name] = new_spec
    return changed


def rewrite_manifest(path: Path, targets: Mapping[str, str]) -> dict[str, str]:
    """Apply *targets* to the manifest at *path*, writing only when something changed.

    Key order is preserved; output uses 2-space indentation and a trailing
    newline. Raises :class:`RemediationFailure` if the file cannot be read,
    parsed or written.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise RemediationFailure(f"cannot load {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise RemediationFailure(f"cannot load {path}: top-level value is not an object")

    changed = apply_versions(data, targets)
    if not changed:
        return changed
    try:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as exc:
        raise RemediationFailure(f"cannot write {path}: {exc}") from exc
    return changed
