"""Data models for the project scanner engine."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Union

_SPEC_RE = re.compile(r"^\s*([\^~]?)\s*v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-([0-9A-Za-z.-]+))?(?:\+\S*)?\s*$")


class PackageManagerKind(str, enum.Enum):
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"
    UNKNOWN = "unknown"


@dataclass(frozen=True, order=True)
class Version:
    """A concrete ``major.minor.patch[-prerelease]`` version.

    Ordering only looks at the numbers, with any pre-release sorting before
    the release that shares them (``15.0.5-canary.1 < 15.0.5``).
    """

    major: int
    minor: int = 0
    patch: int = 0
    is_release: bool = True
    prerelease: str = field(default="", compare=False)

    @classmethod
    def parse(cls, text: str) -> Version:
        spec = VersionSpec.parse(text)
        if spec is None or spec.prefix:
            raise ValueError(f"not a concrete version: {text!r}")
        return spec.version

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-{self.prerelease}" if self.prerelease else base


@dataclass(frozen=True)
class VersionSpec:
    """A declared constraint: optional ``^``/``~`` prefix plus a version."""

    prefix: str
    version: Version
    raw: str

    @classmethod
    def parse(cls, text: str) -> VersionSpec | None:
        """Parse *text*, returning ``None`` for anything that is not prefix + version.

        Tags (``latest``), wildcards, ranges with operators, ``workspace:``
        and URL specs are deliberately not understood.
        """
        m = _SPEC_RE.match(text)
        if not m:
            return None
        prefix, major, minor, patch, pre = m.groups()
        version = Version(
            major=int(major),
            minor=int(minor or 0),
            patch=int(patch or 0),
            is_release=pre is None,
            prerelease=pre or "",
        )
        return cls(prefix=prefix, version=version, raw=text)

    def with_version(self, version: str) -> str:
        """Render *version* with this spec's original prefix."""
        return f"{self.prefix}{version}"


@dataclass(frozen=True)
class VcsStatus:
    """Best-effort git state of one directory; ``None`` means unknown."""

    current_branch: str | None = None
    uncommitted_file_count: int | None = None
    default_branch: str | None = None
    commits_behind_default: int | None = None
    production_branch: str | None = None
    commits_behind_production: int | None = None


@dataclass(frozen=True)
class ManifestRead:
    """Manifest stage succeeded."""

    declared: Mapping[str, str]


@dataclass(frozen=True)
class ManifestFailed:
    """Manifest stage failed; the project keeps its VCS/package-manager fields."""

    error: str


ManifestOutcome = Union[ManifestRead, ManifestFailed]


def _frozen(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ProjectStatus:
    """Scan result for one manifest. Identity is :attr:`path`."""

    path: str
    display_path: str
    current_branch: str | None = None
    default_branch: str | None = None
    commits_behind_default: int | None = None
    production_branch: str | None = None
    commits_behind_production: int | None = None
    uncommitted_file_count: int | None = None
    declared_versions: Mapping[str, str] = field(default_factory=dict)
    vulnerable_flags: Mapping[str, bool] = field(default_factory=dict)
    proposed_safe_versions: Mapping[str, str] = field(default_factory=dict)
    package_manager: PackageManagerKind = PackageManagerKind.UNKNOWN
    manifest_error: str | None = None

    def __post_init__(self) -> None:
        for name in ("declared_versions", "vulnerable_flags", "proposed_safe_versions"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))
        object.__setattr__(self, "package_manager", PackageManagerKind(self.package_manager))

    @property
    def directory(self) -> Path:
        return Path(self.path).parent

    @property
    def is_vulnerable(self) -> bool:
        return any(self.vulnerable_flags.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "display_path": self.display_path,
            "current_branch": self.current_branch,
            "default_branch": self.default_branch,
            "commits_behind_default": self.commits_behind_default,
            "production_branch": self.production_branch,
            "commits_behind_production": self.commits_behind_production,
            "uncommitted_file_count": self.uncommitted_file_count,
            "declared_versions": dict(self.declared_versions),
            "vulnerable_flags": dict(self.vulnerable_flags),
            "proposed_safe_versions": dict(self.proposed_safe_versions),
            "package_manager": self.package_manager.value,
            "manifest_error": self.manifest_error,
        }
