"""Vulnerability policy for the tracked React / Next.js dependencies.

Pure functions over a declarative rule table; no I/O.

The table covers two advisories:

* CVE-2025-66478 — Next.js App Router, fixed per 15.x/16.x minor line.
* CVE-2025-55182 — React Server Components, fixed in 19.0.1 / 19.1.2 / 19.2.1.

Versions older than the first affected line are also reported, with the
lowest patched release as the replacement, so stale projects are moved onto
a supported line.

``react`` and ``react-dom`` are only reported when ``next`` is reported
too: the patched ``react-server-dom-*`` code reaches a Next.js app through
the Next.js upgrade, so a project on a patched Next.js is already protected
whatever React version it declares.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from pkgsentinel.engines.project_scanner.models import Version, VersionSpec

NEXT = "next"
REACT = "react"
REACT_DOM = "react-dom"
TYPES_REACT = "@types/react"
TYPES_REACT_DOM = "@types/react-dom"


@dataclass(frozen=True)
class VulnerableRange:
    """``lower <= version < upper`` is affected; ``lower=None`` means unbounded."""

    lower: str | None
    upper: str
    safe_version: str

    def contains(self, version: Version) -> bool:
        if self.lower is not None and version < Version.parse(self.lower):
            return False
        return version < Version.parse(self.upper)


@dataclass(frozen=True)
class VulnerabilityRule:
    name: str
    ranges: tuple[VulnerableRange, ...] = ()
    advisories: tuple[str, ...] = ()
    # Only report this dependency when the named one is reported.
    requires: str | None = None
    # Propose the same replacement as the named dependency when it has one.
    follows: str | None = None
    # Type-definition packages: tracked and displayed, never reported.
    passive: bool = False


@dataclass(frozen=True)
class Classification:
    vulnerable: bool
    safe_version: str | None = None


@dataclass(frozen=True)
class PolicyVerdict:
    flags: dict[str, bool]
    proposals: dict[str, str]


_NEXT_RANGES = (
    VulnerableRange(None, "15.0.0", "15.0.5"),
    VulnerableRange("15.0.0", "15.0.5", "15.0.5"),
    VulnerableRange("15.1.0", "15.1.9", "15.1.9"),
    VulnerableRange("15.2.0", "15.2.6", "15.2.6"),
    VulnerableRange("15.3.0", "15.3.6", "15.3.6"),
    VulnerableRange("15.4.0", "15.4.8", "15.4.8"),
    VulnerableRange("15.5.0", "15.5.7", "15.5.7"),
    # 15.6 only ever shipped as canaries; patched builds are stable 16.0.x.
    VulnerableRange("15.6.0-canary.0", "15.6.0", "16.0.7"),
    VulnerableRange("16.0.0-canary.0", "16.0.7", "16.0.7"),
)

_REACT_RANGES = (
    VulnerableRange(None, "19.0.0", "19.0.1"),
    VulnerableRange("19.0.0", "19.0.1", "19.0.1"),
    VulnerableRange("19.1.0", "19.1.2", "19.1.2"),
    VulnerableRange("19.2.0", "19.2.1", "19.2.1"),
)

# Evaluation order matters: a rule's ``requires`` must appear earlier.
RULES: tuple[VulnerabilityRule, ...] = (
    VulnerabilityRule(NEXT, _NEXT_RANGES, advisories=("CVE-2025-66478",)),
    VulnerabilityRule(REACT, _REACT_RANGES, advisories=("CVE-2025-55182",), requires=NEXT),
    VulnerabilityRule(
        REACT_DOM, _REACT_RANGES, advisories=("CVE-2025-55182",), requires=NEXT, follows=REACT
    ),
    VulnerabilityRule(TYPES_REACT, passive=True),
    VulnerabilityRule(TYPES_REACT_DOM, passive=True),
)

RULES_BY_NAME: dict[str, VulnerabilityRule] = {r.name: r for r in RULES}

TRACKED_DEPENDENCIES: tuple[str, ...] = tuple(r.name for r in RULES)


def classify(
    name: str,
    spec: str | None,
    rules: Mapping[str, VulnerabilityRule] = RULES_BY_NAME,
) -> Classification:
    """Classify one dependency on its own version only.

    The range prefix (``^``, ``~`` or none) is ignored; only the concrete
    version decides. Untracked names, passive rules and specs that are not
    prefix + version (``latest``, ``workspace:*``, URLs) are never
    vulnerable.
    """
    rule = rules.get(name)
    if rule is None or rule.passive or not spec:
        return Classification(vulnerable=False)
    parsed = VersionSpec.parse(spec)
    if parsed is None:
        return Classification(vulnerable=False)
    for vuln_range in rule.ranges:
        if vuln_range.contains(parsed.version):
            return Classification(vulnerable=True, safe_version=vuln_range.safe_version)
    return Classification(vulnerable=False)


def evaluate(
    declared: Mapping[str, str],
    rules: tuple[VulnerabilityRule, ...] = RULES,
) -> PolicyVerdict:
    """Classify every declared tracked dependency, applying prerequisites.

    Only names present in *declared* get a flag. A rule with ``requires`` is
    forced safe unless its prerequisite was flagged earlier in *rules*.
    """
    by_name = {r.name: r for r in rules}
    flags: dict[str, bool] = {}
    proposals: dict[str, str] = {}
    for rule in rules:
        spec = declared.get(rule.name)
        if not spec:
            continue
        result = classify(rule.name, spec, by_name)
        vulnerable = result.vulnerable
        if vulnerable and rule.requires is not None:
            # Conditional rule: reported only alongside its prerequisite.
            vulnerable = flags.get(rule.requires, False)
        flags[rule.name] = vulnerable
        if vulnerable and result.safe_version:
            proposals[rule.name] = proposals.get(rule.follows or "", result.safe_version)
    return PolicyVerdict(flags=flags, proposals=proposals)


def advisories_for(names: list[str] | tuple[str, ...]) -> list[str]:
    """Advisory ids of the given dependencies, de-duplicated and sorted."""
    found: set[str] = set()
    for name in names:
        rule = RULES_BY_NAME.get(name)
        if rule is not None:
            found.update(rule.advisories)
    return sorted(found)
