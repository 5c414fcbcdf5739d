"""Dependency injection — settings, scanner and executor singletons."""

from __future__ import annotations

from pkgsentinel.core.config import Settings, load_settings
from pkgsentinel.engines.project_scanner.scanner import ProjectScanner
from pkgsentinel.engines.remediation.executor import RemediationExecutor

_settings: Settings | None = None
_scanner: ProjectScanner | None = None
_executor: RemediationExecutor | None = None


def get_settings() -> Settings:
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def get_project_scanner() -> ProjectScanner:
    global _scanner  # noqa: PLW0603
    if _scanner is None:
        _scanner = ProjectScanner(get_settings())
    return _scanner


def get_remediation_executor() -> RemediationExecutor:
    global _executor  # noqa: PLW0603
    if _executor is None:
        _executor = RemediationExecutor(get_settings())
    return _executor
