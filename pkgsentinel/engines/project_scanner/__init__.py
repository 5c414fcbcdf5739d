"""Project scanner engine — find package.json projects and classify their React / Next.js versions."""

from pkgsentinel.engines.project_scanner.models import PackageManagerKind, ProjectStatus, VcsStatus
from pkgsentinel.engines.project_scanner.scanner import ProjectScanner

__all__ = ["PackageManagerKind", "ProjectScanner", "ProjectStatus", "VcsStatus"]
