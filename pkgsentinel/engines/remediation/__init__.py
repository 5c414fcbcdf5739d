"""Remediation engine — bump, install, commit/push and branch sync for one project."""

from pkgsentinel.engines.remediation.executor import ActionResult, RemediationExecutor

__all__ = ["ActionResult", "RemediationExecutor"]
