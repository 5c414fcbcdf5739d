"""Custom exceptions for PkgSentinel."""


class SentinelError(Exception):
    """Base exception for all PkgSentinel errors."""


class ScanError(SentinelError):
    """A whole scan could not run."""


class PathNotFound(ScanError):
    """Raised when the scan root does not exist or is not a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path does not exist: {path}")


class ManifestParseError(SentinelError):
    """Raised when a package.json is not a valid manifest."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid manifest {path}: {reason}")


class ProbeError(SentinelError):
    """Base for failed external queries (git, package manager)."""


class ProbeTimeout(ProbeError):
    """An external query did not finish within its timeout."""


class ProbeUnavailable(ProbeError):
    """An external query could not run or exited non-zero."""


class RemediationFailure(SentinelError):
    """A remediation step (rewrite, install, git) failed."""
