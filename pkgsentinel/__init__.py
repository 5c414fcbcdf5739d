"""PkgSentinel — find JavaScript projects exposed to the React Server Components advisories."""

__version__ = "1.0.0"
