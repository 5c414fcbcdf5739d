"""Scan and remediation engines."""
