"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from pkgsentinel.core.config import DEFAULT_MAX_DEPTH, Settings, load_settings

_KEYS = (
    "PKGSENTINEL_MAX_DEPTH",
    "PKGSENTINEL_SCAN_CONCURRENCY",
    "PKGSENTINEL_GIT_TIMEOUT",
    "PKGSENTINEL_FETCH_TIMEOUT",
    "PKGSENTINEL_INSTALL_TIMEOUT",
    "PKGSENTINEL_REMOTE_TIMEOUT",
    "PKGSENTINEL_GIT_REMOTE",
    "PKGSENTINEL_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)


class TestLoadSettings:
    def test_defaults(self):
        assert load_settings() == Settings()
        assert Settings().max_depth == DEFAULT_MAX_DEPTH == 4

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("PKGSENTINEL_MAX_DEPTH", "2")
        monkeypatch.setenv("PKGSENTINEL_SCAN_CONCURRENCY", "3")
        monkeypatch.setenv("PKGSENTINEL_FETCH_TIMEOUT", "1.5")
        monkeypatch.setenv("PKGSENTINEL_GIT_REMOTE", "upstream")
        monkeypatch.setenv("PKGSENTINEL_CORS_ORIGINS", "http://a.test, http://b.test,")
        settings = load_settings()
        assert settings.max_depth == 2
        assert settings.scan_concurrency == 3
        assert settings.fetch_timeout == 1.5
        assert settings.git_remote == "upstream"
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_zero_depth_allowed(self, monkeypatch):
        monkeypatch.setenv("PKGSENTINEL_MAX_DEPTH", "0")
        assert load_settings().max_depth == 0

    @pytest.mark.parametrize(
        "key, value, attr, default",
        [
            ("PKGSENTINEL_MAX_DEPTH", "deep", "max_depth", 4),
            ("PKGSENTINEL_MAX_DEPTH", "-1", "max_depth", 4),
            ("PKGSENTINEL_SCAN_CONCURRENCY", "0", "scan_concurrency", 8),
            ("PKGSENTINEL_GIT_TIMEOUT", "soon", "git_timeout", 10.0),
            ("PKGSENTINEL_INSTALL_TIMEOUT", "-5", "install_timeout", 600.0),
        ],
    )
    def test_invalid_values_fall_back(self, monkeypatch, key, value, attr, default):
        monkeypatch.setenv(key, value)
        assert getattr(load_settings(), attr) == default

    def test_blank_remote_falls_back(self, monkeypatch):
        monkeypatch.setenv("PKGSENTINEL_GIT_REMOTE", "  ")
        assert load_settings().git_remote == "origin"
