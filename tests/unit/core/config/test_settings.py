"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from fibrotrack.core.config.settings import get_settings


def test_defaults_bind_to_loopback(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("ANALYTICS_TIMEZONE", raising=False)
    settings = get_settings()
    assert settings.fibro_host == "127.0.0.1"
    assert settings.fibro_port == 8001
    assert settings.fibro_allow_insecure_bind is False


def test_reads_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("FIBRO_PORT", "9100")
    monkeypatch.setenv("ANALYTICS_TIMEZONE", "Europe/Berlin")
    settings = get_settings()
    assert settings.fibro_port == 9100
    assert settings.analytics_timezone == "Europe/Berlin"
