"""Tests for server configuration helpers."""

from __future__ import annotations

from datetime import timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from fibrotrack.core.server import main
from fibrotrack.core.server.app import resolve_timezone


class TestResolveTimezone:
    def test_empty_means_process_local(self):
        assert resolve_timezone("") is None

    def test_utc(self):
        assert resolve_timezone("utc") is timezone.utc

    def test_unknown_zone_falls_back_with_warning(self, caplog):
        with caplog.at_level("WARNING"):
            assert resolve_timezone("Mars/Olympus_Mons") is None
        assert "Mars/Olympus_Mons" in caplog.text


class TestRunGuards:
    @pytest.mark.parametrize("host", ["127.0.0.1", "localhost", "::1"])
    def test_loopback_hosts(self, host):
        assert main._is_loopback_host(host) is True

    @pytest.mark.parametrize("host", ["0.0.0.0", "192.168.1.10", "example.org"])
    def test_non_loopback_hosts(self, host):
        assert main._is_loopback_host(host) is False

    def test_refuses_insecure_bind(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FIBRO_HOST", "0.0.0.0")
        with pytest.raises(RuntimeError, match="non-loopback"):
            main.run()

    def test_startup_log_reports_analytics_timezone(self, monkeypatch: pytest.MonkeyPatch, caplog):
        calls = {}

        class _StubServer:
            def run(self, **kwargs):
                calls["run"] = kwargs

        def _fake_create_app(*, tz_override=None):
            calls["tz"] = tz_override
            return _StubServer()

        try:
            ZoneInfo("Europe/Berlin")
        except ZoneInfoNotFoundError:
            pytest.skip("no IANA time zone database available")

        monkeypatch.setenv("ANALYTICS_TIMEZONE", "Europe/Berlin")
        monkeypatch.delenv("FIBRO_PORT", raising=False)
        monkeypatch.setattr(main, "create_app", _fake_create_app)
        with caplog.at_level("INFO"):
            main.run()

        assert calls["run"] == {"transport": "streamable-http", "host": "127.0.0.1", "port": 8001}
        assert str(calls["tz"]) == "Europe/Berlin"
        assert "Europe/Berlin" in caplog.text
