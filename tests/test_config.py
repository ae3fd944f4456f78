"""Tests for exporter settings and listen-address parsing."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ta_exporter.config import Settings, parse_listen_addr


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Isolate from the caller's env and any .env in the working directory."""
    for var in (
        "LISTEN_ADDR", "REFRESH_PERIOD", "CONCURRENCY", "LOG_LEVEL",
        "API_TIMEOUT", "SKIP_OVERLAPPING_CYCLES",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


# ── parse_listen_addr ────────────────────────────────────────────────────────


class TestParseListenAddr:
    def test_empty_host_binds_all(self) -> None:
        assert parse_listen_addr(":2112") == ("0.0.0.0", 2112)

    def test_explicit_host(self) -> None:
        assert parse_listen_addr("127.0.0.1:9000") == ("127.0.0.1", 9000)

    def test_bracketed_ipv6(self) -> None:
        assert parse_listen_addr("[::1]:2112") == ("::1", 2112)

    @pytest.mark.parametrize("addr", ["2112", "host:abc", ":0", ":70000"])
    def test_rejects_malformed(self, addr: str) -> None:
        with pytest.raises(ValueError):
            parse_listen_addr(addr)


# ── Settings ─────────────────────────────────────────────────────────────────


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.listen_addr == ":2112"
        assert s.listen_host == "0.0.0.0"
        assert s.listen_port == 2112
        assert s.refresh_period == 300
        assert s.concurrency == 10
        assert s.skip_overlapping_cycles is False
        assert s.log_level == "INFO"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LISTEN_ADDR", "127.0.0.1:9100")
        monkeypatch.setenv("REFRESH_PERIOD", "60")
        monkeypatch.setenv("CONCURRENCY", "4")
        monkeypatch.setenv("SKIP_OVERLAPPING_CYCLES", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        s = Settings()
        assert s.listen_port == 9100
        assert s.refresh_period == 60
        assert s.concurrency == 4
        assert s.skip_overlapping_cycles is True
        assert s.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "var,value",
        [
            ("REFRESH_PERIOD", "five minutes"),
            ("REFRESH_PERIOD", "0"),
            ("CONCURRENCY", "ten"),
            ("CONCURRENCY", "0"),
            ("LISTEN_ADDR", "nope"),
            ("LOG_LEVEL", "LOUD"),
        ],
    )
    def test_malformed_values_rejected(
        self, monkeypatch: pytest.MonkeyPatch, var: str, value: str,
    ) -> None:
        monkeypatch.setenv(var, value)
        with pytest.raises(ValidationError):
            Settings()
