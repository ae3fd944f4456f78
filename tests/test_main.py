"""Tests for the entry point — exit codes and wiring."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from ta_exporter import main as entry
from ta_exporter.advisor.client import AdvisorError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for var in ("LISTEN_ADDR", "REFRESH_PERIOD", "CONCURRENCY", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


class TestMain:
    def test_bad_config_exits_2(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REFRESH_PERIOD", "soon")
        with pytest.raises(SystemExit) as exc:
            entry.main()
        assert exc.value.code == entry.EXIT_BAD_CONFIG

    @patch("ta_exporter.main.uvicorn.run")
    @patch("ta_exporter.main.AdvisorClient")
    def test_startup_listing_failure_exits_1(self, mock_client_cls, mock_run) -> None:
        mock_client_cls.return_value.list_checks.side_effect = AdvisorError(
            "DescribeTrustedAdvisorChecks", "no credentials",
        )
        with pytest.raises(SystemExit) as exc:
            entry.main()
        assert exc.value.code == entry.EXIT_STARTUP_FAILED
        mock_run.assert_not_called()

    @patch("ta_exporter.main.uvicorn.run")
    @patch("ta_exporter.main.AdvisorClient")
    def test_serves_after_startup_cycle(self, mock_client_cls, mock_run, monkeypatch) -> None:
        monkeypatch.setenv("LISTEN_ADDR", "127.0.0.1:9100")
        mock_client_cls.return_value.list_checks.return_value = []

        entry.main()

        mock_client_cls.return_value.list_checks.assert_called_once()
        _, kwargs = mock_run.call_args
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9100
