"""Shared test fixtures."""

from __future__ import annotations

import pytest

from ta_exporter.metrics.sink import MetricsSink


@pytest.fixture
def sink() -> MetricsSink:
    """A fresh sink on its own registry."""
    return MetricsSink()


@pytest.fixture
def sleeps() -> list[float]:
    """Collects backoff delays instead of sleeping."""
    return []
