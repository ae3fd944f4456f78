"""Metrics sink — the labeled Trusted Advisor gauge and its registry.

The sink owns a dedicated CollectorRegistry (no process/platform collectors)
so that ``/metrics`` exposes only check results. prometheus_client guards
the label map with its own lock, which makes set/clear safe from many
refresh workers while the scrape handler collects.
"""

from __future__ import annotations

from typing import NamedTuple

from prometheus_client import CollectorRegistry, Gauge, generate_latest

METRIC_NAME = "aws_trusted_advisor_check"
METRIC_HELP = "AWS Trusted Advisor check result"
LABEL_NAMES = ("checkid", "name", "category", "status")


class LabelTuple(NamedTuple):
    """Coordinates of one exported series, in LABEL_NAMES order."""

    check_id: str
    name: str
    category: str
    status: str


class MetricsSink:
    """Set/clear operations on the check gauge, keyed by label tuple."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self._gauge = Gauge(
            METRIC_NAME,
            METRIC_HELP,
            LABEL_NAMES,
            registry=self.registry,
        )

    def set(self, labels: LabelTuple, value: float) -> None:
        """Upsert a sample, creating the series if absent."""
        self._gauge.labels(*labels).set(value)

    def clear(self, check_id: str, name: str, category: str, status: str) -> None:
        """Remove exactly this series. No-op when it does not exist."""
        try:
            self._gauge.remove(check_id, name, category, status)
        except KeyError:
            pass

    def clear_check(self, check_id: str) -> int:
        """Remove every series for ``check_id``, whatever its name or category.

        Returns the number of series removed.
        """
        stale = [labels for labels in self.snapshot() if labels.check_id == check_id]
        for labels in stale:
            self.clear(*labels)
        return len(stale)

    def check_ids(self) -> set[str]:
        """Check ids that currently have at least one exported series."""
        return {labels.check_id for labels in self.snapshot()}

    def snapshot(self) -> dict[LabelTuple, float]:
        """Copy of every exported series and its value."""
        out: dict[LabelTuple, float] = {}
        for family in self.registry.collect():
            for sample in family.samples:
                if sample.name != METRIC_NAME:
                    continue
                labels = LabelTuple(*(sample.labels[n] for n in LABEL_NAMES))
                out[labels] = sample.value
        return out

    def render(self) -> bytes:
        """Prometheus text exposition of the registry."""
        return generate_latest(self.registry)
