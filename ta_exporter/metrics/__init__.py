"""Metrics subsystem — labeled gauge sink and exposition."""

from .sink import LABEL_NAMES, METRIC_NAME, LabelTuple, MetricsSink
