"""Prometheus exporter for AWS Trusted Advisor check results."""

__version__ = "0.1.0"
