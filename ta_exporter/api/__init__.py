"""HTTP surface — /metrics scrape endpoint and /status."""

from .server import create_app
