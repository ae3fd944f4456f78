"""Exporter configuration — loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Trusted Advisor is only served from us-east-1
SUPPORT_REGION = "us-east-1"

# Trusted Advisor supports "en" and "ja"; results are exported in English
LANGUAGE = "en"


def parse_listen_addr(addr: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts.

    An empty host (``":2112"``) binds all interfaces. IPv6 hosts must be
    bracketed (``"[::1]:2112"``).
    """
    host, sep, port_str = addr.strip().rpartition(":")
    if not sep:
        raise ValueError(f"listen address {addr!r} is missing a port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_str)
    except ValueError:
        raise ValueError(f"listen address {addr!r} has a non-numeric port") from None
    if not 0 < port < 65536:
        raise ValueError(f"listen address {addr!r} has an out-of-range port")
    return host or "0.0.0.0", port


class Settings(BaseSettings):
    """Exporter settings. Field names map to upper-case env vars."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # HTTP scrape endpoint
    listen_addr: str = ":2112"

    # Refresh pipeline
    refresh_period: int = Field(default=300, gt=0)  # seconds between cycles
    concurrency: int = Field(default=10, ge=1)  # workers per cycle
    skip_overlapping_cycles: bool = False

    # Per-call connect/read timeout for the AWS Support API
    api_timeout: float = Field(default=30.0, gt=0)

    # Logging
    log_level: str = "INFO"

    @field_validator("listen_addr")
    @classmethod
    def _check_listen_addr(cls, value: str) -> str:
        parse_listen_addr(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @property
    def listen_host(self) -> str:
        return parse_listen_addr(self.listen_addr)[0]

    @property
    def listen_port(self) -> int:
        return parse_listen_addr(self.listen_addr)[1]
